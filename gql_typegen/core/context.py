"""Per-compilation state shared by the resolver and the synthesizer."""

import re

from .deprecation import DeprecationStrategy
from .errors import ConfigurationError
from .ir import IRSchema
from .query import Fragment
from .reachability import ReachabilityTracker

DEFAULT_RESPONSE_DERIVES = ("Deserialize",)
DEFAULT_VARIABLES_DERIVES = ("Serialize",)

_DERIVE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class QueryContext:
    """Schema, fragments, options and reachability marks of one compilation."""

    def __init__(
        self,
        schema: IRSchema,
        fragments: dict[str, Fragment] | None = None,
        deprecation_strategy: DeprecationStrategy = DeprecationStrategy.WARN,
    ):
        self.schema = schema
        self.fragments = fragments or {}
        self.deprecation_strategy = deprecation_strategy
        self.tracker = ReachabilityTracker(schema)
        self._additional_derives: list[str] = []

    def ingest_additional_derives(self, value: str | list[str] | None):
        """Merge extra derive names (comma-separated or a list) onto every type."""
        if not value:
            return
        names = value.split(",") if isinstance(value, str) else value
        for name in (n.strip() for n in names):
            if not name:
                continue
            if not _DERIVE_NAME.match(name):
                raise ConfigurationError(f"Invalid derive name {name!r}")
            if name not in self._additional_derives:
                self._additional_derives.append(name)

    def response_derives(self) -> list[str]:
        return self._merge(DEFAULT_RESPONSE_DERIVES)

    def variables_derives(self) -> list[str]:
        return self._merge(DEFAULT_VARIABLES_DERIVES)

    def _merge(self, defaults: tuple[str, ...]) -> list[str]:
        return [*defaults, *(d for d in self._additional_derives if d not in defaults)]
