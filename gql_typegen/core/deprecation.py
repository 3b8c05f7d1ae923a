"""Deprecation status of schema fields and the policy applied to them."""

from dataclasses import dataclass
from enum import Enum

from .errors import ConfigurationError


@dataclass(frozen=True)
class DeprecationStatus:
    """Whether a field is current or deprecated (with an optional reason)."""
    deprecated: bool = False
    reason: str | None = None

    @classmethod
    def current(cls) -> "DeprecationStatus":
        return cls()

    @classmethod
    def deprecated_because(cls, reason: str | None = None) -> "DeprecationStatus":
        return cls(deprecated=True, reason=reason)


CURRENT = DeprecationStatus.current()


class DeprecationStrategy(Enum):
    """How deprecated fields surface in generated types."""
    ALLOW = "allow"  # Emit the field as if it were current
    DENY = "deny"    # Leave the field out of the generated type
    WARN = "warn"    # Emit the field with a deprecation marker

    @classmethod
    def parse(cls, value: "str | DeprecationStrategy | None") -> "DeprecationStrategy":
        """Parse a strategy name, case-insensitively. ``None`` means ``WARN``."""
        if value is None:
            return cls.WARN
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ConfigurationError(
                f"Unknown deprecation strategy {value!r} (expected one of: {choices})"
            ) from None
