"""Lazy reachability marking.

Schema entities that become their own emitted type (enums, custom scalars,
input objects and fragments) are emitted only once resolution references
them. The marks live here, in one tracker per compilation, and never on the
schema model itself.
"""

import logging

from .field_type import inner_name
from .ir import IRInput, IRSchema

logger = logging.getLogger(__name__)


class ReachabilityTracker:
    """Set of required type and fragment names for one compilation."""

    def __init__(self, schema: IRSchema):
        self.schema = schema
        self.required_types: set[str] = set()
        self.required_fragments: set[str] = set()

    def require(self, name: str):
        """Mark a named type (and everything it structurally contains) required.

        Only enums, custom scalars and input objects are tracked; other names
        are ignored. Marking an already required name is a no-op, which also
        stops recursion through self-referencing input objects.
        """
        if name in self.required_types:
            return

        if name in self.schema.enums or name in self.schema.scalars:
            self.required_types.add(name)
            logger.debug("Required %s", name)
            return

        schema_input = self.schema.inputs.get(name)
        if isinstance(schema_input, IRInput):
            self.required_types.add(name)
            logger.debug("Required input %s", name)
            for ir_field in schema_input.fields.values():
                self.require(inner_name(ir_field.type))

    def require_fragment(self, name: str) -> bool:
        """Mark a fragment required. Returns True the first time only."""
        if name in self.required_fragments:
            return False
        self.required_fragments.add(name)
        logger.debug("Required fragment %s", name)
        return True

    def is_required(self, name: str) -> bool:
        return name in self.required_types

    def is_fragment_required(self, name: str) -> bool:
        return name in self.required_fragments
