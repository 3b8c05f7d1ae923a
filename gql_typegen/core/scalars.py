"""Python types for custom GraphQL scalars.

The synthesizer emits custom scalars as opaque aliases. When rendering Python,
the generator looks each one up here to decide what it aliases; scalars
without a registered handler alias ``typing.Any``.

Example usage:
    from gql_typegen.core.scalars import ScalarHandler, ScalarRegistry

    class MoneyHandler:
        python_type = "Decimal"
        import_statement = "from decimal import Decimal"

    registry = ScalarRegistry()
    registry.register("Money", MoneyHandler())
"""

from typing import Protocol, runtime_checkable

FALLBACK_TYPE = "typing.Any"


@runtime_checkable
class ScalarHandler(Protocol):
    """Protocol for custom scalar handlers.

    Attributes:
        python_type: The Python type expression (e.g., "datetime", "Decimal")
        import_statement: The import needed for this type (e.g., "from datetime import datetime")
    """

    python_type: str
    import_statement: str


class DateTimeHandler:
    """ISO 8601 date-times, parsed by pydantic into ``datetime``."""

    python_type = "datetime"
    import_statement = "from datetime import datetime"


class DateHandler:
    """ISO 8601 dates."""

    python_type = "date"
    import_statement = "from datetime import date"


class UUIDHandler:
    python_type = "UUID"
    import_statement = "from uuid import UUID"


class JSONHandler:
    """Arbitrary JSON values, passed through unchanged."""

    python_type = "typing.Any"
    import_statement = "import typing"


class ScalarRegistry:
    """Registry for custom scalar handlers.

    Manages the mapping between GraphQL scalar names and their handlers.

    Example:
        registry = ScalarRegistry()
        registry.python_type("DateTime")  # "datetime"
        registry.python_type("Cursor")    # "typing.Any"
    """

    def __init__(self):
        self._handlers: dict[str, ScalarHandler] = {}
        # Register default handlers
        self._register_defaults()

    def _register_defaults(self):
        """Register built-in default handlers."""
        self.register("DateTime", DateTimeHandler())
        self.register("Date", DateHandler())
        self.register("UUID", UUIDHandler())
        self.register("JSON", JSONHandler())
        self.register("JSONObject", JSONHandler())

    def register(self, scalar_name: str, handler: ScalarHandler):
        """Register a handler for a scalar type."""
        self._handlers[scalar_name] = handler

    def get(self, scalar_name: str) -> ScalarHandler | None:
        """Get the handler for a scalar type, or None if not registered."""
        return self._handlers.get(scalar_name)

    def has(self, scalar_name: str) -> bool:
        """Check if a handler is registered for a scalar type."""
        return scalar_name in self._handlers

    def python_type(self, scalar_name: str) -> str:
        handler = self.get(scalar_name)
        return handler.python_type if handler else FALLBACK_TYPE

    def imports_for(self, scalar_names: list[str]) -> list[str]:
        """Import statements needed by the given scalars, sorted and de-duplicated."""
        return sorted(
            {
                self._handlers[name].import_statement
                for name in scalar_names
                if name in self._handlers
            }
        )
