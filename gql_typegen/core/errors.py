"""Exceptions raised while loading sources and compiling query modules.

Every error aborts the compilation of the affected module; nothing is
downgraded to a warning.
"""


class TypegenError(Exception):
    """Base class for all gql-typegen errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(TypegenError):
    """Invalid driver configuration (unsupported schema extension, missing file...)."""


class SchemaFormatError(TypegenError):
    """The schema source could not be parsed or is of an unsupported shape."""


class SerializationError(SchemaFormatError):
    """An introspection payload is missing required sub-fields."""


class QuerySyntaxError(TypegenError):
    """The query document could not be parsed."""


class ResolutionError(TypegenError):
    """Base class for errors raised while resolving a selection."""


class UnknownTypeError(ResolutionError):
    """A root type or a referenced named type is absent from the schema."""

    def __init__(self, type_name: str, context: str | None = None):
        self.type_name = type_name
        self.context = context
        message = f"Unknown type `{type_name}`"
        if context:
            message = f"{message} ({context})"
        super().__init__(f"{message}.")


class UnknownFieldError(ResolutionError):
    """A selected field does not exist on the containing type."""

    def __init__(self, field_name: str, type_name: str, available: list[str]):
        self.field_name = field_name
        self.type_name = type_name
        self.available = available
        super().__init__(
            f"Could not find field `{field_name}` on `{type_name}`. "
            f"Available fields: `{'`, `'.join(available)}`."
        )


class UnknownFragmentError(ResolutionError):
    """A fragment spread references a fragment the document does not declare."""

    def __init__(self, fragment_name: str):
        self.fragment_name = fragment_name
        super().__init__(f"Unknown fragment `{fragment_name}`.")


class UnsupportedSelectionError(ResolutionError, NotImplementedError):
    """The selection has a shape the resolver does not support."""


class MissingTypenameError(ResolutionError):
    """A polymorphic selection does not select `__typename`."""

    def __init__(self, type_name: str, prefix: str):
        self.type_name = type_name
        self.prefix = prefix
        super().__init__(
            f"Missing __typename in selection for {prefix} (type: {type_name})."
        )


class GenerationError(TypegenError):
    """A template rendered invalid Python."""

    def __init__(self, filename: str, template_name: str, error: SyntaxError):
        self.filename = filename
        self.template_name = template_name
        self.error = error
        super().__init__(
            f"Generated invalid Python for {filename}: {error}\nTemplate: {template_name}"
        )
