"""Naming helpers for generated identifiers."""

import keyword
import re

# Attributes of pydantic's BaseModel that a generated field must not shadow
MODEL_ATTRIBUTES = {
    "construct", "copy", "dict", "json", "schema", "schema_json", "validate",
    "parse_obj", "parse_raw", "from_orm", "update_forward_refs",
    "model_config", "model_fields", "model_computed_fields", "model_extra",
    "model_fields_set", "model_construct", "model_copy", "model_dump",
    "model_dump_json", "model_json_schema", "model_post_init", "model_rebuild",
    "model_validate", "model_validate_json",
}

# Modules the generated code refers to by name
GENERATED_MODULE_NAMES = {"enum", "typing", "pydantic"}

RESERVED_NAMES = (
    set(keyword.kwlist) | set(keyword.softkwlist) | MODEL_ATTRIBUTES | GENERATED_MODULE_NAMES
)


def snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def pascal_case(name: str) -> str:
    """Convert snake_case or camelCase to PascalCase."""
    snake = snake_case(name)
    return "".join(word[:1].upper() + word[1:] for word in snake.split("_"))


def escape_keyword(name: str) -> str:
    """Suffix reserved names with an underscore."""
    if name in RESERVED_NAMES:
        return f"{name}_"
    return name


def field_name(name: str) -> str:
    """Return the generated attribute name for a schema field or alias.

    Leading underscores are dropped since they mark private attributes
    (``__typename`` becomes ``typename``).
    """
    converted = snake_case(name).lstrip("_") or "field"
    return escape_keyword(converted)


def rename_for(original: str, generated: str) -> str | None:
    """Return the wire name to key on when it differs from the generated one."""
    return original if original != generated else None


def nested_type_name(prefix: str, output_name: str) -> str:
    """Name a nested response shape: ``AllCats`` + ``offsprings``."""
    return f"{pascal_case(prefix)}{pascal_case(output_name)}"


def module_name(name: str) -> str:
    return escape_keyword(snake_case(name))
