"""Field-type descriptors.

A small recursive algebra describing the declared type of a schema field or
variable, independent of the source format it was read from:

    [Cat!]   ->  OptionalType(ListType(NamedType("Cat")))
    Float!   ->  NamedType("Float")

The absence of ``OptionalType`` at a nesting level means "non-null" at that
level. The innermost node is always a ``NamedType``.
"""

from dataclasses import dataclass
from typing import Callable, Union

from graphql import ListTypeNode, NamedTypeNode, NonNullTypeNode, TypeNode


@dataclass(frozen=True)
class NamedType:
    name: str

    def __str__(self) -> str:
        return f"{self.name}!"


@dataclass(frozen=True)
class ListType:
    inner: "FieldType"

    def __str__(self) -> str:
        return f"[{self.inner}]!"


@dataclass(frozen=True)
class OptionalType:
    inner: "FieldType"

    def __str__(self) -> str:
        # Drop the non-null marker of the wrapped level
        return str(self.inner)[:-1]


FieldType = Union[NamedType, ListType, OptionalType]


def inner_name(field_type: FieldType) -> str:
    """Return the name of the innermost named type."""
    while not isinstance(field_type, NamedType):
        field_type = field_type.inner
    return field_type.name


def is_optional(field_type: FieldType) -> bool:
    return isinstance(field_type, OptionalType)


def is_indirected(field_type: FieldType) -> bool:
    """Check whether the value is already stored behind an indirection.

    A list holds its items out of line. An optional is not an indirection by
    itself, so it defers to the type it wraps.
    """
    if isinstance(field_type, ListType):
        return True
    if isinstance(field_type, OptionalType):
        return is_indirected(field_type.inner)
    return False


def rename_inner(field_type: FieldType, new_name: str) -> FieldType:
    """Return a copy of the descriptor with the innermost name replaced."""
    return map_inner(field_type, lambda _name: new_name)


def map_inner(field_type: FieldType, fn: Callable[[str], str]) -> FieldType:
    if isinstance(field_type, NamedType):
        return NamedType(fn(field_type.name))
    if isinstance(field_type, ListType):
        return ListType(map_inner(field_type.inner, fn))
    return OptionalType(map_inner(field_type.inner, fn))


def from_type_node(node: TypeNode, nullable: bool = True) -> FieldType:
    """Build a descriptor from a graphql-core AST type node."""
    if isinstance(node, NonNullTypeNode):
        return from_type_node(node.type, nullable=False)

    if isinstance(node, ListTypeNode):
        result: FieldType = ListType(from_type_node(node.type))
    elif isinstance(node, NamedTypeNode):
        result = NamedType(node.name.value)
    else:
        raise TypeError(f"Unexpected type node {type(node).__name__}")

    return OptionalType(result) if nullable else result
