"""Synthesized type definitions.

This is the language-agnostic model handed to an emitter: named type
definitions with target-cased field names, wire-name renames, descriptions
and deprecation markers, grouped into per-operation namespaces.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .field_type import FieldType

# Built-in scalars emitted as primitive aliases at the top of every module
PRIMITIVE_ALIASES = ("Boolean", "Float", "Int", "ID")


class Visibility(Enum):
    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class DeprecationMarker:
    """Attached to a field emitted under the WARN strategy."""
    reason: str | None = None


@dataclass
class FieldDefinition:
    """A field of a generated struct."""
    name: str  # Target-cased, keyword-escaped
    type: FieldType  # Named nodes hold generated type names
    rename: str | None = None  # Wire name when it differs from ``name``
    description: str | None = None
    deprecation: DeprecationMarker | None = None
    # The referenced type's fields are promoted into the parent on the wire
    flatten: bool = False
    # Stored behind an indirection (recursive input objects)
    indirect: bool = False
    default: Any = None
    has_default: bool = False

    @property
    def wire_name(self) -> str:
        return self.rename or self.name


@dataclass
class StructDefinition:
    """A structured type: response shape, fragment, input object or variables."""
    name: str
    fields: list[FieldDefinition]
    role: str  # 'response', 'fragment', 'input' or 'variables'
    description: str | None = None
    derives: list[str] = field(default_factory=list)
    # Discriminator value when this struct is a variant of a tagged union
    tag: str | None = None


@dataclass
class VariantDefinition:
    type_name: str  # Value of the discriminator, e.g. "Dog"
    shape: str  # Name of the StructDefinition holding the variant's fields


@dataclass
class UnionDefinition:
    """A tagged union of response shapes discriminated by ``discriminator``."""
    name: str
    variants: list[VariantDefinition]
    discriminator: str = "__typename"
    derives: list[str] = field(default_factory=list)


@dataclass
class EnumDefinition:
    name: str
    variants: list[str]
    description: str | None = None
    variant_descriptions: dict[str, str] = field(default_factory=dict)
    derives: list[str] = field(default_factory=list)


@dataclass
class ScalarDefinition:
    """An opaque alias for a custom scalar."""
    name: str
    description: str | None = None


TypeDefinition = Union[StructDefinition, UnionDefinition, EnumDefinition, ScalarDefinition]


@dataclass
class OperationBinding:
    """Everything a runtime needs to build a request and parse its response."""
    operation_name: str
    operation_type: str
    variables_type: str
    response_type: str
    query: str


@dataclass
class SharedDefinitions:
    """Types required by any operation of the document, in emission order."""
    scalars: list[ScalarDefinition] = field(default_factory=list)
    inputs: list[StructDefinition] = field(default_factory=list)
    enums: list[EnumDefinition] = field(default_factory=list)
    fragments: list[TypeDefinition] = field(default_factory=list)

    def all(self) -> list[TypeDefinition]:
        return [*self.scalars, *self.inputs, *self.enums, *self.fragments]


@dataclass
class OperationNamespace:
    """The definitions specific to one operation."""
    name: str  # Namespace (module) name
    binding: OperationBinding
    shapes: list[TypeDefinition]  # Nested response shapes in resolution order
    variables: StructDefinition
    response: StructDefinition

    def definitions(self) -> list[TypeDefinition]:
        return [*self.shapes, self.variables, self.response]


@dataclass
class CompiledModule:
    """One compiled query document."""
    name: str
    query: str
    visibility: Visibility
    shared: SharedDefinitions
    operations: list[OperationNamespace]
    primitives: tuple[str, ...] = PRIMITIVE_ALIASES

    @property
    def multiple_operations(self) -> bool:
        return len(self.operations) > 1

    def definitions_for(self, namespace: OperationNamespace) -> list[TypeDefinition]:
        """All type definitions of an operation namespace, in emission order."""
        return [*self.shared.all(), *namespace.definitions()]

    def type_names_for(self, namespace: OperationNamespace) -> list[str]:
        return [*self.primitives, *(d.name for d in self.definitions_for(namespace))]
