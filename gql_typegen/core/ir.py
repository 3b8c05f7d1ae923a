"""Intermediate Representation (IR) for GraphQL schemas.

This module defines dataclasses that represent GraphQL schema constructs
in a source-format-agnostic way. Both the SDL parser and the introspection
loader produce an ``IRSchema``; later stages only ever call ``lookup``.
"""

from dataclasses import dataclass, field

from .deprecation import CURRENT, DeprecationStatus
from .field_type import FieldType, NamedType

# GraphQL built-in scalars. They are never stored as schema scalars.
BUILTIN_SCALARS = ("String", "Int", "Float", "Boolean", "ID")

TYPENAME_FIELD = "__typename"


@dataclass
class IRField:
    """Represents a field of an object, interface or input object."""
    name: str
    type: FieldType
    description: str | None = field(default=None, compare=False)
    deprecation: DeprecationStatus = field(default=CURRENT, compare=False)
    # Only set on input object fields and variables
    default_value: object = field(default=None, compare=False)


def typename_field() -> IRField:
    return IRField(name=TYPENAME_FIELD, type=NamedType("String"))


@dataclass
class IRObject:
    """Represents a GraphQL object type."""
    name: str
    fields: dict[str, IRField]
    interfaces: list[str] = field(default_factory=list)
    description: str | None = None

    def __post_init__(self):
        self.fields.setdefault(TYPENAME_FIELD, typename_field())


@dataclass
class IRInterface:
    """Represents a GraphQL interface type."""
    name: str
    fields: dict[str, IRField]
    description: str | None = None
    # Populated once the whole schema is loaded
    implemented_by: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.fields.setdefault(TYPENAME_FIELD, typename_field())


@dataclass
class IRUnion:
    """Represents a GraphQL union type."""
    name: str
    members: list[str]
    description: str | None = None


@dataclass
class IREnumValue:
    """Represents a single value in a GraphQL enum."""
    name: str
    description: str | None = None
    deprecation: DeprecationStatus = CURRENT


@dataclass
class IREnum:
    """Represents a GraphQL enum type."""
    name: str
    values: list[IREnumValue]
    description: str | None = None


@dataclass
class IRScalar:
    """Represents a custom GraphQL scalar type."""
    name: str
    description: str | None = None


@dataclass
class IRInput:
    """Represents a GraphQL input object type."""
    name: str
    fields: dict[str, IRField]
    description: str | None = None


SchemaType = IRObject | IRInterface | IRUnion | IREnum | IRScalar | IRInput


@dataclass
class IRSchema:
    """Complete intermediate representation of a GraphQL schema."""
    scalars: dict[str, IRScalar] = field(default_factory=dict)
    enums: dict[str, IREnum] = field(default_factory=dict)
    objects: dict[str, IRObject] = field(default_factory=dict)
    interfaces: dict[str, IRInterface] = field(default_factory=dict)
    unions: dict[str, IRUnion] = field(default_factory=dict)
    inputs: dict[str, IRInput] = field(default_factory=dict)

    query_type: str = "Query"
    mutation_type: str = "Mutation"
    subscription_type: str = "Subscription"

    def lookup(self, name: str) -> SchemaType | None:
        """Look up any named type."""
        for registry in (
            self.objects,
            self.interfaces,
            self.unions,
            self.enums,
            self.scalars,
            self.inputs,
        ):
            if name in registry:
                return registry[name]
        return None

    def root_type_name(self, operation_type: str) -> str:
        """Return the root type name for 'query', 'mutation' or 'subscription'."""
        return {
            "query": self.query_type,
            "mutation": self.mutation_type,
            "subscription": self.subscription_type,
        }[operation_type]

    def link_interfaces(self):
        """Record on each interface the objects implementing it."""
        for iface in self.interfaces.values():
            iface.implemented_by = []
        for obj in self.objects.values():
            for iface_name in obj.interfaces:
                iface = self.interfaces.get(iface_name)
                if iface is not None and obj.name not in iface.implemented_by:
                    iface.implemented_by.append(obj.name)

    @staticmethod
    def is_builtin_scalar(name: str) -> bool:
        return name in BUILTIN_SCALARS
