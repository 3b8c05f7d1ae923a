"""GraphQL schema-definition parser using graphql-core.

Parses SDL text and produces an IRSchema.
"""

import logging
from typing import Protocol, runtime_checkable

from graphql import (
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    GraphQLSyntaxError,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    SchemaDefinitionNode,
    StringValueNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
    parse,
    value_from_ast_untyped,
)

from .deprecation import CURRENT, DeprecationStatus
from .errors import SchemaFormatError
from .field_type import from_type_node
from .ir import (
    IREnum,
    IREnumValue,
    IRField,
    IRInput,
    IRInterface,
    IRObject,
    IRScalar,
    IRSchema,
    IRUnion,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class SchemaSource(Protocol):
    """A schema in some source format that converts to the canonical IR."""

    def to_ir(self) -> IRSchema:
        ...


def build_schema_model(source: SchemaSource) -> IRSchema:
    """Build the canonical schema model from any supported source."""
    ir = source.to_ir()
    ir.link_interfaces()
    logger.debug(
        "Schema model: %d objects, %d interfaces, %d unions, %d enums, "
        "%d scalars, %d inputs",
        len(ir.objects),
        len(ir.interfaces),
        len(ir.unions),
        len(ir.enums),
        len(ir.scalars),
        len(ir.inputs),
    )
    return ir


def _description(node) -> str | None:
    description = getattr(node, "description", None)
    return description.value if description else None


def _deprecation(node) -> DeprecationStatus:
    """Read the ``@deprecated`` directive of a field or enum value node."""
    for directive in node.directives or ():
        if directive.name.value != "deprecated":
            continue
        for arg in directive.arguments:
            if arg.name.value == "reason" and isinstance(arg.value, StringValueNode):
                return DeprecationStatus.deprecated_because(arg.value.value)
        return DeprecationStatus.deprecated_because(None)
    return CURRENT


class SDLSource:
    """Schema-definition text (``.graphql`` / ``.gql`` files)."""

    def __init__(self, text: str, name: str = "<schema>"):
        self.text = text
        self.name = name
        self.ir = IRSchema()

    def to_ir(self) -> IRSchema:
        """Parse the SDL text and return the complete IR."""
        try:
            ast = parse(self.text, no_location=True)
        except GraphQLSyntaxError as e:
            logger.error("Error parsing %s: %s", self.name, e.message)
            raise SchemaFormatError(f"Could not parse schema {self.name}: {e.message}") from e

        self.ir = IRSchema()
        self._process_ast(ast)
        return self.ir

    def _process_ast(self, ast):
        """Process GraphQL AST and populate IR."""
        for definition in ast.definitions:
            if isinstance(definition, SchemaDefinitionNode):
                self._process_schema_definition(definition)
            elif isinstance(definition, ScalarTypeDefinitionNode):
                self._process_scalar(definition)
            elif isinstance(definition, (EnumTypeDefinitionNode, EnumTypeExtensionNode)):
                self._process_enum(definition)
            elif isinstance(
                definition, (InterfaceTypeDefinitionNode, InterfaceTypeExtensionNode)
            ):
                self._process_interface(definition)
            elif isinstance(definition, (ObjectTypeDefinitionNode, ObjectTypeExtensionNode)):
                self._process_object_type(definition)
            elif isinstance(definition, (UnionTypeDefinitionNode, UnionTypeExtensionNode)):
                self._process_union(definition)
            elif isinstance(
                definition, (InputObjectTypeDefinitionNode, InputObjectTypeExtensionNode)
            ):
                self._process_input_type(definition)

    def _process_schema_definition(self, node: SchemaDefinitionNode):
        for op_type in node.operation_types:
            root_name = op_type.type.name.value
            kind = op_type.operation.value
            if kind == "query":
                self.ir.query_type = root_name
            elif kind == "mutation":
                self.ir.mutation_type = root_name
            else:
                self.ir.subscription_type = root_name

    def _process_scalar(self, node: ScalarTypeDefinitionNode):
        name = node.name.value
        if IRSchema.is_builtin_scalar(name):
            return
        self.ir.scalars[name] = IRScalar(name=name, description=_description(node))

    def _process_enum(self, node):
        name = node.name.value
        values = [
            IREnumValue(
                name=v.name.value,
                description=_description(v),
                deprecation=_deprecation(v),
            )
            for v in node.values or ()
        ]
        existing = self.ir.enums.get(name)
        if existing is not None:
            known = {v.name for v in existing.values}
            existing.values.extend(v for v in values if v.name not in known)
            return
        self.ir.enums[name] = IREnum(
            name=name,
            values=values,
            description=_description(node),
        )

    def _process_interface(self, node):
        name = node.name.value
        fields = self._process_fields(node.fields)
        existing = self.ir.interfaces.get(name)
        if existing is not None:
            self._merge_fields(existing.fields, fields)
            return
        self.ir.interfaces[name] = IRInterface(
            name=name,
            fields=fields,
            description=_description(node),
        )

    def _process_object_type(self, node):
        """Process object definitions and 'extend type' definitions.

        Extensions may be processed before the base definition, so both
        merge into whatever is already registered under the name.
        """
        name = node.name.value
        fields = self._process_fields(node.fields)
        interfaces = [i.name.value for i in node.interfaces or ()]

        existing = self.ir.objects.get(name)
        if existing is not None:
            self._merge_fields(existing.fields, fields)
            for iface in interfaces:
                if iface not in existing.interfaces:
                    existing.interfaces.append(iface)
            if _description(node):
                existing.description = _description(node)
            return

        self.ir.objects[name] = IRObject(
            name=name,
            fields=fields,
            interfaces=interfaces,
            description=_description(node),
        )

    def _process_union(self, node):
        name = node.name.value
        members = [t.name.value for t in node.types or ()]
        existing = self.ir.unions.get(name)
        if existing is not None:
            existing.members.extend(m for m in members if m not in existing.members)
            return
        self.ir.unions[name] = IRUnion(
            name=name,
            members=members,
            description=_description(node),
        )

    def _process_input_type(self, node):
        name = node.name.value
        fields = self._process_fields(node.fields)
        existing = self.ir.inputs.get(name)
        if existing is not None:
            self._merge_fields(existing.fields, fields)
            return
        self.ir.inputs[name] = IRInput(
            name=name,
            fields=fields,
            description=_description(node),
        )

    @staticmethod
    def _merge_fields(existing: dict[str, IRField], extension: dict[str, IRField]):
        """Add extension fields, keeping fields that are already defined."""
        for field_name, ir_field in extension.items():
            existing.setdefault(field_name, ir_field)

    @staticmethod
    def _process_fields(field_nodes) -> dict[str, IRField]:
        """Process field (or input value) definitions into IRFields."""
        fields = {}
        for node in field_nodes or ():
            default_node = getattr(node, "default_value", None)
            fields[node.name.value] = IRField(
                name=node.name.value,
                type=from_type_node(node.type),
                description=_description(node),
                deprecation=_deprecation(node),
                default_value=value_from_ast_untyped(default_node) if default_node else None,
            )
        return fields
