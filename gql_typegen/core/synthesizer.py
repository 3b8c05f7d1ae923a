"""Type synthesizer.

Turns required schema entities (enums, custom scalars, input objects) and
resolved selections into language-agnostic type definitions.
"""

import logging

from .context import QueryContext
from .deprecation import DeprecationStatus, DeprecationStrategy
from .field_type import FieldType, NamedType, inner_name, is_indirected
from .ir import TYPENAME_FIELD, IREnum, IRInput, IRScalar
from .naming import field_name, rename_for
from .output import (
    DeprecationMarker,
    EnumDefinition,
    FieldDefinition,
    ScalarDefinition,
    StructDefinition,
    TypeDefinition,
    UnionDefinition,
    VariantDefinition,
)
from .query import Operation
from .resolver import ResolvedField, ResolvedItem, ResolvedShape, ResolvedSpread

logger = logging.getLogger(__name__)


def unique_field_names(
    fields: list[FieldDefinition], reserved: frozenset[str] = frozenset()
) -> list[FieldDefinition]:
    """Suffix generated names that clash with an earlier field or a reserved name.

    A suffixed field keys on its original wire name. Flattened fields have no
    wire name and are only renamed.
    """
    taken = set(reserved)
    for fdef in fields:
        if fdef.name in taken:
            wire_name = fdef.wire_name
            name = fdef.name
            while name in taken:
                name += "_"
            logger.debug("Renaming clashing field %s to %s", fdef.name, name)
            if not fdef.flatten:
                fdef.rename = wire_name
            fdef.name = name
        taken.add(fdef.name)
    return fields


class TypeSynthesizer:
    """Builds type definitions for one compilation."""

    def __init__(self, context: QueryContext):
        self.context = context

    def render_object_field(
        self,
        output_name: str,
        field_type: FieldType,
        description: str | None,
        status: DeprecationStatus,
    ) -> FieldDefinition | None:
        """Render one response field, or None when the strategy denies it."""
        strategy = self.context.deprecation_strategy
        deprecation = None
        if status.deprecated:
            if strategy is DeprecationStrategy.DENY:
                return None
            if strategy is DeprecationStrategy.WARN:
                deprecation = DeprecationMarker(reason=status.reason)

        name = field_name(output_name)
        return FieldDefinition(
            name=name,
            type=field_type,
            rename=rename_for(output_name, name),
            description=description,
            deprecation=deprecation,
        )

    def response_fields_for_selection(self, items: list[ResolvedItem]) -> list[FieldDefinition]:
        """Render the fields of a resolved selection, dropping denied ones."""
        fields = []
        for item in items:
            if isinstance(item, ResolvedSpread):
                fields.append(
                    FieldDefinition(
                        name=field_name(item.fragment_name),
                        type=NamedType(item.fragment_name),
                        flatten=True,
                    )
                )
                continue
            rendered = self.render_object_field(
                item.output_name,
                item.type,
                item.schema_field.description,
                item.schema_field.deprecation,
            )
            if rendered is not None:
                fields.append(rendered)
        return fields

    def shape_definitions(self, shape: ResolvedShape, role: str = "response") -> list[TypeDefinition]:
        """Definitions for a resolved shape, nested shapes first.

        ``role`` applies to the top-level struct only; nested shapes are
        always response shapes.
        """
        if shape.kind == "union":
            definitions = self._variant_definitions(shape)
            definitions.append(self._union_definition(shape))
            return definitions

        definitions = self._nested_definitions(shape.items)
        fields = self.response_fields_for_selection(shape.items)
        if shape.is_polymorphic:
            definitions.extend(self._variant_definitions(shape))
            definitions.append(self._union_definition(shape))
            fields.append(
                FieldDefinition(name="on", type=NamedType(shape.union_name), flatten=True)
            )

        definitions.append(
            StructDefinition(
                name=shape.name,
                fields=unique_field_names(fields),
                role=role,
                description=self._type_description(shape.type_name) if role == "fragment" else None,
                derives=self.context.response_derives(),
            )
        )
        return definitions

    def _nested_definitions(self, items: list[ResolvedItem]) -> list[TypeDefinition]:
        definitions: list[TypeDefinition] = []
        for item in items:
            if not isinstance(item, ResolvedField) or item.shape is None:
                continue
            if self._is_denied(item):
                continue
            definitions.extend(self.shape_definitions(item.shape))
        return definitions

    def _variant_definitions(self, shape: ResolvedShape) -> list[TypeDefinition]:
        definitions: list[TypeDefinition] = []
        for variant in shape.variants:
            definitions.extend(self._nested_definitions(variant.items))
            definitions.append(
                StructDefinition(
                    name=variant.shape_name,
                    fields=unique_field_names(
                        self.response_fields_for_selection(variant.items),
                        reserved=self._injected_typename(variant.items),
                    ),
                    role="response",
                    derives=self.context.response_derives(),
                    tag=variant.type_name,
                )
            )
        return definitions

    @staticmethod
    def _injected_typename(items: list[ResolvedItem]) -> frozenset[str]:
        # Variants without a selected __typename get a ``typename`` attribute
        if any(isinstance(i, ResolvedField) and i.output_name == TYPENAME_FIELD for i in items):
            return frozenset()
        return frozenset({"typename"})

    def _union_definition(self, shape: ResolvedShape) -> UnionDefinition:
        return UnionDefinition(
            name=shape.union_name,
            variants=[
                VariantDefinition(type_name=v.type_name, shape=v.shape_name)
                for v in shape.variants
            ],
            derives=self.context.response_derives(),
        )

    def _is_denied(self, item: ResolvedField) -> bool:
        return (
            item.schema_field.deprecation.deprecated
            and self.context.deprecation_strategy is DeprecationStrategy.DENY
        )

    def _type_description(self, type_name: str) -> str | None:
        schema_type = self.context.schema.lookup(type_name)
        return getattr(schema_type, "description", None)

    def enum_definition(self, enm: IREnum) -> EnumDefinition:
        return EnumDefinition(
            name=enm.name,
            variants=[v.name for v in enm.values],
            description=enm.description,
            variant_descriptions={v.name: v.description for v in enm.values if v.description},
            derives=self.context.response_derives(),
        )

    @staticmethod
    def scalar_definition(scalar: IRScalar) -> ScalarDefinition:
        return ScalarDefinition(name=scalar.name, description=scalar.description)

    def input_definition(self, schema_input: IRInput) -> StructDefinition:
        """Mirror an input object's fields in declaration order.

        A field naming the input object itself is stored indirectly unless a
        list already provides the indirection.
        """
        fields = []
        for ir_field in schema_input.fields.values():
            name = field_name(ir_field.name)
            recursive = inner_name(ir_field.type) == schema_input.name
            fields.append(
                FieldDefinition(
                    name=name,
                    type=ir_field.type,
                    rename=rename_for(ir_field.name, name),
                    description=ir_field.description,
                    indirect=recursive and not is_indirected(ir_field.type),
                    default=ir_field.default_value,
                    has_default=ir_field.default_value is not None,
                )
            )
            if fields[-1].indirect:
                logger.debug("Boxing recursive field %s.%s", schema_input.name, ir_field.name)
        return StructDefinition(
            name=schema_input.name,
            fields=unique_field_names(fields),
            role="input",
            description=schema_input.description,
            derives=self.context.variables_derives(),
        )

    def variables_definition(self, operation: Operation, name: str) -> StructDefinition:
        fields = []
        for variable in operation.variables:
            generated = field_name(variable.name)
            fields.append(
                FieldDefinition(
                    name=generated,
                    type=variable.type,
                    rename=rename_for(variable.name, generated),
                    default=variable.default_value,
                    has_default=variable.default_value is not None,
                )
            )
        return StructDefinition(
            name=name,
            fields=unique_field_names(fields),
            role="variables",
            derives=self.context.variables_derives(),
        )
