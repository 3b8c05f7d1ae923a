"""Introspection-result loader.

Validates an introspection query result (``.json`` schema files) with pydantic
models and converts it into an IRSchema. Accepts the full response envelope
``{"data": {"__schema": ...}}`` as well as a bare ``{"__schema": ...}``.
"""

import json
import logging
from typing import Any

from graphql import GraphQLError, parse_value, value_from_ast_untyped
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .deprecation import CURRENT, DeprecationStatus
from .errors import SchemaFormatError, SerializationError
from .field_type import FieldType, ListType, NamedType, OptionalType
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


class _IntrospectionModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TypeRef(_IntrospectionModel):
    kind: str
    name: str | None = None
    of_type: "TypeRef | None" = Field(default=None, alias="ofType")


class InputValue(_IntrospectionModel):
    name: str
    description: str | None = None
    type: TypeRef
    default_value: str | None = Field(default=None, alias="defaultValue")


class FieldDef(_IntrospectionModel):
    name: str
    description: str | None = None
    args: list[InputValue] = Field(default_factory=list)
    type: TypeRef
    is_deprecated: bool = Field(default=False, alias="isDeprecated")
    deprecation_reason: str | None = Field(default=None, alias="deprecationReason")


class EnumValue(_IntrospectionModel):
    name: str
    description: str | None = None
    is_deprecated: bool = Field(default=False, alias="isDeprecated")
    deprecation_reason: str | None = Field(default=None, alias="deprecationReason")


class FullType(_IntrospectionModel):
    kind: str
    name: str | None = None
    description: str | None = None
    fields: list[FieldDef] | None = None
    input_fields: list[InputValue] | None = Field(default=None, alias="inputFields")
    interfaces: list[TypeRef] | None = None
    enum_values: list[EnumValue] | None = Field(default=None, alias="enumValues")
    possible_types: list[TypeRef] | None = Field(default=None, alias="possibleTypes")


class RootTypeRef(_IntrospectionModel):
    name: str


class SchemaPayload(_IntrospectionModel):
    query_type: RootTypeRef | None = Field(default=None, alias="queryType")
    mutation_type: RootTypeRef | None = Field(default=None, alias="mutationType")
    subscription_type: RootTypeRef | None = Field(default=None, alias="subscriptionType")
    types: list[FullType]


class IntrospectionQuery(_IntrospectionModel):
    schema_: SchemaPayload = Field(alias="__schema")


def type_ref_to_field_type(ref: TypeRef, nullable: bool = True) -> FieldType:
    """Convert an introspection type reference into a field-type descriptor."""
    if ref.kind == "NON_NULL":
        if ref.of_type is None:
            raise SerializationError("NON_NULL type reference without ofType")
        return type_ref_to_field_type(ref.of_type, nullable=False)

    if ref.kind == "LIST":
        if ref.of_type is None:
            raise SerializationError("LIST type reference without ofType")
        result: FieldType = ListType(type_ref_to_field_type(ref.of_type))
    else:
        if ref.name is None:
            raise SerializationError(f"Unnamed {ref.kind} type reference")
        result = NamedType(ref.name)

    return OptionalType(result) if nullable else result


def _deprecation(is_deprecated: bool, reason: str | None) -> DeprecationStatus:
    if is_deprecated:
        return DeprecationStatus.deprecated_because(reason)
    return CURRENT


def _parse_default(raw: str | None) -> Any:
    """Introspection defaults are GraphQL literals, read them as the SDL parser does."""
    if raw is None:
        return None
    try:
        return value_from_ast_untyped(parse_value(raw))
    except GraphQLError as e:
        raise SchemaFormatError(f"Invalid default value {raw!r}: {e.message}") from e


class IntrospectionSource:
    """An introspection result (``.json`` files)."""

    def __init__(self, text: str, name: str = "<introspection>"):
        self.text = text
        self.name = name

    def load_payload(self) -> SchemaPayload:
        try:
            raw = json.loads(self.text)
        except ValueError as e:
            raise SchemaFormatError(f"Could not parse schema {self.name}: {e}") from e

        if not isinstance(raw, dict):
            raise SerializationError(f"Introspection result in {self.name} is not an object")
        if "data" in raw and isinstance(raw["data"], dict):
            raw = raw["data"]

        try:
            return IntrospectionQuery.model_validate(raw).schema_
        except ValidationError as e:
            raise SerializationError(
                f"Malformed introspection result in {self.name}: {e}"
            ) from e

    def to_ir(self) -> IRSchema:
        payload = self.load_payload()
        ir = IRSchema()

        if payload.query_type:
            ir.query_type = payload.query_type.name
        if payload.mutation_type:
            ir.mutation_type = payload.mutation_type.name
        if payload.subscription_type:
            ir.subscription_type = payload.subscription_type.name

        for full_type in payload.types:
            if full_type.name is None:
                raise SerializationError(f"Unnamed {full_type.kind} type in {self.name}")
            if full_type.name.startswith("__"):
                continue
            self._process_type(ir, full_type)
        return ir

    def _process_type(self, ir: IRSchema, full_type: FullType):
        name = full_type.name
        kind = full_type.kind

        if kind == "SCALAR":
            if not IRSchema.is_builtin_scalar(name):
                ir.scalars[name] = IRScalar(name=name, description=full_type.description)
        elif kind == "ENUM":
            ir.enums[name] = IREnum(
                name=name,
                values=[
                    IREnumValue(
                        name=v.name,
                        description=v.description,
                        deprecation=_deprecation(v.is_deprecated, v.deprecation_reason),
                    )
                    for v in self._require(full_type.enum_values, "enumValues", name)
                ],
                description=full_type.description,
            )
        elif kind == "OBJECT":
            ir.objects[name] = IRObject(
                name=name,
                fields=self._fields(self._require(full_type.fields, "fields", name)),
                interfaces=[i.name for i in full_type.interfaces or () if i.name],
                description=full_type.description,
            )
        elif kind == "INTERFACE":
            iface = IRInterface(
                name=name,
                fields=self._fields(self._require(full_type.fields, "fields", name)),
                description=full_type.description,
            )
            iface.implemented_by = [t.name for t in full_type.possible_types or () if t.name]
            ir.interfaces[name] = iface
        elif kind == "UNION":
            ir.unions[name] = IRUnion(
                name=name,
                members=[
                    t.name
                    for t in self._require(full_type.possible_types, "possibleTypes", name)
                    if t.name
                ],
                description=full_type.description,
            )
        elif kind == "INPUT_OBJECT":
            ir.inputs[name] = IRInput(
                name=name,
                fields={
                    f.name: IRField(
                        name=f.name,
                        type=type_ref_to_field_type(f.type),
                        description=f.description,
                        default_value=_parse_default(f.default_value),
                    )
                    for f in self._require(full_type.input_fields, "inputFields", name)
                },
                description=full_type.description,
            )
        else:
            raise SerializationError(f"Unknown type kind {kind!r} for {name}")

    @staticmethod
    def _fields(field_defs: list[FieldDef]) -> dict[str, IRField]:
        return {
            f.name: IRField(
                name=f.name,
                type=type_ref_to_field_type(f.type),
                description=f.description,
                deprecation=_deprecation(f.is_deprecated, f.deprecation_reason),
            )
            for f in field_defs
        }

    def _require(self, value, key: str, type_name: str):
        if value is None:
            raise SerializationError(f"Missing `{key}` on type {type_name} in {self.name}")
        return value
