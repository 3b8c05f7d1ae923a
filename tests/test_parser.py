"""Tests for the SDL schema parser."""

import pytest

from gql_typegen.core.deprecation import DeprecationStatus
from gql_typegen.core.errors import SchemaFormatError
from gql_typegen.core.field_type import ListType, NamedType, OptionalType
from gql_typegen.core.ir import TYPENAME_FIELD, IRObject
from gql_typegen.core.parser import SchemaSource, SDLSource, build_schema_model


def parse_sdl(text: str):
    return build_schema_model(SDLSource(text))


class TestSDLSource:
    """Tests for parsing schema-definition text."""

    def test_is_a_schema_source(self):
        assert isinstance(SDLSource("type Query { a: Int }"), SchemaSource)

    def test_parses_all_kinds(self, schema):
        assert "Cat" in schema.objects
        assert "Animal" in schema.interfaces
        assert "SearchResult" in schema.unions
        assert "Mood" in schema.enums
        assert "DateTime" in schema.scalars
        assert "CatFilter" in schema.inputs

    def test_root_types_from_schema_definition(self):
        ir = parse_sdl("schema { query: Cat } type Cat { pawsCount: Float! }")
        assert ir.query_type == "Cat"
        assert ir.root_type_name("query") == "Cat"
        assert ir.root_type_name("mutation") == "Mutation"

    def test_builtin_scalars_are_not_stored(self):
        ir = parse_sdl("scalar String scalar Date type Query { a: Date }")
        assert list(ir.scalars) == ["Date"]

    def test_field_types(self, schema):
        cat = schema.objects["Cat"]
        assert cat.fields["pawsCount"].type == NamedType("Float")
        assert cat.fields["mood"].type == OptionalType(NamedType("Mood"))
        assert cat.fields["offsprings"].type == ListType(NamedType("Cat"))

    def test_objects_have_typename(self, schema):
        assert schema.objects["Dog"].fields[TYPENAME_FIELD].type == NamedType("String")
        assert TYPENAME_FIELD in schema.interfaces["Animal"].fields

    def test_descriptions(self, schema):
        assert schema.objects["Cat"].description == "A cat"
        assert schema.enums["Mood"].values[0].description == "All is well"
        assert schema.scalars["DateTime"].description == "An ISO 8601 date-time"

    def test_deprecation_with_reason(self, schema):
        color = schema.objects["Cat"].fields["color"]
        assert color.deprecation == DeprecationStatus.deprecated_because("Use coat")

    def test_deprecation_without_reason(self):
        ir = parse_sdl("type Query { old: Int @deprecated }")
        status = ir.objects["Query"].fields["old"].deprecation
        assert status.deprecated
        assert status.reason is None

    def test_enum_value_order(self, schema):
        assert [v.name for v in schema.enums["Mood"].values] == ["HAPPY", "GRUMPY", "SLEEPY"]

    def test_input_defaults(self, schema):
        fields = schema.inputs["CatFilter"].fields
        assert fields["mood"].default_value == "HAPPY"
        assert fields["pawsCount"].default_value is None

    def test_input_field_order(self, schema):
        assert list(schema.inputs["CatFilter"].fields) == [
            "pawsCount", "mood", "and", "not", "bornAfter",
        ]

    def test_union_members(self, schema):
        assert schema.unions["SearchResult"].members == ["Cat", "Dog", "Bird"]

    def test_interfaces_are_linked(self, schema):
        assert schema.interfaces["Animal"].implemented_by == ["Cat", "Dog", "Bird"]

    def test_lookup(self, schema):
        assert isinstance(schema.lookup("Cat"), IRObject)
        assert schema.lookup("Nope") is None

    def test_invalid_sdl(self):
        with pytest.raises(SchemaFormatError, match="Could not parse schema"):
            parse_sdl("type Query {")


class TestExtensions:
    """Tests for 'extend' definitions."""

    def test_extend_type_adds_fields(self):
        ir = parse_sdl("type Query { a: Int } extend type Query { b: String }")
        assert list(ir.objects["Query"].fields) == ["a", TYPENAME_FIELD, "b"]

    def test_extension_before_definition(self):
        ir = parse_sdl("extend type Query { b: String } type Query { a: Int }")
        assert {"a", "b"} <= set(ir.objects["Query"].fields)

    def test_extend_enum_and_union(self):
        ir = parse_sdl(
            """
            enum Mood { HAPPY }
            extend enum Mood { GRUMPY }
            type Cat { a: Int } type Dog { b: Int }
            union Pet = Cat
            extend union Pet = Dog
            """
        )
        assert [v.name for v in ir.enums["Mood"].values] == ["HAPPY", "GRUMPY"]
        assert ir.unions["Pet"].members == ["Cat", "Dog"]

    def test_extend_type_adds_interface(self):
        ir = parse_sdl(
            """
            interface Named { name: String }
            type Cat { name: String }
            extend type Cat implements Named
            """
        )
        assert ir.interfaces["Named"].implemented_by == ["Cat"]
