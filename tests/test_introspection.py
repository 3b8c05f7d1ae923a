"""Tests for loading introspection results."""

import json

import pytest

from gql_typegen.core.errors import SchemaFormatError, SerializationError
from gql_typegen.core.field_type import ListType, NamedType, OptionalType
from gql_typegen.core.introspection import IntrospectionSource, TypeRef, type_ref_to_field_type
from gql_typegen.core.parser import SDLSource, build_schema_model


@pytest.fixture
def introspection_text(data_dir):
    return (data_dir / "introspection.json").read_text()


@pytest.fixture
def ir(introspection_text):
    return build_schema_model(IntrospectionSource(introspection_text, name="introspection.json"))


def minimal_payload(types):
    return json.dumps({"__schema": {"queryType": {"name": "Query"}, "types": types}})


class TestTypeRefConversion:
    """Tests for converting introspection type references."""

    def test_nullable_named(self):
        ref = TypeRef(kind="SCALAR", name="Float")
        assert type_ref_to_field_type(ref) == OptionalType(NamedType("Float"))

    def test_non_null_list(self):
        ref = TypeRef.model_validate(
            {
                "kind": "NON_NULL",
                "ofType": {
                    "kind": "LIST",
                    "ofType": {"kind": "NON_NULL", "ofType": {"kind": "OBJECT", "name": "Cat"}},
                },
            }
        )
        assert type_ref_to_field_type(ref) == ListType(NamedType("Cat"))

    def test_non_null_without_of_type(self):
        with pytest.raises(SerializationError):
            type_ref_to_field_type(TypeRef(kind="NON_NULL"))

    def test_unnamed_reference(self):
        with pytest.raises(SerializationError):
            type_ref_to_field_type(TypeRef(kind="OBJECT"))


class TestIntrospectionSource:
    """Tests for building the schema model from an introspection result."""

    def test_root_types(self, ir):
        assert ir.query_type == "Query"
        # Missing roots keep their conventional names
        assert ir.mutation_type == "Mutation"

    def test_skips_meta_and_builtin_types(self, ir):
        assert "__Schema" not in ir.objects
        assert list(ir.scalars) == ["DateTime"]

    def test_objects_and_fields(self, ir):
        cat = ir.objects["Cat"]
        assert cat.description == "A cat"
        assert cat.fields["pawsCount"].type == NamedType("Float")
        assert cat.fields["pawsCount"].description == "Number of paws"
        assert cat.fields["mood"].type == OptionalType(NamedType("Mood"))

    def test_deprecation(self, ir):
        color = ir.objects["Cat"].fields["color"]
        assert color.deprecation.deprecated
        assert color.deprecation.reason == "Use coat"

    def test_interfaces(self, ir):
        assert ir.interfaces["Animal"].implemented_by == ["Cat", "Dog"]
        assert ir.objects["Dog"].interfaces == ["Animal"]

    def test_enums(self, ir):
        mood = ir.enums["Mood"]
        assert [v.name for v in mood.values] == ["HAPPY", "GRUMPY"]
        assert mood.values[0].description == "All is well"

    def test_input_defaults(self, ir):
        fields = ir.inputs["CatFilter"].fields
        assert fields["pawsCount"].default_value == 4
        assert fields["mood"].default_value == "HAPPY"
        assert fields["not"].default_value is None

    def test_bare_schema_without_envelope(self):
        text = minimal_payload(
            [{"kind": "OBJECT", "name": "Query", "fields": [], "interfaces": []}]
        )
        ir = build_schema_model(IntrospectionSource(text))
        assert "Query" in ir.objects

    def test_invalid_json(self):
        with pytest.raises(SchemaFormatError, match="Could not parse schema"):
            IntrospectionSource("{not json").to_ir()

    def test_missing_schema(self):
        with pytest.raises(SerializationError, match="Malformed introspection result"):
            IntrospectionSource('{"data": {}}').to_ir()

    def test_object_without_fields(self):
        text = minimal_payload([{"kind": "OBJECT", "name": "Query"}])
        with pytest.raises(SerializationError, match="Missing `fields` on type Query"):
            IntrospectionSource(text).to_ir()

    def test_enum_without_values(self):
        text = minimal_payload([{"kind": "ENUM", "name": "Mood"}])
        with pytest.raises(SerializationError, match="enumValues"):
            IntrospectionSource(text).to_ir()

    def test_unknown_kind(self):
        text = minimal_payload([{"kind": "WIDGET", "name": "Thing"}])
        with pytest.raises(SerializationError, match="Unknown type kind"):
            IntrospectionSource(text).to_ir()

    def test_invalid_default_literal(self):
        text = minimal_payload(
            [
                {
                    "kind": "INPUT_OBJECT",
                    "name": "Filter",
                    "inputFields": [
                        {
                            "name": "limit",
                            "type": {"kind": "SCALAR", "name": "Int"},
                            "defaultValue": "{unclosed",
                        }
                    ],
                }
            ]
        )
        with pytest.raises(SchemaFormatError, match="Invalid default value"):
            IntrospectionSource(text).to_ir()


SDL_WITH_DEFAULTS = """
enum Color { RED BLUE }

input Palette {
  colors: [Color] = [RED, BLUE]
  size: Int = 3
  label: String = "warm"
  nested: Palette = {size: 1, colors: [RED]}
}

type Query { a: Int }
"""


def input_value(name, type_ref, default):
    return {"name": name, "type": type_ref, "defaultValue": default}


INTROSPECTION_WITH_DEFAULTS = minimal_payload(
    [
        {"kind": "OBJECT", "name": "Query", "fields": [], "interfaces": []},
        {
            "kind": "ENUM",
            "name": "Color",
            "enumValues": [{"name": "RED"}, {"name": "BLUE"}],
        },
        {
            "kind": "INPUT_OBJECT",
            "name": "Palette",
            "inputFields": [
                input_value(
                    "colors",
                    {"kind": "LIST", "ofType": {"kind": "ENUM", "name": "Color"}},
                    "[RED, BLUE]",
                ),
                input_value("size", {"kind": "SCALAR", "name": "Int"}, "3"),
                input_value("label", {"kind": "SCALAR", "name": "String"}, '"warm"'),
                input_value(
                    "nested",
                    {"kind": "INPUT_OBJECT", "name": "Palette"},
                    "{size: 1, colors: [RED]}",
                ),
            ],
        },
    ]
)


class TestDefaultValueParity:
    """SDL and introspection sources agree on input defaults."""

    @pytest.fixture
    def sdl_fields(self):
        return build_schema_model(SDLSource(SDL_WITH_DEFAULTS)).inputs["Palette"].fields

    @pytest.fixture
    def introspection_fields(self):
        ir = build_schema_model(IntrospectionSource(INTROSPECTION_WITH_DEFAULTS))
        return ir.inputs["Palette"].fields

    def test_defaults_are_python_values(self, introspection_fields):
        assert introspection_fields["colors"].default_value == ["RED", "BLUE"]
        assert introspection_fields["size"].default_value == 3
        assert introspection_fields["label"].default_value == "warm"
        assert introspection_fields["nested"].default_value == {"size": 1, "colors": ["RED"]}

    def test_sources_agree(self, sdl_fields, introspection_fields):
        for name in ["colors", "size", "label", "nested"]:
            assert sdl_fields[name].default_value == introspection_fields[name].default_value
