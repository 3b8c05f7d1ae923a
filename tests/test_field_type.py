"""Tests for field-type descriptors."""

import pytest
from graphql import parse

from gql_typegen.core.field_type import (
    ListType,
    NamedType,
    OptionalType,
    from_type_node,
    inner_name,
    is_indirected,
    is_optional,
    map_inner,
    rename_inner,
)


def variable_type(type_text: str):
    """Parse the type of a single variable declaration."""
    document = parse(f"query Q($v: {type_text}) {{ a }}", no_location=True)
    return from_type_node(document.definitions[0].variable_definitions[0].type)


class TestFromTypeNode:
    """Tests for building descriptors from graphql-core type nodes."""

    def test_nullable_named(self):
        assert variable_type("Float") == OptionalType(NamedType("Float"))

    def test_non_null_named(self):
        assert variable_type("Float!") == NamedType("Float")

    def test_list_of_non_null(self):
        assert variable_type("[Cat!]") == OptionalType(ListType(NamedType("Cat")))

    def test_non_null_list_of_nullable(self):
        assert variable_type("[Cat]!") == ListType(OptionalType(NamedType("Cat")))

    def test_nested_lists(self):
        assert variable_type("[[Int!]!]!") == ListType(ListType(NamedType("Int")))


class TestHelpers:
    """Tests for descriptor helpers."""

    @pytest.mark.parametrize("type_text", ["Cat", "Cat!", "[Cat]", "[[Cat!]]!"])
    def test_inner_name(self, type_text):
        assert inner_name(variable_type(type_text)) == "Cat"

    def test_is_optional(self):
        assert is_optional(variable_type("Cat"))
        assert not is_optional(variable_type("Cat!"))
        assert not is_optional(variable_type("[Cat]!"))

    def test_rename_inner_keeps_wrappers(self):
        renamed = rename_inner(variable_type("[Cat!]"), "AllCatsOffsprings")
        assert renamed == OptionalType(ListType(NamedType("AllCatsOffsprings")))

    def test_map_inner(self):
        mapped = map_inner(variable_type("Cat!"), str.upper)
        assert mapped == NamedType("CAT")

    @pytest.mark.parametrize(
        "type_text,text",
        [("Cat", "Cat"), ("Cat!", "Cat!"), ("[Cat!]", "[Cat!]"), ("[Cat]!", "[Cat]!")],
    )
    def test_str_uses_graphql_notation(self, type_text, text):
        assert str(variable_type(type_text)) == text


class TestIndirection:
    """Tests for the indirection rule used by recursive input objects."""

    def test_named_is_direct(self):
        assert not is_indirected(NamedType("CatFilter"))

    def test_optional_is_direct(self):
        assert not is_indirected(OptionalType(NamedType("CatFilter")))

    def test_list_is_indirect(self):
        assert is_indirected(ListType(NamedType("CatFilter")))

    def test_optional_list_is_indirect(self):
        assert is_indirected(OptionalType(ListType(NamedType("CatFilter"))))
