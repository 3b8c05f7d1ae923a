"""Tests for naming helpers."""

import pytest

from gql_typegen.core.naming import (
    escape_keyword,
    field_name,
    module_name,
    nested_type_name,
    pascal_case,
    rename_for,
    snake_case,
)


class TestCaseConversion:
    """Tests for snake_case and pascal_case."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("pawsCount", "paws_count"),
            ("PawsCount", "paws_count"),
            ("name", "name"),
            ("HTTPServer", "http_server"),
            ("already_snake", "already_snake"),
        ],
    )
    def test_snake_case(self, name, expected):
        assert snake_case(name) == expected

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("offsprings", "Offsprings"),
            ("pawsCount", "PawsCount"),
            ("AllCats", "AllCats"),
            ("all_cats", "AllCats"),
        ],
    )
    def test_pascal_case(self, name, expected):
        assert pascal_case(name) == expected


class TestFieldNames:
    """Tests for generated attribute names."""

    def test_camel_case_is_converted(self):
        assert field_name("pawsCount") == "paws_count"

    def test_keywords_are_escaped(self):
        assert field_name("class") == "class_"
        assert field_name("from") == "from_"

    def test_soft_keywords_are_escaped(self):
        assert field_name("case") == "case_"
        assert field_name("match") == "match_"

    def test_model_attributes_are_escaped(self):
        assert field_name("json") == "json_"
        assert field_name("schema") == "schema_"

    def test_leading_underscores_are_dropped(self):
        assert field_name("__typename") == "typename"
        assert field_name("_private") == "private"

    def test_escape_keyword_leaves_other_names(self):
        assert escape_keyword("cats") == "cats"

    def test_rename_only_when_different(self):
        assert rename_for("pawsCount", "paws_count") == "pawsCount"
        assert rename_for("name", "name") is None
        assert rename_for("class", "class_") == "class"


class TestTypeAndModuleNames:
    """Tests for nested type and module names."""

    def test_nested_type_name(self):
        assert nested_type_name("AllCats", "offsprings") == "AllCatsOffsprings"
        assert nested_type_name("AllCatsOffsprings", "bornAt") == "AllCatsOffspringsBornAt"

    def test_module_name(self):
        assert module_name("AllCats") == "all_cats"
        assert module_name("Import") == "import_"
