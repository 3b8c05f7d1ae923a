"""Tests for reachability marking and per-compilation context."""

import pytest

from gql_typegen.core.context import QueryContext
from gql_typegen.core.deprecation import DeprecationStrategy
from gql_typegen.core.errors import ConfigurationError
from gql_typegen.core.reachability import ReachabilityTracker


class TestReachabilityTracker:
    """Tests for the required-type mark set."""

    def test_nothing_required_initially(self, schema):
        tracker = ReachabilityTracker(schema)
        assert not tracker.is_required("Mood")
        assert not tracker.required_types

    def test_require_enum_and_scalar(self, schema):
        tracker = ReachabilityTracker(schema)
        tracker.require("Mood")
        tracker.require("DateTime")
        assert tracker.required_types == {"Mood", "DateTime"}

    def test_builtins_and_objects_are_not_tracked(self, schema):
        tracker = ReachabilityTracker(schema)
        tracker.require("String")
        tracker.require("Cat")
        assert not tracker.required_types

    def test_input_marks_its_fields_transitively(self, schema):
        tracker = ReachabilityTracker(schema)
        tracker.require("CatFilter")
        assert tracker.required_types == {"CatFilter", "Mood", "DateTime"}

    def test_self_referencing_input_terminates(self, schema):
        tracker = ReachabilityTracker(schema)
        tracker.require("CatFilter")
        tracker.require("CatFilter")
        assert tracker.is_required("CatFilter")

    def test_require_fragment_first_time_only(self, schema):
        tracker = ReachabilityTracker(schema)
        assert tracker.require_fragment("CatParts")
        assert not tracker.require_fragment("CatParts")
        assert tracker.is_fragment_required("CatParts")

    def test_trackers_are_independent(self, schema):
        first = ReachabilityTracker(schema)
        second = ReachabilityTracker(schema)
        first.require("Mood")
        assert not second.is_required("Mood")


class TestQueryContext:
    """Tests for derive handling and options."""

    def test_default_derives(self, schema):
        context = QueryContext(schema)
        assert context.response_derives() == ["Deserialize"]
        assert context.variables_derives() == ["Serialize"]

    def test_default_strategy_is_warn(self, schema):
        assert QueryContext(schema).deprecation_strategy is DeprecationStrategy.WARN

    def test_additional_derives_are_merged(self, schema):
        context = QueryContext(schema)
        context.ingest_additional_derives(" Frozen, Strict ,Frozen,")
        assert context.response_derives() == ["Deserialize", "Frozen", "Strict"]
        assert context.variables_derives() == ["Serialize", "Frozen", "Strict"]

    def test_default_derive_is_not_repeated(self, schema):
        context = QueryContext(schema)
        context.ingest_additional_derives(["Serialize", "Deserialize"])
        assert context.response_derives() == ["Deserialize", "Serialize"]
        assert context.variables_derives() == ["Serialize", "Deserialize"]

    def test_empty_derives(self, schema):
        context = QueryContext(schema)
        context.ingest_additional_derives(None)
        context.ingest_additional_derives("")
        assert context.response_derives() == ["Deserialize"]

    def test_invalid_derive_name(self, schema):
        context = QueryContext(schema)
        with pytest.raises(ConfigurationError, match="Invalid derive name"):
            context.ingest_additional_derives("Frozen, not valid")


class TestDeprecationStrategy:
    """Tests for parsing deprecation strategies."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("allow", DeprecationStrategy.ALLOW),
            ("DENY", DeprecationStrategy.DENY),
            (" Warn ", DeprecationStrategy.WARN),
            (None, DeprecationStrategy.WARN),
            (DeprecationStrategy.DENY, DeprecationStrategy.DENY),
        ],
    )
    def test_parse(self, value, expected):
        assert DeprecationStrategy.parse(value) is expected

    def test_unknown_strategy(self):
        with pytest.raises(ConfigurationError, match="Unknown deprecation strategy"):
            DeprecationStrategy.parse("ignore")
