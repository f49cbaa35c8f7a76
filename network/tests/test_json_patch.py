"""JSON Value Patch Engine Tests

These tests verify path-addressed immutable edits over plain JSON values:
- sanitize_to_json_value drops values with no JSON representation
- update_json_at_path copies only the containers along the path
- Path/tree mismatches fail fast with JsonPathError
- parse_leaf_edit infers null/number/bool/string from text
- round_numbers rounds floats only
"""

import math

import pytest

from network import (
    JsonPathError,
    parse_leaf_edit,
    read_json_at_path,
    round_numbers,
    sanitize_to_json_value,
    update_json_at_path,
)


class TestSanitize:
    """Test deep copy into the JSON universe."""

    def test_keeps_json_values(self):
        value = {"a": [1, 2.5, "x", True, None], "b": {"c": {}}}
        assert sanitize_to_json_value(value) == value

    def test_returns_a_deep_copy(self):
        value = {"a": {"b": [1]}}
        clean = sanitize_to_json_value(value)
        assert clean is not value
        assert clean["a"] is not value["a"]
        assert clean["a"]["b"] is not value["a"]["b"]

    def test_drops_unrepresentable_members(self):
        value = {"ok": 1, "obj": object(), "nan": float("nan"), "inf": math.inf, 3: "int key"}
        assert sanitize_to_json_value(value) == {"ok": 1}

    def test_drops_unrepresentable_sequence_items(self):
        assert sanitize_to_json_value([1, object(), "a"]) == [1, "a"]

    def test_tuples_become_lists(self):
        assert sanitize_to_json_value({"t": (1, (2, 3))}) == {"t": [1, [2, 3]]}

    def test_unrepresentable_root_becomes_none(self):
        assert sanitize_to_json_value(object()) is None


class TestUpdateAtPath:
    """Test immutable path-addressed replacement."""

    def test_replaces_nested_value(self):
        root = {"a": {"b": 1, "c": 2}, "d": [1, 2]}
        updated = update_json_at_path(root, ["a", "b"], 5)
        assert updated == {"a": {"b": 5, "c": 2}, "d": [1, 2]}

    def test_does_not_mutate_input(self):
        root = {"a": {"b": 1}}
        update_json_at_path(root, ["a", "b"], 5)
        assert root == {"a": {"b": 1}}

    def test_siblings_are_shared(self):
        """Subtrees off the path keep their identity."""
        root = {"a": {"b": 1, "keep": {"x": [1]}}, "d": [{"e": 1}]}
        updated = update_json_at_path(root, ["a", "b"], 5)

        assert updated is not root
        assert updated["a"] is not root["a"]
        assert updated["d"] is root["d"]
        assert updated["a"]["keep"] is root["a"]["keep"]

    def test_indexes_into_sequences(self):
        root = {"streams": [{"demand": 1}, {"demand": 2}]}
        updated = update_json_at_path(root, ["streams", 1, "demand"], 7)
        assert updated == {"streams": [{"demand": 1}, {"demand": 7}]}
        assert updated["streams"][0] is root["streams"][0]

    def test_empty_path_replaces_root(self):
        assert update_json_at_path({"a": 1}, [], [1, 2]) == [1, 2]

    def test_final_missing_key_is_added(self):
        assert update_json_at_path({"a": {}}, ["a", "new"], 1) == {"a": {"new": 1}}

    def test_write_back_restores_original(self):
        root = {"a": {"b": [1, {"c": "x"}]}, "z": 0}
        path = ["a", "b", 1, "c"]
        old = read_json_at_path(root, path)
        restored = update_json_at_path(update_json_at_path(root, path, "changed"), path, old)
        assert restored == root


class TestPathErrors:
    """Path/tree mismatches are invariant violations."""

    def test_key_into_primitive(self):
        with pytest.raises(JsonPathError):
            update_json_at_path({"a": 1}, ["a", "b"], 2)

    def test_index_out_of_range(self):
        with pytest.raises(JsonPathError) as exc_info:
            update_json_at_path({"a": [1]}, ["a", 3], 2)
        assert exc_info.value.path == ["a", 3]

    def test_negative_index(self):
        with pytest.raises(JsonPathError):
            update_json_at_path([1, 2], [-1], 0)

    def test_bool_index(self):
        with pytest.raises(JsonPathError):
            update_json_at_path([1, 2], [True], 0)

    def test_string_key_on_sequence(self):
        with pytest.raises(JsonPathError):
            update_json_at_path([1, 2], ["0"], 0)

    def test_integer_key_on_mapping(self):
        with pytest.raises(JsonPathError):
            update_json_at_path({"0": 1}, [0], 0)

    def test_missing_intermediate_key(self):
        with pytest.raises(JsonPathError):
            update_json_at_path({"a": {}}, ["a", "b", "c"], 1)

    def test_read_missing_key(self):
        with pytest.raises(JsonPathError):
            read_json_at_path({"a": 1}, ["b"])


class TestParseLeafEdit:
    """Test text -> JSON leaf coercion."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("", None),
            ("42", 42),
            ("-3", -3),
            ("2.50", 2.5),
            ("true", True),
            ("false", False),
            ("1e5", "1e5"),
            (".5", ".5"),
            ("True", "True"),
            ("divide", "divide"),
            ("12\n", "12\n"),
            ("١٢", "١٢"),
            ("1.", "1."),
        ],
    )
    def test_coercion(self, text, expected):
        assert parse_leaf_edit(text) == expected

    def test_integer_literal_is_int(self):
        assert isinstance(parse_leaf_edit("7"), int)
        assert isinstance(parse_leaf_edit("7.0"), float)


class TestRoundNumbers:
    """Test export rounding."""

    def test_rounds_nested_floats(self):
        value = {"a": 1.23456, "b": [0.005, {"c": 2.6789}]}
        assert round_numbers(value) == {"a": 1.23, "b": [0.01, {"c": 2.68}]}

    def test_precision_applies_at_every_depth(self):
        assert round_numbers({"a": [{"b": 1.23456}]}, precision=3) == {"a": [{"b": 1.235}]}

    def test_leaves_ints_bools_and_strings(self):
        value = {"i": 3, "t": True, "s": "1.2345", "n": None}
        assert round_numbers(value) == value
        assert round_numbers(value)["t"] is True

    def test_negative_values(self):
        assert round_numbers(-1.236, 2) == -1.24
        assert round_numbers(-0.001, 2) == 0.0

    def test_largest_floats_are_kept(self):
        assert round_numbers(1e307) == 1e307
        assert round_numbers(-1.7976931348623157e308) == -1.7976931348623157e308

    def test_large_precision(self):
        assert round_numbers(1.5, precision=400) == 1.5
        assert round_numbers({"a": [0.1]}, precision=400) == {"a": [0.1]}

    def test_rounds_from_shortest_decimal_form(self):
        assert round_numbers(2.675, 2) == 2.68
        assert round_numbers(1.005, 2) == 1.01
