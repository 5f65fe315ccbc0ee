"""Tests for docwrap.typing: value kinds and field paths."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

import pytest
from bson import Binary, Decimal128, Int64, ObjectId

from docwrap import DocumentId, FieldPath, ValueKind, kind_of
from docwrap.typing import TypedList, copy_field_value, validate_field_value
from docwrap.utilities.undefined import UNDEFINED


class TestKindOf:
    @pytest.mark.parametrize(
        ("value", "kind"),
        [
            ("text", ValueKind.STRING),
            (3, ValueKind.NUMBER),
            (3.5, ValueKind.NUMBER),
            (True, ValueKind.BOOLEAN),
            (None, ValueKind.NULL),
            ([1, 2], ValueKind.SEQUENCE),
            ((1, 2), ValueKind.SEQUENCE),
            ({"a": 1}, ValueKind.MAPPING),
            (ObjectId(), ValueKind.IDENTIFIER),
            (DocumentId(), ValueKind.IDENTIFIER),
            (datetime(2024, 1, 1), ValueKind.DATETIME),
            (uuid4(), ValueKind.IDENTIFIER),
            (Decimal128("9.99"), ValueKind.NUMBER),
            (Int64(7), ValueKind.NUMBER),
            (b"raw", ValueKind.BINARY),
            (Binary(b"raw", 0), ValueKind.BINARY),
        ],
    )
    def test_classifies_every_kind(self, value, kind):
        assert kind_of(value) is kind

    def test_booleans_are_not_numbers(self):
        assert kind_of(False) is ValueKind.BOOLEAN

    @pytest.mark.parametrize("value", [object(), {1, 2}, complex(1, 2)])
    def test_unsupported_values_raise(self, value):
        with pytest.raises(TypeError):
            kind_of(value)


class TestValidateFieldValue:
    def test_nested_structures_pass(self):
        validate_field_value({"a": [1, {"b": "c"}], "d": None})

    def test_non_string_keys_are_rejected(self):
        with pytest.raises(TypeError, match="Mapping keys must be strings"):
            validate_field_value({"a": {1: "x"}}, FieldPath("root"))

    def test_error_names_the_nested_path(self):
        with pytest.raises(TypeError, match=r"root\.items\[1\]"):
            validate_field_value({"items": [1, object()]}, FieldPath("root"))

    def test_copy_turns_tuples_into_lists(self):
        original = {"a": (1, 2), "b": {"c": [3]}}
        copied = copy_field_value(original)
        assert copied == {"a": [1, 2], "b": {"c": [3]}}
        copied["b"]["c"].append(4)
        assert original["b"]["c"] == [3]


class TestFieldPath:
    def test_rejects_empty_paths(self):
        with pytest.raises(ValueError):
            FieldPath("")

    def test_rejects_empty_segments(self):
        with pytest.raises(ValueError):
            FieldPath("a..b").get_parts()

    def test_read_nested_mapping(self):
        assert FieldPath("address.city").read_from({"address": {"city": "Oslo"}}) == "Oslo"

    def test_read_into_lists_by_index(self):
        fields = {"items": [{"sku": "A"}, {"sku": "B"}]}
        assert FieldPath("items.1.sku").read_from(fields) == "B"
        assert FieldPath("items.5.sku").read_from(fields) is UNDEFINED

    def test_missing_paths_are_undefined_not_none(self):
        fields = {"a": None}
        assert FieldPath("a").read_from(fields) is None
        assert FieldPath("b").read_from(fields) is UNDEFINED
        assert FieldPath("a.b").read_from(fields) is UNDEFINED

    def test_write_creates_intermediate_mappings(self):
        fields: dict = {}
        FieldPath("a.b.c").write_into(fields, 1)
        assert fields == {"a": {"b": {"c": 1}}}

    def test_write_replaces_scalar_parents(self):
        fields = {"a": 5}
        FieldPath("a.b").write_into(fields, 1)
        assert fields == {"a": {"b": 1}}

    def test_write_into_existing_list_index(self):
        fields = {"tags": ["a", "b"]}
        FieldPath("tags.1").write_into(fields, "c")
        assert fields == {"tags": ["a", "c"]}

    def test_write_past_the_end_of_a_list_names_the_path(self):
        fields = {"tags": ["a"], "items": [{"sku": "A"}]}
        with pytest.raises(ValueError, match=r"tags\.5"):
            FieldPath("tags.5").write_into(fields, "x")
        with pytest.raises(ValueError, match=r"items\.3\.sku"):
            FieldPath("items.3.sku").write_into(fields, "B")
        assert fields == {"tags": ["a"], "items": [{"sku": "A"}]}

    def test_delete(self):
        fields = {"a": {"b": 1, "c": 2}}
        assert FieldPath("a.b").delete_from(fields) is True
        assert FieldPath("a.x").delete_from(fields) is False
        assert fields == {"a": {"c": 2}}

    def test_subfield_and_subidx(self):
        assert FieldPath("a").subfield("b").subidx(2) == "a.b[2]"


class TestTypedList:
    def test_rejects_wrong_types(self):
        class IntList(TypedList[int]):
            __allowed_types__ = (int,)

        ints = IntList([1, 2])
        ints.append(3)
        assert list(ints) == [1, 2, 3]
        with pytest.raises(TypeError):
            ints.append("4")
        assert len(ints) == 3
