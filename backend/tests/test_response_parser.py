"""Tests for decoding model replies into line items."""

import pytest

from manifestpro.errors import ErrorKind, ManifestError
from manifestpro.manifest.response_parser import (
    RAW_EXCERPT_CHARS,
    parse_model_reply,
    strip_code_fence,
    validate_line_items,
)


class TestStripCodeFence:
    @pytest.mark.parametrize(
        "raw",
        [
            '```json\n[{"a": 1}]\n```',
            '```\n[{"a": 1}]\n```',
            '  ```JSON\n[{"a": 1}]```  ',
            '[{"a": 1}]',
        ],
    )
    def test_fences_removed(self, raw):
        assert strip_code_fence(raw) == '[{"a": 1}]'


class TestParseModelReply:
    def test_fenced_array(self):
        assert parse_model_reply('```json\n[{"item_no": 1}]\n```') == [{"item_no": 1}]

    def test_empty_array(self):
        assert parse_model_reply("[]") == []

    def test_object_is_unexpected_shape(self):
        with pytest.raises(ManifestError) as exc_info:
            parse_model_reply('{"items": []}')

        assert exc_info.value.kind == ErrorKind.UNEXPECTED_SHAPE

    def test_invalid_json_carries_excerpt(self):
        raw = "Sure! Here is your data: " + "x" * 1000

        with pytest.raises(ManifestError) as exc_info:
            parse_model_reply(raw)

        error = exc_info.value
        assert error.kind == ErrorKind.INVALID_JSON
        assert error.detail == raw[:RAW_EXCERPT_CHARS]
        assert error.status_code == 502


class TestValidateLineItems:
    def test_coerces_fields(self):
        items = validate_line_items(
            [
                {
                    "item_no": "2",
                    "description": " Pump ",
                    "hs_code": "8413.50.00",
                    "quantity": "1,234.50",
                    "unit_price": "1.234,50",
                    "total_price": None,
                    "weight": 3,
                    "bl_number": "  ",
                    "unexpected": "dropped",
                }
            ]
        )

        item = items[0]
        assert item.item_no == 2
        assert item.description == "Pump"
        assert item.hs_code == "84135000"
        assert item.quantity == 1234.5
        assert item.unit_price == 1234.5
        assert item.total_price == 0.0
        assert item.weight == 3.0
        assert item.bl_number is None

    def test_non_object_entry(self):
        with pytest.raises(ManifestError) as exc_info:
            validate_line_items([{"description": "a"}, "b"])

        assert exc_info.value.kind == ErrorKind.UNEXPECTED_SHAPE
        assert "Item 2" in exc_info.value.message

    def test_missing_description(self):
        with pytest.raises(ManifestError) as exc_info:
            validate_line_items([{"item_no": 1, "quantity": 3}])

        assert exc_info.value.kind == ErrorKind.UNEXPECTED_SHAPE
