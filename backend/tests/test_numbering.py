"""Tests for item sequencing and B/L number generation."""

from datetime import date

import pytest
from pydantic import ValidationError

from manifestpro.manifest.numbering import (
    NumberingConfig,
    assign_sequence,
    clean_middle_format,
    fill_bl_numbers,
    generate_bl_batch,
    generate_bl_number,
    roman_month,
)
from manifestpro.schemas.manifest import ManifestLineItem

NOV_2025 = date(2025, 11, 5)


def item(no: int, description: str = "goods", bl: str | None = None) -> ManifestLineItem:
    return ManifestLineItem(item_no=no, description=description, bl_number=bl)


class TestRomanMonth:
    @pytest.mark.parametrize(
        "month, numeral", [(1, "I"), (4, "IV"), (9, "IX"), (11, "XI"), (12, "XII")]
    )
    def test_months(self, month, numeral):
        assert roman_month(date(2025, month, 1)) == numeral


class TestNumberingConfig:
    def test_defaults(self):
        config = NumberingConfig.from_request()

        assert config.start_number == 1
        assert config.middle_format == "TWN/BLW"
        assert config.year == date.today().year

    def test_middle_format_cleaned(self):
        assert clean_middle_format(" ABC//DEF ") == "ABC/DEF"
        assert clean_middle_format("") == "TWN/BLW"
        assert NumberingConfig.from_request(middle_format="X///Y").middle_format == "X/Y"

    def test_negative_start_rejected(self):
        with pytest.raises(ValidationError):
            NumberingConfig.from_request(start_number=-1)


class TestGenerateBlNumber:
    def test_first_number(self):
        config = NumberingConfig(start_number=1, middle_format="TWN/BLW", year=2025)

        assert generate_bl_number(config, 0, NOV_2025) == "01/TWN/BLW-XI/2025"

    def test_offset_from_start(self):
        config = NumberingConfig(start_number=10, middle_format="SUB/BL", year=2024)

        assert generate_bl_number(config, 2, NOV_2025) == "12/SUB/BL-XI/2024"

    def test_no_truncation_above_99(self):
        config = NumberingConfig(start_number=99, year=2025)

        assert generate_bl_batch(config, 3, NOV_2025) == [
            "99/TWN/BLW-XI/2025",
            "100/TWN/BLW-XI/2025",
            "101/TWN/BLW-XI/2025",
        ]


class TestAssignSequence:
    def test_stable_sort_by_item_no(self):
        items = [item(2, "b"), item(1, "a"), item(2, "c"), item(0, "z")]

        ordered = assign_sequence(items)

        assert [i.description for i in ordered] == ["z", "a", "b", "c"]
        assert [i.item_no for i in ordered] == [0, 1, 2, 2]

    def test_renumber_makes_contiguous(self):
        items = [item(5, "b"), item(3, "a"), item(5, "c")]

        ordered = assign_sequence(items, renumber=True)

        assert [(i.item_no, i.description) for i in ordered] == [(1, "a"), (2, "b"), (3, "c")]

    def test_input_not_mutated(self):
        items = [item(2), item(1)]
        assign_sequence(items, renumber=True)

        assert [i.item_no for i in items] == [2, 1]


class TestFillBlNumbers:
    def test_existing_numbers_never_overwritten(self):
        config = NumberingConfig(start_number=1, year=2025)
        items = [item(1), item(2, bl="MANUAL-BL"), item(3)]

        filled = fill_bl_numbers(items, config, NOV_2025)

        assert [i.bl_number for i in filled] == [
            "01/TWN/BLW-XI/2025",
            "MANUAL-BL",
            "03/TWN/BLW-XI/2025",
        ]

    def test_every_item_gets_a_number(self):
        config = NumberingConfig(year=2025)
        filled = fill_bl_numbers([item(i) for i in range(1, 6)], config, NOV_2025)

        assert all(i.bl_number for i in filled)
        assert len({i.bl_number for i in filled}) == 5

    def test_generated_numbers_match_batch_positions(self):
        config = NumberingConfig(start_number=5, year=2025)
        items = [item(1), item(2, bl="KEEP"), item(3)]

        filled = fill_bl_numbers(items, config, NOV_2025)
        batch = generate_bl_batch(config, len(items), NOV_2025)

        assert [i.bl_number for i in filled] == [batch[0], "KEEP", batch[2]]

    def test_empty_list(self):
        assert fill_bl_numbers([], NumberingConfig()) == []
