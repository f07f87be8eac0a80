"""
Line-item sequencing and Bill of Lading number synthesis.

B/L numbers follow the back office's positional scheme::

    {start + index, at least 2 digits}/{middle format}-{month in Roman numerals}/{year}
    e.g. 01/TWN/BLW-XI/2025

The month always comes from the wall clock at generation time, never from
the data, so re-running an export in another month changes newly generated
numbers. Numbers that are already present are never overwritten.
"""

import logging
import re
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from manifestpro.schemas.manifest import ManifestLineItem

logger = logging.getLogger("manifestpro.numbering")

ROMAN_MONTHS = ("I", "II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X", "XI", "XII")

DEFAULT_MIDDLE_FORMAT = "TWN/BLW"


def roman_month(today: date | None = None) -> str:
    """Month of ``today`` (default: now) as a Roman numeral I..XII."""
    today = today or date.today()
    return ROMAN_MONTHS[today.month - 1]


def clean_middle_format(value: str | None) -> str:
    """Trim the middle segment and collapse repeated slashes."""
    cleaned = re.sub(r"/{2,}", "/", (value or "").strip())
    return cleaned or DEFAULT_MIDDLE_FORMAT


class NumberingConfig(BaseModel):
    """Inputs of the B/L numbering scheme for one request."""

    model_config = ConfigDict(frozen=True)

    start_number: int = Field(1, ge=0)
    middle_format: str = DEFAULT_MIDDLE_FORMAT
    year: int = Field(default_factory=lambda: date.today().year)

    @field_validator("middle_format", mode="before")
    @classmethod
    def _middle_format(cls, v: object) -> str:
        return clean_middle_format(v if isinstance(v, str) else None)

    @classmethod
    def from_request(
        cls,
        start_number: int | None = None,
        middle_format: str | None = None,
        year: int | None = None,
    ) -> "NumberingConfig":
        """Build a config from optional user input, applying the documented defaults."""
        values: dict = {}
        if start_number is not None:
            values["start_number"] = start_number
        if middle_format:
            values["middle_format"] = middle_format
        if year:
            values["year"] = year
        return cls(**values)


def generate_bl_number(config: NumberingConfig, index: int, today: date | None = None) -> str:
    """B/L number for the item at 0-based ``index``. Numbers above 99 are not truncated."""
    number = config.start_number + index
    return f"{number:02d}/{config.middle_format}-{roman_month(today)}/{config.year}"


def generate_bl_batch(config: NumberingConfig, count: int, today: date | None = None) -> list[str]:
    today = today or date.today()
    return [generate_bl_number(config, i, today) for i in range(count)]


def assign_sequence(
    items: list[ManifestLineItem], renumber: bool = False
) -> list[ManifestLineItem]:
    """Stable sort by ``item_no`` (missing counts as 0).

    With ``renumber`` the sorted items are then numbered 1..N so item
    numbers are unique and contiguous.
    """
    ordered = sorted(items, key=lambda item: item.item_no)
    if not renumber:
        return ordered
    return [
        item if item.item_no == position else item.model_copy(update={"item_no": position})
        for position, item in enumerate(ordered, start=1)
    ]


def fill_bl_numbers(
    items: list[ManifestLineItem],
    config: NumberingConfig,
    today: date | None = None,
) -> list[ManifestLineItem]:
    """Give every item without a B/L number one generated from its position."""
    numbers = generate_bl_batch(config, len(items), today)
    filled = [
        item if item.bl_number else item.model_copy(update={"bl_number": number})
        for item, number in zip(items, numbers)
    ]

    supplied = sum(1 for item in items if item.bl_number)
    logger.info("Generated %d B/L numbers (%d supplied)", len(items) - supplied, supplied)
    return filled
