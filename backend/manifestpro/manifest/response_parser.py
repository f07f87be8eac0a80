"""Decoding of model replies into validated manifest records."""

import json
import logging
import re

from pydantic import ValidationError

from manifestpro.errors import ErrorKind, ManifestError
from manifestpro.schemas.manifest import ManifestLineItem

logger = logging.getLogger("manifestpro.response_parser")

RAW_EXCERPT_CHARS = 500

_LEADING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```$")


def strip_code_fence(raw: str) -> str:
    """Remove one leading and one trailing ``` fence (with optional language tag)."""
    text = raw.strip()
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def parse_model_reply(raw: str) -> list:
    """Decode a model reply that must be a JSON array.

    Raises:
        ManifestError: INVALID_JSON if the text does not decode,
            UNEXPECTED_SHAPE if it decodes to anything but an array.
    """
    text = strip_code_fence(raw or "")
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Model reply is not valid JSON: %s", e)
        raise ManifestError(
            ErrorKind.INVALID_JSON,
            "AI response is not valid JSON",
            detail=(raw or "")[:RAW_EXCERPT_CHARS],
        ) from e

    if not isinstance(decoded, list):
        raise ManifestError(
            ErrorKind.UNEXPECTED_SHAPE,
            f"AI response is not an array (got {type(decoded).__name__})",
            detail=(raw or "")[:RAW_EXCERPT_CHARS],
        )
    return decoded


def validate_line_items(records: list) -> list[ManifestLineItem]:
    """Validate decoded records against the canonical line-item schema."""
    items: list[ManifestLineItem] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ManifestError(
                ErrorKind.UNEXPECTED_SHAPE,
                f"Item {index + 1} is not an object (got {type(record).__name__})",
            )
        try:
            items.append(ManifestLineItem.model_validate(record))
        except ValidationError as e:
            raise ManifestError(
                ErrorKind.UNEXPECTED_SHAPE,
                f"Item {index + 1} does not match the manifest schema",
                detail=str(e),
            ) from e
    return items
