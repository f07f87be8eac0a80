"""
Tabular extraction for uploaded manifest spreadsheets.

Reads only the first sheet of a workbook (or the whole of a CSV file) and
returns it both as CSV text, for prompting, and as header-keyed records,
for direct mapping. No assumptions are made about column names.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path

import aiofiles
from openpyxl import load_workbook

from manifestpro.errors import ErrorKind, ManifestError

logger = logging.getLogger("manifestpro.tabular")

WORKBOOK_TYPES = ("xlsx", "xlsm")


@dataclass
class ExtractedTable:
    """First-sheet contents of an uploaded spreadsheet."""

    text: str = ""
    headers: list[str] = field(default_factory=list)
    records: list[dict[str, str]] = field(default_factory=list)
    sheet_name: str = ""

    @property
    def row_count(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


def cell_text(value: object) -> str:
    """Render a cell value the way it reads in the spreadsheet."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value).strip()


def _trim_rows(rows: list[list[str]]) -> list[list[str]]:
    """Drop fully blank rows and trailing blank columns."""
    rows = [row for row in rows if any(cell for cell in row)]
    if not rows:
        return []
    width = max(
        (max((i + 1 for i, cell in enumerate(row) if cell), default=0) for row in rows),
        default=0,
    )
    return [(row + [""] * width)[:width] for row in rows]


def _to_csv(rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def _to_records(rows: list[list[str]]) -> tuple[list[str], list[dict[str, str]]]:
    if not rows:
        return [], []
    headers: list[str] = []
    for i, name in enumerate(rows[0]):
        key = name or f"column_{i + 1}"
        # Duplicate header names keep every column.
        while key in headers:
            key = f"{key}_{i + 1}"
        headers.append(key)
    records = [dict(zip(headers, row)) for row in rows[1:]]
    return headers, records


class TabularExtractor:
    """Reads the first sheet of an uploaded spreadsheet."""

    async def extract(self, file_path: str, file_type: str) -> ExtractedTable:
        """Extract the first sheet as CSV text and records.

        Raises:
            FileNotFoundError: if the file does not exist.
            ManifestError: INVALID_ARGUMENT for unsupported types or
                unreadable workbooks, EMPTY_INPUT when nothing remains after
                trimming whitespace.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Spreadsheet not found: {file_path}")

        file_type = file_type.lower().lstrip(".")
        if file_type in WORKBOOK_TYPES:
            sheet_name, rows = self._read_workbook(path)
        elif file_type == "csv":
            sheet_name, rows = await self._read_csv(path)
        else:
            raise ManifestError(
                ErrorKind.INVALID_ARGUMENT,
                f"Unsupported spreadsheet type: {file_type!r}",
                status_code=400,
            )

        rows = _trim_rows(rows)
        headers, records = _to_records(rows)
        table = ExtractedTable(
            text=_to_csv(rows),
            headers=headers,
            records=records,
            sheet_name=sheet_name,
        )

        if table.is_empty:
            raise ManifestError(
                ErrorKind.EMPTY_INPUT,
                "Spreadsheet is empty or could not be converted",
            )

        logger.info(
            "Extracted sheet %r: %d columns, %d data rows",
            sheet_name,
            len(headers),
            table.row_count,
        )
        return table

    def _read_workbook(self, path: Path) -> tuple[str, list[list[str]]]:
        try:
            workbook = load_workbook(path, read_only=True, data_only=True)
        except Exception as e:
            raise ManifestError(
                ErrorKind.INVALID_ARGUMENT,
                f"Could not read workbook: {e}",
                status_code=400,
            ) from e

        try:
            if not workbook.worksheets:
                return "", []
            sheet = workbook.worksheets[0]
            rows = [
                [cell_text(value) for value in row]
                for row in sheet.iter_rows(values_only=True)
            ]
            return sheet.title, rows
        finally:
            workbook.close()

    async def _read_csv(self, path: Path) -> tuple[str, list[list[str]]]:
        async with aiofiles.open(path, mode="r", encoding="utf-8-sig", errors="replace") as f:
            content = await f.read()
        rows = [[cell.strip() for cell in row] for row in csv.reader(io.StringIO(content))]
        return path.stem, rows
