"""Reads a seven-sheet customs manifest workbook into flat record lists."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from manifestpro.customs import sheets
from manifestpro.errors import ErrorKind, ManifestError
from manifestpro.manifest.hs_normalize import normalize_hs_code
from manifestpro.manifest.tabular import cell_text
from manifestpro.schemas.manifest import coerce_number

logger = logging.getLogger("manifestpro.customs")

Record = dict[str, Any]


@dataclass
class CustomsWorkbook:
    header: Record | None = None
    master_entries: list[Record] = field(default_factory=list)
    details: list[Record] = field(default_factory=list)
    goods: list[Record] = field(default_factory=list)
    documents: list[Record] = field(default_factory=list)
    containers: list[Record] = field(default_factory=list)
    responses: list[Record] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.header or self.master_entries or self.details or self.goods)


def convert_cell(value: object, kind: str) -> Any:
    if kind == sheets.NUMBER:
        return coerce_number(value)
    text = cell_text(value)
    if kind == sheets.HS_CODE:
        return normalize_hs_code(text)
    if kind == sheets.CONTAINER:
        return text.upper()
    return text


def row_to_record(values: tuple, columns: tuple[sheets.Column, ...]) -> Record:
    padded = tuple(values) + (None,) * max(0, len(columns) - len(values))
    return {column.key: convert_cell(padded[i], column.kind) for i, column in enumerate(columns)}


def read_rows(worksheet: Worksheet | None, columns: tuple[sheets.Column, ...]) -> list[Record]:
    """Data rows from row 2 down to the first row whose first cell is empty."""
    if worksheet is None:
        return []
    records: list[Record] = []
    for values in worksheet.iter_rows(min_row=2, values_only=True):
        if not values or not cell_text(values[0]):
            break
        records.append(row_to_record(values, columns))
    return records


def _sheet(workbook, name: str) -> Worksheet | None:
    if name in workbook.sheetnames:
        return workbook[name]
    logger.warning("%s sheet not found", name)
    return None


def read_customs_workbook(file_path: str) -> CustomsWorkbook:
    """Parse every sheet of a customs manifest workbook.

    Missing sheets yield empty lists. Raises ManifestError(EMPTY_INPUT) if the
    workbook has no header, master, detail or goods rows at all.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Workbook not found: {file_path}")

    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except Exception as e:
        raise ManifestError(
            ErrorKind.INVALID_ARGUMENT, f"Could not read workbook: {e}", status_code=400
        ) from e

    try:
        header_rows = read_rows(_sheet(workbook, sheets.HEADER_SHEET), sheets.HEADER_COLUMNS)
        parsed = CustomsWorkbook(
            header=header_rows[0] if header_rows else None,
            master_entries=read_rows(
                _sheet(workbook, sheets.MASTER_ENTRY_SHEET), sheets.MASTER_ENTRY_COLUMNS
            ),
            details=read_rows(_sheet(workbook, sheets.DETIL_SHEET), sheets.DETIL_COLUMNS),
            goods=read_rows(_sheet(workbook, sheets.BARANG_SHEET), sheets.BARANG_COLUMNS),
            documents=read_rows(_sheet(workbook, sheets.DOKUMEN_SHEET), sheets.DOKUMEN_COLUMNS),
            containers=read_rows(
                _sheet(workbook, sheets.KONTAINER_SHEET), sheets.KONTAINER_COLUMNS
            ),
            responses=read_rows(
                _sheet(workbook, sheets.RESPON_HEADER_SHEET), sheets.RESPON_HEADER_COLUMNS
            ),
        )
    finally:
        workbook.close()

    if parsed.is_empty:
        raise ManifestError(ErrorKind.EMPTY_INPUT, "Customs workbook has no manifest rows")

    logger.info(
        "Parsed customs workbook: NOMOR AJU %s, %d master, %d detail, %d goods, "
        "%d document, %d container rows",
        (parsed.header or {}).get("nomor_aju") or "N/A",
        len(parsed.master_entries),
        len(parsed.details),
        len(parsed.goods),
        len(parsed.documents),
        len(parsed.containers),
    )
    return parsed
