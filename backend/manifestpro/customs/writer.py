"""Writes a unified manifest back to the seven-sheet customs workbook layout.

Data only: one header row per sheet, then values in the fixed column order.
"""

import logging
from pathlib import Path
from typing import Any, Iterable

from openpyxl import Workbook

from manifestpro.customs import sheets
from manifestpro.schemas.customs import UnifiedManifest

logger = logging.getLogger("manifestpro.customs")


def _write_sheet(
    workbook: Workbook,
    title: str,
    columns: tuple[sheets.Column, ...],
    records: Iterable[dict[str, Any]],
) -> int:
    worksheet = workbook.create_sheet(title)
    worksheet.append([column.label for column in columns])
    count = 0
    for record in records:
        worksheet.append([_cell_value(record.get(column.key), column.kind) for column in columns])
        count += 1
    return count


def _cell_value(value: Any, kind: str) -> Any:
    if kind == sheets.NUMBER:
        return value if isinstance(value, (int, float)) else 0
    if value is None:
        return ""
    return value


def manifest_sheet_records(manifest: UnifiedManifest) -> dict[str, list[dict[str, Any]]]:
    """Rows of every sheet, in workbook order, as plain records."""
    masters = [master.model_dump(exclude={"houses"}) for master in manifest.masters.values()]
    details = [item for house in manifest.iter_houses() for item in house.items]
    return {
        sheets.HEADER_SHEET: [manifest.header] if manifest.header else [],
        sheets.MASTER_ENTRY_SHEET: masters,
        sheets.DETIL_SHEET: details,
        sheets.BARANG_SHEET: manifest.unique_records("barangs"),
        sheets.DOKUMEN_SHEET: manifest.unique_records("dokumens"),
        sheets.KONTAINER_SHEET: manifest.unique_records("containers"),
        sheets.RESPON_HEADER_SHEET: manifest.responses,
    }


def write_customs_workbook(manifest: UnifiedManifest, output_path: str) -> str:
    """Save the manifest as an .xlsx workbook and return the path."""
    workbook = Workbook()
    workbook.remove(workbook.active)

    rows = manifest_sheet_records(manifest)
    counts = {
        title: _write_sheet(workbook, title, columns, rows[title])
        for title, columns in sheets.SHEETS
    }

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)
    logger.info("Customs workbook saved: %s (%s)", path, counts)
    return str(path)
