from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from openpyxl import Workbook

from manifestpro.config import Settings
from manifestpro.customs import sheets
from manifestpro.providers.base import ProviderId
from manifestpro.providers.router import ProviderReply


def make_settings(**overrides) -> Settings:
    values = dict(
        groq_api_key="test-groq",
        gemini_api_key="test-gemini",
        deepseek_api_key="",
        anthropic_api_key="",
        hs_request_delay_seconds=0.0,
        environment="test",
    )
    values.update(overrides)
    return Settings(**values)


def make_router(*texts: str, provider: ProviderId = ProviderId.GROQ):
    """A stand-in ProviderRouter whose call_ai replies with ``texts`` in order."""
    router = AsyncMock()
    router.call_ai = AsyncMock(
        side_effect=[ProviderReply(text=text, provider=provider) for text in texts]
    )
    return router


SAMPLE_MANIFEST_ROWS = [
    ["No", "Goods Description", "HS", "Qty", "Unit", "Price", "Amount", "GW (kg)", "CBM", "Origin"],
    [1, "Hydraulic pump", "8413.50", 10, "PCS", 120.5, 1205, 250.5, 1.2, "China"],
    [2, "Air filter element", "", 200, "PCS", 3.25, 650, 80, 0.4, "China"],
]


@pytest.fixture
async def client(tmp_path):
    from manifestpro.config import settings
    from manifestpro.main import app

    # Override storage dirs to temp
    original = (settings.upload_dir, settings.output_dir)
    settings.upload_dir = str(tmp_path / "uploads")
    settings.output_dir = str(tmp_path / "out")

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    settings.upload_dir, settings.output_dir = original


@pytest.fixture
def manifest_xlsx(tmp_path) -> str:
    """A one-sheet manifest workbook with two goods rows."""
    path = tmp_path / "manifest.xlsx"
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Packing List"
    for row in SAMPLE_MANIFEST_ROWS:
        sheet.append(row)
    # A second sheet must be ignored.
    workbook.create_sheet("Notes").append(["ignore me"])
    workbook.save(path)
    return str(path)


@pytest.fixture
def manifest_csv(tmp_path) -> str:
    path = tmp_path / "manifest.csv"
    path.write_text(
        "No,Goods Description,Qty\n1,Hydraulic pump,10\n2,Air filter element,200\n",
        encoding="utf-8",
    )
    return str(path)


def customs_rows() -> dict[str, list[dict]]:
    """Flat records of a small customs manifest: one master, two houses."""
    return {
        sheets.HEADER_SHEET: [{"nomor_aju": "000020-123456-20251105-000001", "npwp": "0123"}],
        sheets.MASTER_ENTRY_SHEET: [
            {"id_data": "1", "id_master": "M1", "no_master_bl": "MBL001", "nama_shipper": "ACME"},
        ],
        sheets.DETIL_SHEET: [
            {
                "id_data": "1", "id_detil": "D1", "no_master_bl": "MBL001",
                "no_house_bl": "HBL001", "jenis_barang": "SPARE PARTS", "jumlah": 10,
            },
            {
                "id_data": "1", "id_detil": "D2", "no_master_bl": "MBL001",
                "no_house_bl": "HBL001", "jenis_barang": "SPARE PARTS", "jumlah": 5,
            },
            {
                "id_data": "1", "id_detil": "D3", "no_master_bl": "MBL001",
                "no_house_bl": "HBL002", "jenis_barang": "TEXTILES", "jumlah": 3,
            },
        ],
        sheets.BARANG_SHEET: [
            {
                "id_data": "1", "id_detil": "D1", "no_house_bl": "HBL001",
                "hs_code": "8413.50.00", "uraian_barang": "Hydraulic pump", "jumlah": 10,
            },
            {
                "id_data": "1", "id_detil": "D3", "no_house_bl": "HBL002",
                "hs_code": "", "uraian_barang": "Cotton fabric", "jumlah": 3,
            },
        ],
        sheets.DOKUMEN_SHEET: [
            {
                "id_data": "1", "id_dokumen": "DOC1", "no_master_bl": "MBL001",
                "no_house_bl": "HBL001", "jenis_dokumen": "INVOICE",
            },
        ],
        sheets.KONTAINER_SHEET: [
            {
                "id_data": "1", "id_kontainer": "K1", "no_master_bl": "MBL001",
                "no_house_bl": "HBL001", "nomor_kontainer": "tcnu1234567",
            },
            {
                "id_data": "1", "id_kontainer": "K2", "no_master_bl": "MBL001",
                "no_house_bl": "HBL002", "nomor_kontainer": "TCNU1234567",
            },
        ],
        sheets.RESPON_HEADER_SHEET: [],
    }


def write_customs_fixture(path, rows: dict[str, list[dict]] | None = None) -> str:
    rows = customs_rows() if rows is None else rows
    workbook = Workbook()
    workbook.remove(workbook.active)
    for title, columns in sheets.SHEETS:
        worksheet = workbook.create_sheet(title)
        worksheet.append([column.label for column in columns])
        for record in rows.get(title, []):
            worksheet.append([record.get(column.key) for column in columns])
    workbook.save(path)
    return str(path)


@pytest.fixture
def customs_xlsx(tmp_path) -> str:
    return write_customs_fixture(tmp_path / "ceisa.xlsx")
