"""
Column contract of the seven-sheet customs manifest workbook.

Each sheet is an ordered list of ``(column label, record key, kind)``. The
reader and the writer both use these tables, so a workbook that is read and
written back keeps its exact column order.
"""

from dataclasses import dataclass

TEXT = "text"
NUMBER = "number"
HS_CODE = "hs_code"
CONTAINER = "container"


@dataclass(frozen=True)
class Column:
    label: str
    key: str
    kind: str = TEXT


def _columns(*specs: tuple) -> tuple[Column, ...]:
    return tuple(Column(*spec) for spec in specs)


HEADER_SHEET = "Header"
MASTER_ENTRY_SHEET = "Master Entry"
DETIL_SHEET = "Detil"
BARANG_SHEET = "Barang"
DOKUMEN_SHEET = "Dokumen"
KONTAINER_SHEET = "Kontainer"
RESPON_HEADER_SHEET = "Respon Header"

HEADER_COLUMNS = _columns(
    ("NOMOR AJU", "nomor_aju"),
    ("ID DATA", "id_data"),
    ("NPWP", "npwp"),
    ("JNS MANIFEST", "jns_manifest"),
    ("KD JNS MANIFEST", "kd_jns_manifest"),
    ("KPPBC", "kppbc"),
    ("NO BC 10", "no_bc_10"),
    ("TGL BC 10", "tgl_bc_10"),
    ("NO BC 11", "no_bc_11"),
    ("TGL BC 11", "tgl_bc_11"),
    ("NAMA SARANA ANGKUT", "nama_sarana_angkut"),
    ("KODE MODA", "kode_moda"),
    ("CALL SIGN", "call_sign"),
    ("NO IMO", "no_imo"),
    ("NO_MMSI", "no_mmsi"),
    ("NEGARA", "negara"),
    ("TANGGAL TIBA", "tanggal_tiba"),
    ("PEL TUP", "pel_tup"),
    ("PEL MUAT", "pel_muat"),
    ("PEL TRANSIT", "pel_transit"),
    ("PEL BONGKAR", "pel_bongkar"),
    ("VOYAGE", "voyage"),
    ("VOYAGE OUT", "voyage_out"),
    ("TANGGAL BERANGKAT", "tanggal_berangkat"),
    ("NO FLIGHT", "no_flight"),
    ("NO INVOICE", "no_invoice"),
    ("NO CO", "no_co"),
    ("TGL CO", "tgl_co"),
    ("TGL BC12", "tgl_bc12"),
    ("NO BC12", "no_bc12"),
    ("VERSI", "versi"),
    ("FLAG BATAL", "flag_batal"),
    ("NO POS DOKUMEN", "no_pos_dokumen"),
    ("TGL POS DOKUMEN", "tgl_pos_dokumen"),
    ("KODE BENDERA", "kode_bendera"),
    ("KODE GUDANG", "kode_gudang"),
    ("TOTAL KONT", "total_kont", NUMBER),
    ("TOTAL BARANG", "total_barang", NUMBER),
    ("TOTAL MASTER", "total_master", NUMBER),
    ("TOTAL HOUSE", "total_house", NUMBER),
    ("TOTAL BERAT", "total_berat", NUMBER),
    ("TOTAL VOLUME", "total_volume", NUMBER),
    ("KD TPS", "kd_tps"),
)

MASTER_ENTRY_COLUMNS = _columns(
    ("ID DATA", "id_data"),
    ("ID MASTER", "id_master"),
    ("NO MASTER BL", "no_master_bl"),
    ("TGL MASTER BL", "tgl_master_bl"),
    ("NAMA SHIPPER", "nama_shipper"),
    ("NAMA CONSIGNEE", "nama_consignee"),
    ("JUMLAH HOUSE", "jumlah_house", NUMBER),
    ("TOTAL KONTAINER", "total_kontainer", NUMBER),
    ("TOTAL BERAT", "total_berat", NUMBER),
    ("TOTAL VOLUME", "total_volume", NUMBER),
    ("PEL MUAT", "pel_muat"),
    ("PEL TRANSIT", "pel_transit"),
    ("PEL BONGKAR", "pel_bongkar"),
)

DETIL_COLUMNS = _columns(
    ("ID DATA", "id_data"),
    ("ID DETIL", "id_detil"),
    ("ID MASTER", "id_master"),
    ("NO MASTER BL", "no_master_bl"),
    ("NO HOUSE BL", "no_house_bl"),
    ("TGL HOUSE BL", "tgl_house_bl"),
    ("NAMA SHIPPER", "nama_shipper"),
    ("NPWP SHIPPER", "npwp_shipper"),
    ("NAMA CONSIGNEE", "nama_consignee"),
    ("NPWP CONSIGNEE", "npwp_consignee"),
    ("ALAMAT CONSIGNEE", "alamat_consignee"),
    ("JENIS BARANG", "jenis_barang"),
    ("JUMLAH", "jumlah", NUMBER),
    ("SATUAN JUMLAH", "satuan_jumlah"),
    ("BERAT KOTOR", "berat_kotor", NUMBER),
    ("VOLUME", "volume", NUMBER),
    ("MARKS", "marks"),
    ("NOMOR KONTAINER", "nomor_kontainer", CONTAINER),
)

BARANG_COLUMNS = _columns(
    ("ID DATA", "id_data"),
    ("ID DETIL", "id_detil"),
    ("NO HOUSE BL", "no_house_bl"),
    ("HS CODE", "hs_code", HS_CODE),
    ("URAIAN BARANG", "uraian_barang"),
    ("JUMLAH", "jumlah", NUMBER),
    ("SATUAN JUMLAH", "satuan_jumlah"),
    ("BERAT KOTOR", "berat_kotor", NUMBER),
    ("VOLUME", "volume", NUMBER),
)

DOKUMEN_COLUMNS = _columns(
    ("ID DATA", "id_data"),
    ("ID DOKUMEN", "id_dokumen"),
    ("NO MASTER BL", "no_master_bl"),
    ("NO HOUSE BL", "no_house_bl"),
    ("JENIS DOKUMEN", "jenis_dokumen"),
    ("NOMOR DOKUMEN", "nomor_dokumen"),
    ("TANGGAL DOKUMEN", "tanggal_dokumen"),
)

KONTAINER_COLUMNS = _columns(
    ("ID DATA", "id_data"),
    ("ID KONTAINER", "id_kontainer"),
    ("NO MASTER BL", "no_master_bl"),
    ("NO HOUSE BL", "no_house_bl"),
    ("NOMOR KONTAINER", "nomor_kontainer", CONTAINER),
    ("UKURAN KONTAINER", "ukuran_kontainer"),
    ("TIPE KONTAINER", "tipe_kontainer"),
    ("JENIS KONTAINER", "jenis_kontainer"),
    ("NOMOR SEGEL", "nomor_segel"),
    ("STATUS KONTAINER", "status_kontainer"),
)

RESPON_HEADER_COLUMNS = _columns(
    ("ID RESPON", "id_respon"),
    ("NOMOR AJU", "nomor_aju"),
    ("KODE RESPON", "kode_respon"),
    ("TANGGAL RESPON", "tanggal_respon"),
    ("WAKTU RESPON", "waktu_respon"),
    ("NOMOR DOKUMEN RESPON", "nomor_dokumen_respon"),
    ("TANGGAL DOKUMEN RESPON", "tanggal_dokumen_respon"),
    ("KODE KANTOR", "kode_kantor"),
    ("BYTE STREAM PDF", "byte_stream_pdf"),
    ("FLAG BACA", "flag_baca"),
)

# Sheet order of the workbook.
SHEETS: tuple[tuple[str, tuple[Column, ...]], ...] = (
    (HEADER_SHEET, HEADER_COLUMNS),
    (MASTER_ENTRY_SHEET, MASTER_ENTRY_COLUMNS),
    (DETIL_SHEET, DETIL_COLUMNS),
    (BARANG_SHEET, BARANG_COLUMNS),
    (DOKUMEN_SHEET, DOKUMEN_COLUMNS),
    (KONTAINER_SHEET, KONTAINER_COLUMNS),
    (RESPON_HEADER_SHEET, RESPON_HEADER_COLUMNS),
)
