"""
Links the flat customs sheets into a Master B/L -> House B/L hierarchy.

Detail rows are grouped by master B/L and then by house B/L; the first
detail row of a house seeds its fields and every detail row of that house is
kept in ``items``. Goods attach to a house by house B/L; containers and
documents by master B/L and house B/L. Rows whose keys match no house are
left out and counted in ``UnifiedManifest.orphans``.
"""

import logging
from collections import defaultdict
from typing import Any

from manifestpro.schemas.customs import (
    HouseEntry,
    ManifestSummary,
    MasterEntry,
    OrphanCounts,
    UnifiedManifest,
)

logger = logging.getLogger("manifestpro.customs")

Record = dict[str, Any]


def _key(record: Record, field: str) -> str:
    return str(record.get(field) or "").strip()


def _distinct(records: list[Record], field: str) -> int:
    return len({_key(r, field) for r in records})


def summarize(
    master_entries: list[Record],
    detail_records: list[Record],
    goods_records: list[Record],
    container_records: list[Record],
    document_records: list[Record],
) -> ManifestSummary:
    """Counts over the flat inputs, independent of how much of them could be linked."""
    return ManifestSummary(
        total_master_bl=_distinct(master_entries, "no_master_bl"),
        total_house_bl=_distinct(detail_records, "no_house_bl"),
        total_barang=len(goods_records),
        total_kontainer=_distinct(container_records, "nomor_kontainer"),
        total_dokumen=len(document_records),
    )


def build_unified_manifest(
    header: Record | None,
    master_entries: list[Record],
    detail_records: list[Record],
    goods_records: list[Record],
    container_records: list[Record],
    document_records: list[Record],
    responses: list[Record] | None = None,
) -> UnifiedManifest:
    details_by_master: dict[str, list[Record]] = defaultdict(list)
    for detail in detail_records:
        details_by_master[_key(detail, "no_master_bl")].append(detail)

    masters: dict[str, MasterEntry] = {}
    linked: dict[str, set[int]] = {"barangs": set(), "containers": set(), "dokumens": set()}

    for master in master_entries:
        mbl = _key(master, "no_master_bl")
        if mbl in masters:
            logger.warning("Duplicate master B/L %s in Master Entry sheet, keeping the first", mbl)
            continue

        houses: dict[str, HouseEntry] = {}
        for detail in details_by_master.get(mbl, []):
            hbl = _key(detail, "no_house_bl")
            if hbl not in houses:
                houses[hbl] = HouseEntry.model_validate(
                    {**detail, "items": [], "barangs": [], "containers": [], "dokumens": []}
                )
            houses[hbl].items.append(detail)

        for barang in goods_records:
            house = houses.get(_key(barang, "no_house_bl"))
            if house is not None:
                house.barangs.append(barang)
                linked["barangs"].add(id(barang))

        for kontainer in container_records:
            if _key(kontainer, "no_master_bl") != mbl:
                continue
            house = houses.get(_key(kontainer, "no_house_bl"))
            if house is not None:
                house.containers.append(kontainer)
                linked["containers"].add(id(kontainer))

        for dokumen in document_records:
            if _key(dokumen, "no_master_bl") != mbl:
                continue
            house = houses.get(_key(dokumen, "no_house_bl"))
            if house is not None:
                house.dokumens.append(dokumen)
                linked["dokumens"].add(id(dokumen))

        masters[mbl] = MasterEntry.model_validate({**master, "houses": list(houses.values())})

    orphans = OrphanCounts(
        details=sum(1 for d in detail_records if _key(d, "no_master_bl") not in masters),
        barangs=sum(1 for r in goods_records if id(r) not in linked["barangs"]),
        containers=sum(1 for r in container_records if id(r) not in linked["containers"]),
        dokumens=sum(1 for r in document_records if id(r) not in linked["dokumens"]),
    )
    if orphans.total:
        logger.warning(
            "Dropped unlinked rows: %d details, %d goods, %d containers, %d documents",
            orphans.details,
            orphans.barangs,
            orphans.containers,
            orphans.dokumens,
        )

    manifest = UnifiedManifest(
        header=header,
        masters=masters,
        responses=list(responses or []),
        summary=summarize(
            master_entries, detail_records, goods_records, container_records, document_records
        ),
        orphans=orphans,
    )
    logger.info("Unified manifest built with %d master B/Ls", len(masters))
    return manifest
