from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from manifestpro.schemas.manifest import EnrichmentStatsOut

Record = dict[str, Any]


class HouseEntry(BaseModel):
    """A house B/L: the first detail row's fields plus everything linked to it."""

    model_config = ConfigDict(extra="allow")

    no_master_bl: str = ""
    no_house_bl: str = ""
    items: list[Record] = Field(default_factory=list, description="Detail rows of this house B/L")
    barangs: list[Record] = Field(default_factory=list)
    containers: list[Record] = Field(default_factory=list)
    dokumens: list[Record] = Field(default_factory=list)


class MasterEntry(BaseModel):
    """A master B/L row with its house B/Ls."""

    model_config = ConfigDict(extra="allow")

    no_master_bl: str = ""
    houses: list[HouseEntry] = Field(default_factory=list)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ManifestSummary(_CamelModel):
    total_master_bl: int = 0
    total_house_bl: int = 0
    total_barang: int = 0
    total_kontainer: int = 0
    total_dokumen: int = 0


class OrphanCounts(_CamelModel):
    """Child rows whose foreign keys matched nothing and were left out."""

    details: int = 0
    barangs: int = 0
    containers: int = 0
    dokumens: int = 0

    @property
    def total(self) -> int:
        return self.details + self.barangs + self.containers + self.dokumens


class UnifiedManifest(BaseModel):
    header: Record | None = None
    masters: dict[str, MasterEntry] = Field(default_factory=dict)
    responses: list[Record] = Field(default_factory=list)
    summary: ManifestSummary = Field(default_factory=ManifestSummary)
    orphans: OrphanCounts = Field(default_factory=OrphanCounts)
    enrichment_stats: EnrichmentStatsOut | None = None

    def iter_houses(self):
        for master in self.masters.values():
            yield from master.houses

    def unique_records(self, attribute: str) -> list[Record]:
        """Child records of every house, each once even if linked to several houses."""
        seen: set[int] = set()
        records: list[Record] = []
        for house in self.iter_houses():
            for record in getattr(house, attribute):
                if id(record) not in seen:
                    seen.add(id(record))
                    records.append(record)
        return records


class CustomsProcessResponse(_CamelModel):
    success: bool = True
    message: str = "Customs manifest processed successfully"
    output_file: str
    model_used: str
    header: Record | None = None
    summary: ManifestSummary
    enrichment: EnrichmentStatsOut
    orphans: OrphanCounts
    processing_time_ms: int = 0
