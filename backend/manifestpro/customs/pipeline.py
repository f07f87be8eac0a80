"""
Customs workbook pipeline.

Flow:
  1. Read the seven sheets into flat records
  2. Link them into a Master -> House -> Goods/Containers/Documents manifest
  3. Backfill HS codes of goods lines
  4. Write the processed workbook
"""

import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path

from manifestpro.config import Settings
from manifestpro.customs.builder import build_unified_manifest
from manifestpro.customs.reader import read_customs_workbook
from manifestpro.customs.writer import write_customs_workbook
from manifestpro.manifest.hs_codes import HSCodeEnricher, HSStrategy
from manifestpro.providers.base import parse_provider_id
from manifestpro.providers.router import ProviderRouter
from manifestpro.schemas.customs import UnifiedManifest
from manifestpro.schemas.manifest import EnrichmentStatsOut

logger = logging.getLogger("manifestpro.customs.pipeline")


@dataclass
class CustomsResult:
    manifest: UnifiedManifest
    output_path: str
    model_used: str
    processing_time_ms: int = 0

    @property
    def output_file(self) -> str:
        return Path(self.output_path).name


class CustomsPipeline:
    """Processes one uploaded customs manifest workbook."""

    def __init__(self, settings: Settings, router: ProviderRouter | None = None):
        self.settings = settings
        self.router = router or ProviderRouter(settings)

    async def run(
        self,
        file_path: str,
        model_source: str | None = None,
        hs_strategy: HSStrategy | None = None,
    ) -> CustomsResult:
        start_time = time.monotonic()
        provider = parse_provider_id(model_source or self.settings.hs_primary_provider)

        parsed = read_customs_workbook(file_path)
        manifest = build_unified_manifest(
            parsed.header,
            parsed.master_entries,
            parsed.details,
            parsed.goods,
            parsed.containers,
            parsed.documents,
            responses=parsed.responses,
        )

        await self.enrich(manifest, provider.value, hs_strategy)

        output_path = str(
            Path(self.settings.output_dir) / f"CEISA_Processed_{uuid.uuid4().hex[:12]}.xlsx"
        )
        write_customs_workbook(manifest, output_path)

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        return CustomsResult(
            manifest=manifest,
            output_path=output_path,
            model_used=provider.value,
            processing_time_ms=elapsed_ms,
        )

    async def enrich(
        self,
        manifest: UnifiedManifest,
        model_source: str,
        hs_strategy: HSStrategy | None = None,
    ) -> UnifiedManifest:
        """Fill missing HS codes on every linked goods line, in place."""
        goods = manifest.unique_records("barangs")
        houses_by_goods = {
            id(barang): house for house in manifest.iter_houses() for barang in house.barangs
        }

        entries = []
        for barang in goods:
            description = barang.get("uraian_barang") or ""
            if not description:
                # Fall back to the house B/L's goods type.
                house = houses_by_goods.get(id(barang))
                description = getattr(house, "jenis_barang", "") or ""
            entries.append((description, barang.get("hs_code") or ""))

        enricher = HSCodeEnricher.from_settings(
            self.router, self.settings, primary=model_source, strategy=hs_strategy
        )
        codes, stats = await enricher.resolve(entries)
        for barang, code in zip(goods, codes):
            barang["hs_code"] = code

        manifest.enrichment_stats = EnrichmentStatsOut(
            hs_codes_added=stats.hs_codes_added,
            validations_run=stats.validations_run,
        )
        return manifest
