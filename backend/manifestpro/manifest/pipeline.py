"""
Manifest normalization pipeline.

Flow:
  1. Extract the first sheet as CSV text
  2. Build the normalization prompt
  3. Call the selected provider (with fallback)
  4. Parse and validate the reply into line items
  5. Sequence items and fill missing B/L numbers
  6. Backfill missing HS codes
"""

import logging
import time
from dataclasses import dataclass, field

from manifestpro.config import Settings
from manifestpro.manifest.hs_codes import EnrichmentStats, HSCodeEnricher, HSStrategy
from manifestpro.manifest.numbering import NumberingConfig, assign_sequence, fill_bl_numbers
from manifestpro.manifest.prompt import CANONICAL_COLUMNS, build_normalization_prompt
from manifestpro.manifest.response_parser import parse_model_reply, validate_line_items
from manifestpro.manifest.tabular import TabularExtractor
from manifestpro.providers.base import CompletionOptions, parse_provider_id
from manifestpro.providers.router import ProviderRouter
from manifestpro.schemas.manifest import ManifestLineItem

logger = logging.getLogger("manifestpro.pipeline")


@dataclass(frozen=True)
class NormalizationRequest:
    """Per-request options of the normalize pipeline."""

    model_source: str = "groq"
    numbering: NumberingConfig = field(default_factory=NumberingConfig)
    instruction: str | None = None
    enrich_hs_codes: bool = True
    hs_strategy: HSStrategy | None = None


@dataclass
class NormalizationResult:
    items: list[ManifestLineItem]
    model_used: str
    filename: str
    fallback_from: str | None = None
    enrichment_stats: EnrichmentStats | None = None
    processing_time_ms: int = 0

    @property
    def total_items(self) -> int:
        return len(self.items)


class NormalizationPipeline:
    """Turns one uploaded spreadsheet into canonical manifest line items."""

    def __init__(self, settings: Settings, router: ProviderRouter | None = None):
        self.settings = settings
        self.extractor = TabularExtractor()
        self.router = router or ProviderRouter(settings)

    async def run(
        self,
        file_path: str,
        file_type: str,
        filename: str,
        request: NormalizationRequest | None = None,
    ) -> NormalizationResult:
        request = request or NormalizationRequest(model_source=self.settings.default_provider)
        start_time = time.monotonic()

        # Validate the selector before touching the file or the network.
        provider = parse_provider_id(request.model_source)

        logger.info("Normalizing %s with %s", filename, provider.value)
        table = await self.extractor.extract(file_path, file_type)

        prompt = build_normalization_prompt(
            list(CANONICAL_COLUMNS), table.text, request.instruction
        )
        reply = await self.router.call_ai(
            provider,
            prompt,
            CompletionOptions(max_tokens=self._max_tokens_for(table.row_count)),
        )

        records = parse_model_reply(reply.text)
        items = validate_line_items(records)
        if len(items) != table.row_count:
            logger.warning(
                "Model returned %d items for %d source rows", len(items), table.row_count
            )

        items = assign_sequence(items, renumber=self.settings.renumber_items)
        items = fill_bl_numbers(items, request.numbering)

        stats: EnrichmentStats | None = None
        if request.enrich_hs_codes and self.settings.hs_enrichment_enabled:
            enricher = HSCodeEnricher.from_settings(
                self.router,
                self.settings,
                primary=provider,
                strategy=request.hs_strategy,
            )
            items, stats = await enricher.enrich_line_items(items)

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        logger.info("Normalized %s: %d items in %d ms", filename, len(items), elapsed_ms)

        return NormalizationResult(
            items=items,
            model_used=reply.provider.value,
            filename=filename,
            fallback_from=reply.fallback_from.value if reply.fallback_from else None,
            enrichment_stats=stats,
            processing_time_ms=elapsed_ms,
        )

    def _max_tokens_for(self, row_count: int) -> int:
        """Room for roughly 200 output tokens per row, within the provider limit."""
        wanted = max(self.settings.provider_max_tokens, row_count * 200 + 1000)
        return min(wanted, self.settings.provider_max_tokens_limit)
