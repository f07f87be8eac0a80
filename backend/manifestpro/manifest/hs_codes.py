"""
HS tariff code normalization and AI-backed enrichment.

Every item whose code is missing or shorter than 6 digits gets a lookup
through the provider router. A failed lookup leaves that item's code empty
and never aborts the batch, so enrichment always returns as many codes as
it was given.

Two strategies:
- sequential: one lookup per item with a fixed delay between requests
  (provider rate limits); this is the correctness baseline.
- batch: one prompt per chunk of descriptions answered with a JSON array
  keyed by position; a chunk whose reply cannot be decoded falls back to
  sequential lookups.
"""

import asyncio
import enum
import json
import logging
import re
from dataclasses import asdict, dataclass
from typing import Awaitable, Callable

from manifestpro.config import Settings
from manifestpro.errors import ErrorKind, ManifestError
from manifestpro.manifest.hs_normalize import has_usable_hs_code, normalize_hs_code
from manifestpro.manifest.prompt import build_hs_batch_prompt, build_hs_lookup_prompt
from manifestpro.providers.base import CompletionOptions, ProviderId
from manifestpro.providers.router import ProviderRouter
from manifestpro.schemas.manifest import ManifestLineItem

logger = logging.getLogger("manifestpro.hs_codes")

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


class HSStrategy(str, enum.Enum):
    SEQUENTIAL = "sequential"
    BATCH = "batch"


@dataclass
class EnrichmentStats:
    hs_codes_added: int = 0
    validations_run: int = 0
    lookups_failed: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class HSCodeEnricher:
    """Backfills HS codes for descriptions through a ProviderRouter."""

    def __init__(
        self,
        router: ProviderRouter,
        primary: "ProviderId | str" = ProviderId.GROQ,
        strategy: "HSStrategy | str" = HSStrategy.SEQUENTIAL,
        delay_seconds: float = 0.0,
        description_max_chars: int = 80,
        batch_description_max_chars: int = 100,
        batch_size: int = 25,
        timeout: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.router = router
        self.primary = primary
        self.strategy = HSStrategy(strategy)
        self.delay_seconds = delay_seconds
        self.description_max_chars = description_max_chars
        self.batch_description_max_chars = batch_description_max_chars
        self.batch_size = max(1, batch_size)
        self.timeout = timeout
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        router: ProviderRouter,
        settings: Settings,
        primary: "ProviderId | str | None" = None,
        strategy: "HSStrategy | str | None" = None,
    ) -> "HSCodeEnricher":
        return cls(
            router,
            primary=primary or settings.hs_primary_provider,
            strategy=strategy or settings.hs_strategy,
            delay_seconds=settings.hs_request_delay_seconds,
            description_max_chars=settings.hs_description_max_chars,
            batch_description_max_chars=settings.hs_batch_description_max_chars,
            batch_size=settings.hs_batch_size,
            timeout=settings.hs_lookup_timeout_seconds,
        )

    async def lookup(self, description: str) -> str:
        """Ask for one code. Returns "" for an unusable answer.

        Raises:
            ManifestError: when no provider could answer.
        """
        if not description or not description.strip():
            return ""
        prompt = build_hs_lookup_prompt(description, self.description_max_chars)
        reply = await self.router.call_ai(
            self.primary,
            prompt,
            CompletionOptions(fast=True, temperature=0.0, max_tokens=50, timeout=self.timeout),
        )
        code = normalize_hs_code(reply.text)
        logger.debug("HS lookup %r -> %r (raw %r)", description[:40], code, reply.text[:40])
        return code

    async def resolve(
        self, entries: list[tuple[str, str]]
    ) -> tuple[list[str], EnrichmentStats]:
        """Resolve codes for ``(description, current_code)`` pairs.

        Returns one code per entry, in order, plus the counters for this pass.
        """
        stats = EnrichmentStats()
        codes = [code or "" for _, code in entries]
        pending: list[int] = []

        for index, (description, code) in enumerate(entries):
            if has_usable_hs_code(code):
                stats.validations_run += 1
            elif description and description.strip():
                pending.append(index)

        if not pending:
            return codes, stats

        logger.info(
            "Enriching %d of %d items with HS codes (%s)",
            len(pending),
            len(entries),
            self.strategy.value,
        )

        if self.strategy == HSStrategy.BATCH:
            for start in range(0, len(pending), self.batch_size):
                chunk = pending[start:start + self.batch_size]
                try:
                    found = await self._lookup_batch([entries[i][0] for i in chunk])
                except ManifestError as e:
                    logger.warning(
                        "Batch HS lookup failed (%s), falling back to sequential", e.message
                    )
                    await self._lookup_sequential(entries, chunk, codes, stats)
                    continue
                for position, index in enumerate(chunk):
                    self._record(codes, stats, index, found[position])
        else:
            await self._lookup_sequential(entries, pending, codes, stats)

        logger.info(
            "HS enrichment complete: %d added, %d already valid, %d failed",
            stats.hs_codes_added,
            stats.validations_run,
            stats.lookups_failed,
        )
        return codes, stats

    async def enrich_line_items(
        self, items: list[ManifestLineItem]
    ) -> tuple[list[ManifestLineItem], EnrichmentStats]:
        """Return the same items, in order, with missing HS codes filled in."""
        codes, stats = await self.resolve([(item.description, item.hs_code) for item in items])
        enriched = [
            item if item.hs_code == code else item.model_copy(update={"hs_code": code})
            for item, code in zip(items, codes)
        ]
        return enriched, stats

    def _record(self, codes: list[str], stats: EnrichmentStats, index: int, code: str) -> None:
        if code:
            codes[index] = code
            stats.hs_codes_added += 1
        else:
            stats.lookups_failed += 1

    async def _lookup_sequential(
        self,
        entries: list[tuple[str, str]],
        indexes: list[int],
        codes: list[str],
        stats: EnrichmentStats,
    ) -> None:
        for n, index in enumerate(indexes):
            if n > 0 and self.delay_seconds > 0:
                await self._sleep(self.delay_seconds)
            description = entries[index][0]
            try:
                code = await self.lookup(description)
            except ManifestError as e:
                logger.warning("HS lookup failed for item %d: %s", index + 1, e.message)
                code = ""
            self._record(codes, stats, index, code)

    async def _lookup_batch(self, descriptions: list[str]) -> list[str]:
        """One request for many descriptions; returns one code (or "") per description."""
        prompt = build_hs_batch_prompt(descriptions, self.batch_description_max_chars)
        reply = await self.router.call_ai(
            self.primary,
            prompt,
            CompletionOptions(temperature=0.1, max_tokens=len(descriptions) * 100 + 500),
        )
        by_index = parse_batch_reply(reply.text)
        return [by_index.get(position, "") for position in range(1, len(descriptions) + 1)]


def parse_batch_reply(raw: str) -> dict[int, str]:
    """Decode ``[{"index": n, "hs_code": "..."}]`` into ``{n: normalized_code}``."""
    match = _JSON_ARRAY.search(raw or "")
    if not match:
        raise ManifestError(ErrorKind.INVALID_JSON, "No JSON array in batch HS reply")
    try:
        decoded = json.loads(match.group())
    except json.JSONDecodeError as e:
        raise ManifestError(ErrorKind.INVALID_JSON, f"Batch HS reply is not valid JSON: {e}") from e
    if not isinstance(decoded, list):
        raise ManifestError(ErrorKind.UNEXPECTED_SHAPE, "Batch HS reply is not an array")

    result: dict[int, str] = {}
    for entry in decoded:
        if not isinstance(entry, dict) or "index" not in entry:
            raise ManifestError(
                ErrorKind.UNEXPECTED_SHAPE, "Batch HS reply entries need an index"
            )
        try:
            position = int(entry["index"])
        except (TypeError, ValueError) as e:
            raise ManifestError(
                ErrorKind.UNEXPECTED_SHAPE, f"Invalid index in batch HS reply: {entry['index']!r}"
            ) from e
        result[position] = normalize_hs_code(entry.get("hs_code"))
    return result
