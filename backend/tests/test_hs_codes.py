"""Tests for HS code normalization and enrichment."""

from unittest.mock import AsyncMock

import pytest

from manifestpro.errors import ErrorKind, ManifestError
from manifestpro.manifest.hs_codes import HSCodeEnricher, HSStrategy, parse_batch_reply
from manifestpro.manifest.hs_normalize import has_usable_hs_code, normalize_hs_code
from manifestpro.providers.base import ProviderId
from manifestpro.providers.router import ProviderReply
from manifestpro.schemas.manifest import ManifestLineItem

from conftest import make_router, make_settings


class TestNormalizeHsCode:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("8421290000", "8421290000"),
            ("8421.29.00", "84212900"),
            ("HS: 8421.29.00.00 (filters)", "8421290000"),
            ("8421", "8421000000"),
            ("84212", "8421200000"),
            ("842129", "842129"),
            ("842129000099", "8421290000"),
            ("123", ""),
            ("", ""),
            (None, ""),
            ("no idea", ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_hs_code(raw) == expected

    @pytest.mark.parametrize("raw", ["8421", "8421.29", "8421290000", "x", "12345678901"])
    def test_idempotent(self, raw):
        once = normalize_hs_code(raw)
        assert normalize_hs_code(once) == once
        assert once == "" or 6 <= len(once) <= 10

    def test_six_digit_code_kept_as_is(self):
        assert normalize_hs_code("8413.50") == "841350"
        assert has_usable_hs_code("841350")
        assert not has_usable_hs_code("84135")
        assert not has_usable_hs_code("")

    def test_line_item_uses_same_normalization(self):
        item = ManifestLineItem(description="Pump", hs_code="8413.50")
        assert item.hs_code == normalize_hs_code("8413.50")


class TestParseBatchReply:
    def test_extracts_array_from_prose(self):
        raw = 'Here you go:\n[{"index": 1, "hs_code": "8413.50"}, {"index": 2, "hs_code": "bad"}]'

        assert parse_batch_reply(raw) == {1: "841350", 2: ""}

    def test_no_array(self):
        with pytest.raises(ManifestError) as exc_info:
            parse_batch_reply("I cannot help with that")

        assert exc_info.value.kind == ErrorKind.INVALID_JSON

    def test_entry_without_index(self):
        with pytest.raises(ManifestError) as exc_info:
            parse_batch_reply('[{"hs_code": "8413500000"}]')

        assert exc_info.value.kind == ErrorKind.UNEXPECTED_SHAPE


def make_enricher(router, strategy=HSStrategy.SEQUENTIAL, **kwargs) -> HSCodeEnricher:
    return HSCodeEnricher(router, primary=ProviderId.GROQ, strategy=strategy, **kwargs)


class TestSequentialEnrichment:
    @pytest.mark.asyncio
    async def test_fills_only_missing_codes(self):
        router = make_router("8413500000")
        enricher = make_enricher(router)

        codes, stats = await enricher.resolve([("Pump", ""), ("Filter", "8421290000")])

        assert codes == ["8413500000", "8421290000"]
        assert stats.hs_codes_added == 1
        assert stats.validations_run == 1
        assert router.call_ai.await_count == 1

    @pytest.mark.asyncio
    async def test_short_code_is_looked_up(self):
        router = make_router("8413500000")
        codes, _ = await make_enricher(router).resolve([("Pump", "84")])

        assert codes == ["8413500000"]

    @pytest.mark.asyncio
    async def test_failed_lookup_leaves_code_empty(self):
        router = AsyncMock()
        router.call_ai = AsyncMock(
            side_effect=[
                ManifestError(ErrorKind.ALL_PROVIDERS_FAILED, "All AI providers failed"),
                ProviderReply(text="8421290000", provider=ProviderId.GROQ),
            ]
        )

        codes, stats = await make_enricher(router).resolve([("Pump", ""), ("Filter", "")])

        assert codes == ["", "8421290000"]
        assert stats.hs_codes_added == 1
        assert stats.lookups_failed == 1

    @pytest.mark.asyncio
    async def test_invalid_answer_counts_as_failure(self):
        router = make_router("I am not sure")
        codes, stats = await make_enricher(router).resolve([("Mystery", "")])

        assert codes == [""]
        assert stats.lookups_failed == 1

    @pytest.mark.asyncio
    async def test_blank_descriptions_skipped(self):
        router = make_router()
        codes, stats = await make_enricher(router).resolve([("  ", ""), ("", "12")])

        assert codes == ["", "12"]
        router.call_ai.assert_not_called()

    @pytest.mark.asyncio
    async def test_delay_between_lookups(self):
        router = make_router("8413500000", "8421290000", "8409991000")
        sleep = AsyncMock()
        enricher = make_enricher(router, delay_seconds=2.0, sleep=sleep)

        await enricher.resolve([("a", ""), ("b", ""), ("c", "")])

        assert sleep.await_count == 2
        sleep.assert_awaited_with(2.0)

    @pytest.mark.asyncio
    async def test_lookup_options(self):
        router = make_router("8413500000")
        await make_enricher(router, timeout=30.0).resolve([("Pump", "")])

        primary, prompt, options = router.call_ai.call_args.args
        assert primary == ProviderId.GROQ
        assert "Pump" in prompt
        assert options.fast is True
        assert options.temperature == 0.0
        assert options.max_tokens == 50
        assert options.timeout == 30.0


class TestBatchEnrichment:
    @pytest.mark.asyncio
    async def test_single_request_for_all_items(self):
        router = make_router(
            '[{"index": 1, "hs_code": "8413500000"}, {"index": 2, "hs_code": "8421290000"}]'
        )
        enricher = make_enricher(router, strategy=HSStrategy.BATCH)

        codes, stats = await enricher.resolve([("Pump", ""), ("Valid", "8409991000"), ("Filter", "")])

        assert codes == ["8413500000", "8409991000", "8421290000"]
        assert stats.hs_codes_added == 2
        assert stats.validations_run == 1
        assert router.call_ai.await_count == 1

    @pytest.mark.asyncio
    async def test_missing_positions_left_empty(self):
        router = make_router('[{"index": 2, "hs_code": "8421290000"}]')
        enricher = make_enricher(router, strategy=HSStrategy.BATCH)

        codes, stats = await enricher.resolve([("Pump", ""), ("Filter", "")])

        assert codes == ["", "8421290000"]
        assert stats.lookups_failed == 1

    @pytest.mark.asyncio
    async def test_undecodable_reply_falls_back_to_sequential(self):
        router = make_router("Sorry, no JSON today", "8413500000", "8421290000")
        enricher = make_enricher(router, strategy=HSStrategy.BATCH)

        codes, stats = await enricher.resolve([("Pump", ""), ("Filter", "")])

        assert codes == ["8413500000", "8421290000"]
        assert stats.hs_codes_added == 2
        assert router.call_ai.await_count == 3

    @pytest.mark.asyncio
    async def test_chunks_by_batch_size(self):
        router = make_router(
            '[{"index": 1, "hs_code": "8413500000"}, {"index": 2, "hs_code": "8413500000"}]',
            '[{"index": 1, "hs_code": "8421290000"}]',
        )
        enricher = make_enricher(router, strategy=HSStrategy.BATCH, batch_size=2)

        codes, _ = await enricher.resolve([("a", ""), ("b", ""), ("c", "")])

        assert codes == ["8413500000", "8413500000", "8421290000"]
        assert router.call_ai.await_count == 2


class TestEnrichLineItems:
    @pytest.mark.asyncio
    async def test_preserves_length_and_order(self):
        router = make_router("8413500000")
        items = [
            ManifestLineItem(item_no=1, description="Filter", hs_code="8421290000"),
            ManifestLineItem(item_no=2, description="Pump"),
        ]

        enriched, stats = await make_enricher(router).enrich_line_items(items)

        assert [i.item_no for i in enriched] == [1, 2]
        assert [i.hs_code for i in enriched] == ["8421290000", "8413500000"]
        assert enriched[0] is items[0]
        assert items[1].hs_code == ""
        assert stats.to_dict() == {"hs_codes_added": 1, "validations_run": 1, "lookups_failed": 0}

    def test_from_settings(self):
        settings = make_settings(hs_strategy="sequential", hs_batch_size=7)
        enricher = HSCodeEnricher.from_settings(make_router(), settings)

        assert enricher.strategy == HSStrategy.SEQUENTIAL
        assert enricher.batch_size == 7
        assert enricher.primary == "groq"
