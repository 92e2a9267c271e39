from unittest.mock import AsyncMock, MagicMock

import pytest

from medspa_onboarding.exceptions.custom import (
    ConfigurationError,
    EmptyInputError,
    NotFoundError,
    ParseError,
)
from medspa_onboarding.mappers.crawl_normalizer import PAGE_SEPARATOR
from medspa_onboarding.mappers.extraction_prompt import MAX_INPUT_CHARS
from medspa_onboarding.schemas.storage import OwnerKey, RawCrawlRecord
from medspa_onboarding.services.business_extractor import (
    BusinessExtractorService,
    build_input_text,
)
from medspa_onboarding.services.gemini import GeminiService
from medspa_onboarding.services.raw_crawl_store import TABLE, RawCrawlStore

GLOW_CONFIG = {
    "id": "something-else",
    "name": "Glow Medspa",
    "services": [{"name": "Botox", "price": {"startingAt": 12, "perUnit": "unit"}}],
}


def _gemini(reply: dict | None = None) -> MagicMock:
    gemini = MagicMock(spec=GeminiService)
    gemini.generate_json = AsyncMock(return_value=reply or {})
    return gemini


def _extractor(fake_supabase, gemini) -> BusinessExtractorService:
    return BusinessExtractorService(RawCrawlStore(fake_supabase), gemini, fake_supabase)


def _seed_raw(fake_supabase, **values):
    row = {"id": 1, "lead_id": None, "business_id": None, "raw_html": None, "raw_text": None,
           "pages": [], "metadata": {}}
    row.update(values)
    fake_supabase.tables.setdefault(TABLE, []).append(row)


def test_build_input_text_appends_pages():
    record = RawCrawlRecord(
        raw_text="Home",
        pages=[{"markdown": "About"}, {"rawText": "Pricing"}, {"url": "https://x.com"}],
    )

    assert build_input_text(record) == PAGE_SEPARATOR.join(["Home", "About", "Pricing"])


def test_build_input_text_falls_back_to_html():
    record = RawCrawlRecord(
        raw_html="<html><script>var x = 1;</script><h1>Glow</h1><p>Botox</p></html>"
    )

    text = build_input_text(record)

    assert "Glow" in text
    assert "Botox" in text
    assert "var x" not in text


@pytest.mark.asyncio
async def test_extracts_and_stores_lead_config(fake_supabase):
    _seed_raw(fake_supabase, lead_id="L1", raw_text="Glow Medspa. Botox $12/unit.")
    fake_supabase.tables["leads"] = [{"id": "L1", "name": "Glow"}]
    gemini = _gemini(GLOW_CONFIG)

    config = await _extractor(fake_supabase, gemini).extract(OwnerKey.from_ids(lead_id="L1"))

    assert config.id == "L1"
    assert config.name == "Glow Medspa"
    assert config.services[0].name == "Botox"
    assert config.services[0].price.startingAt == 12
    assert config.locations[0].address == "Address not found"
    assert config.aiBehavior.tone == "friendly, professional"

    prompt = gemini.generate_json.await_args.args[0]
    assert "Botox $12/unit" in prompt
    assert '"id": "L1"' in prompt

    stored = fake_supabase.tables["leads"][0]["scraped_data"]
    assert stored["id"] == "L1"
    assert stored["services"][0]["name"] == "Botox"


@pytest.mark.asyncio
async def test_extracts_and_stores_business_config(fake_supabase):
    _seed_raw(fake_supabase, business_id="B1", raw_text="Glow Medspa")
    fake_supabase.tables["businesses"] = [{"id": "B1"}]

    config = await _extractor(fake_supabase, _gemini(GLOW_CONFIG)).extract(
        OwnerKey.from_ids(business_id="B1"), domain="glow.com"
    )

    assert config.id == "B1"
    assert fake_supabase.tables["businesses"][0]["config_json"]["name"] == "Glow Medspa"


@pytest.mark.asyncio
async def test_html_only_record(fake_supabase):
    _seed_raw(fake_supabase, lead_id="L1", raw_html="<h1>Glow</h1><p>Hydrafacial</p>")
    gemini = _gemini(GLOW_CONFIG)

    await _extractor(fake_supabase, gemini).extract(OwnerKey.from_ids(lead_id="L1"))

    assert "Hydrafacial" in gemini.generate_json.await_args.args[0]


@pytest.mark.asyncio
async def test_empty_model_reply_gets_placeholders(fake_supabase):
    _seed_raw(fake_supabase, lead_id="L1", raw_text="Glow")

    config = await _extractor(fake_supabase, _gemini({})).extract(OwnerKey.from_ids(lead_id="L1"))

    assert config.services[0].name == "Consultation"
    assert config.locations[0].name == "Main Office"
    assert config.booking.type == "mock"


@pytest.mark.asyncio
async def test_long_input_is_truncated(fake_supabase):
    _seed_raw(fake_supabase, lead_id="L1", raw_text="x" * (MAX_INPUT_CHARS + 5000))
    gemini = _gemini(GLOW_CONFIG)

    await _extractor(fake_supabase, gemini).extract(OwnerKey.from_ids(lead_id="L1"))

    prompt = gemini.generate_json.await_args.args[0]
    assert "x" * MAX_INPUT_CHARS in prompt
    assert "x" * (MAX_INPUT_CHARS + 1) not in prompt


@pytest.mark.asyncio
async def test_missing_record(fake_supabase):
    gemini = _gemini()

    with pytest.raises(NotFoundError, match="scrape-full-site"):
        await _extractor(fake_supabase, gemini).extract(OwnerKey.from_ids(lead_id="L1"))

    gemini.generate_json.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_record(fake_supabase):
    _seed_raw(fake_supabase, lead_id="L1", raw_text="")

    with pytest.raises(EmptyInputError):
        await _extractor(fake_supabase, _gemini()).extract(OwnerKey.from_ids(lead_id="L1"))


@pytest.mark.asyncio
async def test_whitespace_only_html(fake_supabase):
    _seed_raw(fake_supabase, lead_id="L1", raw_html="<script>track()</script>")

    with pytest.raises(EmptyInputError, match="No extractable text"):
        await _extractor(fake_supabase, _gemini()).extract(OwnerKey.from_ids(lead_id="L1"))


@pytest.mark.asyncio
async def test_missing_credentials_checked_first(fake_supabase):
    gemini = _gemini()
    gemini.ensure_credentials.side_effect = ConfigurationError("no credentials")

    with pytest.raises(ConfigurationError):
        await _extractor(fake_supabase, gemini).extract(OwnerKey.from_ids(lead_id="L1"))


@pytest.mark.asyncio
async def test_parse_error_stores_nothing(fake_supabase):
    _seed_raw(fake_supabase, lead_id="L1", raw_text="Glow")
    fake_supabase.tables["leads"] = [{"id": "L1"}]
    gemini = _gemini()
    gemini.generate_json.side_effect = ParseError("bad json", raw_text="oops")

    with pytest.raises(ParseError):
        await _extractor(fake_supabase, gemini).extract(OwnerKey.from_ids(lead_id="L1"))

    assert "scraped_data" not in fake_supabase.tables["leads"][0]
