import pytest

from medspa_onboarding.schemas.crawl import CanonicalCrawlResult, CrawlPage
from medspa_onboarding.schemas.storage import OwnerKey
from medspa_onboarding.services.raw_crawl_store import TABLE, RawCrawlStore


def _result(text: str = "Glow Medspa", html: str = "<h1>Glow</h1>") -> CanonicalCrawlResult:
    return CanonicalCrawlResult(
        rawHtml=html,
        rawText=text,
        pages=[CrawlPage(url="https://glow.com", rawHtml=html, rawText=text)],
        metadata={"totalPages": 1},
    )


@pytest.mark.asyncio
async def test_upsert_creates_record(fake_supabase):
    store = RawCrawlStore(fake_supabase)
    owner = OwnerKey.from_ids(lead_id="L1")

    record = await store.upsert(owner, _result())

    assert record.lead_id == "L1"
    assert record.business_id is None
    assert record.raw_text == "Glow Medspa"
    assert record.pages[0]["url"] == "https://glow.com"
    assert record.updated_at is not None


@pytest.mark.asyncio
async def test_upsert_twice_keeps_one_record(fake_supabase):
    store = RawCrawlStore(fake_supabase)
    owner = OwnerKey.from_ids(lead_id="L1")

    first = await store.upsert(owner, _result("old"))
    second = await store.upsert(owner, _result("new"))

    assert len(fake_supabase.tables[TABLE]) == 1
    assert second.id == first.id
    assert (await store.get(owner)).raw_text == "new"


@pytest.mark.asyncio
async def test_lead_and_business_with_same_id_are_separate(fake_supabase):
    store = RawCrawlStore(fake_supabase)

    await store.upsert(OwnerKey.from_ids(lead_id="X1"), _result("lead text"))
    await store.upsert(OwnerKey.from_ids(business_id="X1"), _result("business text"))

    assert len(fake_supabase.tables[TABLE]) == 2
    assert (await store.get(OwnerKey.from_ids(business_id="X1"))).raw_text == "business text"
    assert (await store.get(OwnerKey.from_ids(lead_id="X1"))).raw_text == "lead text"


@pytest.mark.asyncio
async def test_empty_strings_are_stored_as_null(fake_supabase):
    store = RawCrawlStore(fake_supabase)

    record = await store.upsert(OwnerKey.from_ids(lead_id="L1"), _result(text=""))

    assert record.raw_text is None
    assert record.raw_html == "<h1>Glow</h1>"


@pytest.mark.asyncio
async def test_get_missing_returns_none(fake_supabase):
    store = RawCrawlStore(fake_supabase)

    assert await store.get(OwnerKey.from_ids(lead_id="nope")) is None
    assert await store.exists(OwnerKey.from_ids(lead_id="nope")) is False


@pytest.mark.asyncio
async def test_exists_requires_content(fake_supabase):
    fake_supabase.tables[TABLE] = [
        {"id": 1, "lead_id": "L1", "raw_html": None, "raw_text": None, "pages": None, "metadata": None},
    ]
    store = RawCrawlStore(fake_supabase)

    record = await store.get(OwnerKey.from_ids(lead_id="L1"))

    assert record.pages == []
    assert record.metadata == {}
    assert await store.exists(OwnerKey.from_ids(lead_id="L1")) is False
