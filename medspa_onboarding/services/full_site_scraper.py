import logging

from medspa_onboarding.schemas.crawl import CanonicalCrawlResult
from medspa_onboarding.schemas.storage import OwnerKey, RawCrawlRecord
from medspa_onboarding.services.firecrawl import FirecrawlService
from medspa_onboarding.services.raw_crawl_store import RawCrawlStore

logger = logging.getLogger(__name__)


class FullSiteScraperService:
    """Crawl a site once and keep the raw result for later extraction runs."""

    def __init__(self, firecrawl: FirecrawlService, store: RawCrawlStore):
        self._firecrawl = firecrawl
        self._store = store

    async def scrape(
        self, owner: OwnerKey, url: str
    ) -> tuple[RawCrawlRecord, CanonicalCrawlResult]:
        logger.info("Starting full-site scrape for %s: %s", owner, url)
        result = await self._firecrawl.start_and_await_crawl(url)
        record = await self._store.upsert(owner, result)
        logger.info(
            "Scrape complete for %s: record=%s pages=%d",
            owner, record.id, len(result.pages),
        )
        return record, result
