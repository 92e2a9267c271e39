import asyncio
import logging
import time

import httpx

from medspa_onboarding.exceptions.custom import (
    ConfigurationError,
    CrawlTimeoutError,
    InvalidArgumentError,
    JobFailedError,
    RateLimitError,
    RemoteServiceError,
)
from medspa_onboarding.mappers.crawl_normalizer import normalize_crawl_result, normalize_page_scrape
from medspa_onboarding.schemas.crawl import (
    CanonicalCrawlResult,
    CrawlJob,
    CrawlProgress,
    PageScrape,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "Firecrawl"
CRAWL_URL = "https://api.firecrawl.dev/v1/crawl"
SCRAPE_URL = "https://api.firecrawl.dev/v1/scrape"
SCRAPE_FORMATS = ["markdown", "links", "rawHtml"]

MAX_ATTEMPTS = 120
POLL_INTERVAL = 1.0

# Medspa sites commonly disallow bots in robots.txt; without the override
# the job never leaves the "scraping" state.
CRAWL_OPTIONS = {
    "maxDepth": 1,
    "ignoreRobotsTxt": True,
    "includeSubdomains": False,
    "waitFor": 2000,
    "javascript": True,
}


def _page_count(value) -> int:
    # progress is informational only; malformed counters read as 0
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


class FirecrawlService:
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        max_attempts: int = MAX_ATTEMPTS,
        poll_interval: float = POLL_INTERVAL,
    ):
        self._client = client
        self._api_key = api_key
        self._max_attempts = max_attempts
        self._poll_interval = poll_interval

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def start_and_await_crawl(self, url: str) -> CanonicalCrawlResult:
        """Start a full-site crawl and poll until it completes, fails or times out."""
        if not url:
            raise ConfigurationError("url is required to start a crawl")
        if not self._api_key:
            raise ConfigurationError("FIRECRAWL_API_KEY not configured")

        job = await self.start_crawl(url)
        return await self.poll_crawl(job)

    async def scrape_page(self, url: str) -> PageScrape:
        """Scrape one page (markdown, links and raw HTML) synchronously."""
        if not url:
            raise InvalidArgumentError("url is required to scrape a page")
        if not self._api_key:
            raise ConfigurationError("FIRECRAWL_API_KEY not configured")

        logger.info("Scraping page: %s", url)
        resp = await self._client.post(
            SCRAPE_URL,
            json={"url": url, "formats": SCRAPE_FORMATS},
            headers=self._headers,
            timeout=120.0,
        )

        if resp.status_code == 429:
            raise RateLimitError(SERVICE_NAME, body=resp.text)
        if resp.status_code >= 400:
            raise RemoteServiceError(
                SERVICE_NAME,
                f"scrape failed: {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )

        page = normalize_page_scrape(url, resp.json())
        logger.info(
            "Scraped %s: %d markdown chars, %d links, %d images",
            url, len(page.markdown), len(page.links), len(page.images),
        )
        return page

    async def start_crawl(self, url: str) -> CrawlJob:
        logger.info("Starting full-site crawl: %s", url)
        resp = await self._client.post(
            CRAWL_URL, json={"url": url, **CRAWL_OPTIONS}, headers=self._headers
        )

        if resp.status_code == 429:
            raise RateLimitError(SERVICE_NAME, body=resp.text)
        if resp.status_code >= 400:
            raise RemoteServiceError(
                SERVICE_NAME,
                f"crawl start failed: {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )

        data = resp.json()
        job_id = data.get("id")
        poll_url = data.get("url")
        if not job_id or not poll_url:
            raise RemoteServiceError(
                SERVICE_NAME,
                "crawl start response did not include an id and polling url",
                status_code=resp.status_code,
                body=resp.text,
            )

        logger.info("Crawl job started: id=%s poll_url=%s", job_id, poll_url)
        return CrawlJob(jobId=job_id, pollUrl=poll_url)

    async def poll_crawl(self, job: CrawlJob) -> CanonicalCrawlResult:
        started = time.monotonic()

        for attempt in range(self._max_attempts):
            if attempt > 0:
                await asyncio.sleep(self._poll_interval)

            try:
                resp = await self._client.get(
                    job.pollUrl, headers={"Authorization": f"Bearer {self._api_key}"}
                )
            except httpx.TransportError as exc:
                if attempt == self._max_attempts - 1:
                    raise RemoteServiceError(
                        SERVICE_NAME, f"poll request failed: {exc}"
                    ) from exc
                logger.warning(
                    "Polling error for job %s (attempt %d/%d), retrying: %s",
                    job.jobId, attempt + 1, self._max_attempts, exc,
                )
                continue

            if resp.status_code == 429:
                raise RateLimitError(SERVICE_NAME, body=resp.text)
            if resp.status_code >= 400:
                raise RemoteServiceError(
                    SERVICE_NAME,
                    f"status check failed: {resp.status_code}",
                    status_code=resp.status_code,
                    body=resp.text,
                )

            data = resp.json()
            job.status = str(data.get("status") or "")
            elapsed = time.monotonic() - started

            if job.status == "completed":
                logger.info("Crawl job %s completed in %.0fs", job.jobId, elapsed)
                return normalize_crawl_result(data)
            if job.status == "failed":
                raise JobFailedError(data.get("error") or "Unknown error", job_id=job.jobId)

            progress = data.get("progress")
            if isinstance(progress, dict):
                pages = _page_count(progress.get("pagesScraped"))
                job.progress = CrawlProgress(pagesScraped=pages)

            if attempt < 5 or attempt % 5 == 0:
                logger.info(
                    "Crawl job %s status=%s pages=%s | attempt %d/%d | elapsed %.0fs",
                    job.jobId,
                    job.status,
                    job.progress.pagesScraped if job.progress else "?",
                    attempt + 1,
                    self._max_attempts,
                    elapsed,
                )

        elapsed = time.monotonic() - started
        raise CrawlTimeoutError(self._max_attempts, elapsed)
