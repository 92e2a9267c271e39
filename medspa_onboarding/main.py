import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from medspa_onboarding.config import Settings
from medspa_onboarding.exceptions.custom import (
    ConfigurationError,
    CrawlTimeoutError,
    EmptyInputError,
    EmptyResultError,
    InvalidArgumentError,
    JobFailedError,
    NotFoundError,
    ParseError,
    RateLimitError,
    RemoteServiceError,
)
from medspa_onboarding.exceptions.handlers import (
    configuration_error_handler,
    crawl_timeout_error_handler,
    empty_input_error_handler,
    empty_result_error_handler,
    invalid_argument_error_handler,
    job_failed_error_handler,
    not_found_error_handler,
    parse_error_handler,
    rate_limit_error_handler,
    remote_service_error_handler,
)
from medspa_onboarding.routers.businesses import router as businesses_router
from medspa_onboarding.routers.leads import router as leads_router
from medspa_onboarding.routers.outreach import router as outreach_router
from medspa_onboarding.routers.scrape_queue import router as scrape_queue_router
from medspa_onboarding.routers.scraping import router as scraping_router
from medspa_onboarding.services.business_extractor import BusinessExtractorService
from medspa_onboarding.services.firecrawl import FirecrawlService
from medspa_onboarding.services.full_site_scraper import FullSiteScraperService
from medspa_onboarding.services.gemini import GeminiService
from medspa_onboarding.services.gemini_auth import GeminiAuth
from medspa_onboarding.services.outreach import LeadOutreachService
from medspa_onboarding.services.raw_crawl_store import RawCrawlStore
from medspa_onboarding.services.scrape_queue import ScrapeQueueService
from medspa_onboarding.services.supabase import SupabaseService
from medspa_onboarding.services.website_pipeline import WebsitePipelineService


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    async with httpx.AsyncClient(timeout=30.0) as client:
        supabase = SupabaseService(client, settings.supabase_url, settings.supabase_key)
        store = RawCrawlStore(supabase)

        firecrawl = FirecrawlService(
            client,
            settings.firecrawl_api_key,
            max_attempts=settings.crawl_max_attempts,
            poll_interval=settings.crawl_poll_interval,
        )
        scraper = FullSiteScraperService(firecrawl, store)

        gemini = GeminiService(
            client,
            GeminiAuth(settings.google_application_credentials),
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
        )

        app.state.supabase_service = supabase
        app.state.scraper_service = scraper
        app.state.extractor_service = BusinessExtractorService(store, gemini, supabase)
        app.state.website_pipeline_service = WebsitePipelineService(
            firecrawl, gemini, supabase
        )
        app.state.scrape_queue_service = ScrapeQueueService(supabase, scraper)
        app.state.outreach_service = LeadOutreachService(supabase)

        yield


app = FastAPI(title="Medspa Onboarding", lifespan=lifespan)

app.add_exception_handler(ConfigurationError, configuration_error_handler)
app.add_exception_handler(InvalidArgumentError, invalid_argument_error_handler)
app.add_exception_handler(NotFoundError, not_found_error_handler)
app.add_exception_handler(EmptyInputError, empty_input_error_handler)
app.add_exception_handler(RemoteServiceError, remote_service_error_handler)
app.add_exception_handler(RateLimitError, rate_limit_error_handler)
app.add_exception_handler(JobFailedError, job_failed_error_handler)
app.add_exception_handler(CrawlTimeoutError, crawl_timeout_error_handler)
app.add_exception_handler(EmptyResultError, empty_result_error_handler)
app.add_exception_handler(ParseError, parse_error_handler)

app.include_router(scraping_router)
app.include_router(businesses_router)
app.include_router(leads_router)
app.include_router(scrape_queue_router)
app.include_router(outreach_router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


def run() -> None:
    import uvicorn

    settings = Settings()
    uvicorn.run("medspa_onboarding.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
