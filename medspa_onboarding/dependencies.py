from typing import Annotated

from fastapi import Depends, Request

from medspa_onboarding.services.business_extractor import BusinessExtractorService
from medspa_onboarding.services.full_site_scraper import FullSiteScraperService
from medspa_onboarding.services.outreach import LeadOutreachService
from medspa_onboarding.services.scrape_queue import ScrapeQueueService
from medspa_onboarding.services.supabase import SupabaseService
from medspa_onboarding.services.website_pipeline import WebsitePipelineService


def get_scraper_service(request: Request) -> FullSiteScraperService:
    return request.app.state.scraper_service


def get_extractor_service(request: Request) -> BusinessExtractorService:
    return request.app.state.extractor_service


def get_website_pipeline_service(request: Request) -> WebsitePipelineService:
    return request.app.state.website_pipeline_service


def get_supabase_service(request: Request) -> SupabaseService:
    return request.app.state.supabase_service


def get_scrape_queue_service(request: Request) -> ScrapeQueueService:
    return request.app.state.scrape_queue_service


def get_outreach_service(request: Request) -> LeadOutreachService:
    return request.app.state.outreach_service


ScraperDep = Annotated[FullSiteScraperService, Depends(get_scraper_service)]
ExtractorDep = Annotated[BusinessExtractorService, Depends(get_extractor_service)]
WebsitePipelineDep = Annotated[
    WebsitePipelineService, Depends(get_website_pipeline_service)
]
SupabaseDep = Annotated[SupabaseService, Depends(get_supabase_service)]
ScrapeQueueDep = Annotated[ScrapeQueueService, Depends(get_scrape_queue_service)]
OutreachDep = Annotated[LeadOutreachService, Depends(get_outreach_service)]
