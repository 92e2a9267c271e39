import logging

from fastapi import APIRouter
from pydantic import BaseModel

from medspa_onboarding.dependencies import ExtractorDep, ScraperDep, WebsitePipelineDep
from medspa_onboarding.exceptions.custom import InvalidArgumentError
from medspa_onboarding.schemas.responses import (
    ExtractBusinessConfigResponse,
    ScrapeFullSiteResponse,
    ScrapeStats,
    ScrapeWebsiteResponse,
)
from medspa_onboarding.schemas.storage import OwnerKey

logger = logging.getLogger(__name__)

router = APIRouter()


class ScrapeFullSiteRequest(BaseModel):
    leadId: str | None = None
    businessId: str | None = None
    url: str | None = None


class ExtractBusinessConfigRequest(BaseModel):
    leadId: str | None = None
    businessId: str | None = None
    domain: str | None = None


class ScrapeWebsiteRequest(BaseModel):
    url: str | None = None
    businessId: str | None = None
    domain: str | None = None


@router.post("/scrape-full-site", response_model=ScrapeFullSiteResponse)
async def scrape_full_site(
    request: ScrapeFullSiteRequest, service: ScraperDep
) -> ScrapeFullSiteResponse:
    if not request.url:
        raise InvalidArgumentError("url is required")
    owner = OwnerKey.from_ids(request.leadId, request.businessId)

    record, result = await service.scrape(owner, request.url)
    return ScrapeFullSiteResponse(
        data=record,
        stats=ScrapeStats(
            pagesCrawled=len(result.pages),
            rawTextLength=len(result.rawText),
            rawHtmlLength=len(result.rawHtml),
        ),
    )


@router.post("/extract-business-config", response_model=ExtractBusinessConfigResponse)
async def extract_business_config(
    request: ExtractBusinessConfigRequest, service: ExtractorDep
) -> ExtractBusinessConfigResponse:
    owner = OwnerKey.from_ids(request.leadId, request.businessId)
    config = await service.extract(owner, domain=request.domain)
    return ExtractBusinessConfigResponse(config=config)


@router.post("/scrape-website", response_model=ScrapeWebsiteResponse)
async def scrape_website(
    request: ScrapeWebsiteRequest, service: WebsitePipelineDep
) -> ScrapeWebsiteResponse:
    if not request.url or not request.businessId:
        raise InvalidArgumentError("URL and businessId are required")

    config, preview, contact = await service.run(
        request.businessId, request.url, domain=request.domain
    )
    return ScrapeWebsiteResponse(config=config, previewData=preview, contactInfo=contact)
