from __future__ import annotations

from pydantic import BaseModel

from medspa_onboarding.schemas.business_config import BusinessConfig
from medspa_onboarding.schemas.contact import ContactInfo
from medspa_onboarding.schemas.preview import PreviewData
from medspa_onboarding.schemas.storage import RawCrawlRecord, ScrapeQueueItem


class ScrapeStats(BaseModel):
    pagesCrawled: int
    rawTextLength: int
    rawHtmlLength: int


class ScrapeFullSiteResponse(BaseModel):
    success: bool = True
    data: RawCrawlRecord
    stats: ScrapeStats


class ExtractBusinessConfigResponse(BaseModel):
    success: bool = True
    config: BusinessConfig


class ScrapeWebsiteResponse(BaseModel):
    success: bool = True
    config: BusinessConfig
    previewData: PreviewData
    contactInfo: ContactInfo


class BusinessSummary(BaseModel):
    id: str
    name: str | None = None
    domain: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class BusinessRecord(BusinessSummary):
    config_json: dict | None = None
    preview_data_json: dict | None = None
    contact_info_json: dict | None = None
    preview_screenshot_url: str | None = None


class BusinessPreviewResponse(BaseModel):
    businessId: str
    businessName: str | None = None
    domain: str | None = None
    screenshotUrl: str | None = None
    previewData: dict | None = None


class LeadSummary(BaseModel):
    id: str
    name: str | None = None
    website: str | None = None
    domain: str | None = None
    phone: str | None = None
    email: str | None = None
    status: str | None = None
    instagram_handle: str | None = None
    personalized_message: str | None = None
    outreach_status: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class OutreachLead(BaseModel):
    id: str
    instagram_handle: str
    personalized_message: str


class NextLeadResponse(BaseModel):
    lead: OutreachLead | None = None


class MarkSentResponse(BaseModel):
    success: bool = True
    id: str


class ScrapeQueueResponse(BaseModel):
    queue: list[ScrapeQueueItem]
    total: int
    pending: int
    processing: int
    completed: int
    failed: int


class ScrapeQueueItemResponse(BaseModel):
    success: bool
    item: ScrapeQueueItem
    error: str | None = None


class SuccessResponse(BaseModel):
    success: bool = True
