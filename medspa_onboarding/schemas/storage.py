from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from medspa_onboarding.exceptions.custom import InvalidArgumentError


class OwnerKey(BaseModel):
    """Identifies the lead or business that owns a crawl/config record."""

    model_config = {"frozen": True}

    column: Literal["lead_id", "business_id"]
    value: str

    @classmethod
    def from_ids(
        cls, lead_id: str | None = None, business_id: str | None = None
    ) -> OwnerKey:
        if lead_id and business_id:
            raise InvalidArgumentError("Pass either leadId or businessId, not both")
        if lead_id:
            return cls(column="lead_id", value=lead_id)
        if business_id:
            return cls(column="business_id", value=business_id)
        raise InvalidArgumentError("Either leadId or businessId is required")

    @property
    def kind(self) -> str:
        return "lead" if self.column == "lead_id" else "business"

    @property
    def is_lead(self) -> bool:
        return self.column == "lead_id"

    def __str__(self) -> str:
        return f"{self.kind}:{self.value}"


class RawCrawlRecord(BaseModel):
    id: str | int | None = None
    lead_id: str | None = None
    business_id: str | None = None
    raw_html: str | None = None
    raw_text: str | None = None
    pages: list[dict] = []
    metadata: dict = {}
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def has_content(self) -> bool:
        return bool(self.raw_html or self.raw_text)


class ScrapeQueueItem(BaseModel):
    id: str
    lead_id: str
    url: str
    status: str = "pending"  # pending | processing | completed | failed
    created_at: str | None = None
    started_at: str | None = None
    completed_at: str | None = None
    error: str | None = None
    result: dict | None = None
