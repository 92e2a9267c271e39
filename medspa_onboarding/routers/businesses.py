import logging

from fastapi import APIRouter
from pydantic import BaseModel

from medspa_onboarding.dependencies import SupabaseDep
from medspa_onboarding.exceptions.custom import InvalidArgumentError, NotFoundError
from medspa_onboarding.mappers.config_normalizer import normalize_business_config
from medspa_onboarding.schemas.business_config import BusinessConfig
from medspa_onboarding.schemas.responses import (
    BusinessPreviewResponse,
    BusinessRecord,
    BusinessSummary,
    SuccessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

TABLE = "businesses"
SUMMARY_COLUMNS = "id,name,domain,created_at,updated_at"
DETAIL_COLUMNS = (
    "id,name,domain,config_json,preview_data_json,contact_info_json,"
    "preview_screenshot_url,created_at,updated_at"
)


class BusinessPayload(BaseModel):
    id: str | None = None
    name: str | None = None
    domain: str | None = None
    config_json: dict | None = None
    preview_data_json: dict | None = None
    contact_info_json: dict | None = None


def _row_values(payload: BusinessPayload) -> dict:
    """Columns the caller actually sent; configs are normalized before storage."""
    values = payload.model_dump(exclude_unset=True, exclude={"id"})
    if values.get("config_json") is not None:
        values["config_json"] = normalize_business_config(values["config_json"]).model_dump()
    return values


@router.get("/businesses", response_model=list[BusinessSummary])
async def list_businesses(supabase: SupabaseDep) -> list[BusinessSummary]:
    rows = await supabase.select(TABLE, columns=SUMMARY_COLUMNS, order="created_at.desc")
    return [BusinessSummary(**row) for row in rows]


@router.post("/businesses", response_model=BusinessRecord)
async def save_business(payload: BusinessPayload, supabase: SupabaseDep) -> BusinessRecord:
    if not payload.id:
        raise InvalidArgumentError("Business id is required")
    if not payload.name:
        raise InvalidArgumentError("Business name is required")

    row = await supabase.upsert(TABLE, {"id": payload.id, **_row_values(payload)}, on_conflict="id")
    logger.info("Saved business %s", payload.id)
    return BusinessRecord(**row)


@router.get("/businesses/{business_id}", response_model=BusinessRecord)
async def get_business(business_id: str, supabase: SupabaseDep) -> BusinessRecord:
    row = await supabase.select_one(TABLE, {"id": business_id}, columns=DETAIL_COLUMNS)
    if row is None:
        raise NotFoundError("Business not found")
    return BusinessRecord(**row)


@router.put("/businesses/{business_id}", response_model=BusinessRecord)
async def update_business(
    business_id: str, payload: BusinessPayload, supabase: SupabaseDep
) -> BusinessRecord:
    rows = await supabase.update(TABLE, _row_values(payload), {"id": business_id})
    if not rows:
        raise NotFoundError("Business not found")
    logger.info("Updated business %s", business_id)
    return BusinessRecord(**rows[0])


@router.delete("/businesses/{business_id}", response_model=SuccessResponse)
async def delete_business(business_id: str, supabase: SupabaseDep) -> SuccessResponse:
    await supabase.delete(TABLE, {"id": business_id})
    logger.info("Deleted business %s", business_id)
    return SuccessResponse()


@router.get("/business/{business_id}/config", response_model=BusinessConfig)
async def get_business_config(business_id: str, supabase: SupabaseDep) -> BusinessConfig:
    row = await supabase.select_one(TABLE, {"id": business_id}, columns="id,config_json")
    if row is None:
        raise NotFoundError("Business not found")
    config = normalize_business_config(row.get("config_json") or {})
    if not config.id:
        config.id = business_id
    return config


@router.get("/business/{business_id}/preview", response_model=BusinessPreviewResponse)
async def get_business_preview(business_id: str, supabase: SupabaseDep) -> BusinessPreviewResponse:
    row = await supabase.select_one(
        TABLE,
        {"id": business_id},
        columns="id,name,domain,preview_screenshot_url,preview_data_json",
    )
    if row is None:
        raise NotFoundError("Business not found")
    return BusinessPreviewResponse(
        businessId=row["id"],
        businessName=row.get("name"),
        domain=row.get("domain"),
        screenshotUrl=row.get("preview_screenshot_url"),
        previewData=row.get("preview_data_json"),
    )
