from fastapi import APIRouter

from medspa_onboarding.dependencies import SupabaseDep
from medspa_onboarding.schemas.responses import LeadSummary

router = APIRouter()

TABLE = "leads"
SUMMARY_COLUMNS = (
    "id,name,website,domain,phone,email,status,instagram_handle,"
    "personalized_message,outreach_status,created_at,updated_at"
)


@router.get("/leads", response_model=list[LeadSummary])
async def list_leads(supabase: SupabaseDep) -> list[LeadSummary]:
    rows = await supabase.select(TABLE, columns=SUMMARY_COLUMNS, order="created_at.desc")
    return [LeadSummary(**row) for row in rows]
