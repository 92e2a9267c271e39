import logging

from medspa_onboarding.exceptions.custom import InvalidArgumentError, NotFoundError
from medspa_onboarding.schemas.responses import OutreachLead
from medspa_onboarding.services.supabase import SupabaseService

logger = logging.getLogger(__name__)

LEADS_TABLE = "leads"
OUTREACH_COLUMNS = "id,instagram_handle,personalized_message"
OUTREACH_RESULTS = ("sent", "failed")


class LeadOutreachService:
    """Hands out pending Instagram outreach leads and records the result."""

    def __init__(self, supabase: SupabaseService):
        self._supabase = supabase

    async def next_lead(self) -> OutreachLead | None:
        row = await self._supabase.select_one(
            LEADS_TABLE,
            {"outreach_status": "pending"},
            columns=OUTREACH_COLUMNS,
            order="created_at.asc",
            not_null=("instagram_handle", "personalized_message"),
        )
        if row is None:
            logger.info("No pending outreach leads")
            return None
        return OutreachLead(
            id=str(row["id"]),
            instagram_handle=row["instagram_handle"],
            personalized_message=row["personalized_message"],
        )

    async def mark(self, lead_id: str | None, status: str = "sent") -> str:
        if not lead_id:
            raise InvalidArgumentError("Missing required field: id")
        if status not in OUTREACH_RESULTS:
            raise InvalidArgumentError('Status must be "sent" or "failed"')

        rows = await self._supabase.update(
            LEADS_TABLE, {"outreach_status": status}, {"id": lead_id}
        )
        if not rows:
            raise NotFoundError("Lead not found")
        logger.info("Lead %s outreach marked %s", lead_id, status)
        return str(rows[0]["id"])
