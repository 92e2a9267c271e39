from fastapi import APIRouter
from pydantic import BaseModel

from medspa_onboarding.dependencies import OutreachDep
from medspa_onboarding.schemas.responses import MarkSentResponse, NextLeadResponse

router = APIRouter(prefix="/instagram-outreach")


class MarkSentRequest(BaseModel):
    id: str | None = None
    status: str = "sent"


@router.get("/get-next-lead", response_model=NextLeadResponse)
async def get_next_lead(service: OutreachDep) -> NextLeadResponse:
    return NextLeadResponse(lead=await service.next_lead())


@router.post("/mark-sent", response_model=MarkSentResponse)
async def mark_sent(request: MarkSentRequest, service: OutreachDep) -> MarkSentResponse:
    lead_id = await service.mark(request.id, request.status)
    return MarkSentResponse(id=lead_id)
