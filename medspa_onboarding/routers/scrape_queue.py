from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from medspa_onboarding.dependencies import ScrapeQueueDep
from medspa_onboarding.exceptions.custom import InvalidArgumentError
from medspa_onboarding.schemas.responses import (
    ScrapeQueueItemResponse,
    ScrapeQueueResponse,
    SuccessResponse,
)
from medspa_onboarding.services.scrape_queue import STATUSES

router = APIRouter()


class ScrapeQueueRequest(BaseModel):
    action: str
    leadId: str | None = None
    url: str | None = None


@router.get("/scrape-queue", response_model=ScrapeQueueResponse)
async def get_queue(service: ScrapeQueueDep) -> ScrapeQueueResponse:
    items = await service.list_items()
    counts = {status: sum(1 for i in items if i.status == status) for status in STATUSES}
    return ScrapeQueueResponse(queue=items, total=len(items), **counts)


@router.post("/scrape-queue", response_model=ScrapeQueueItemResponse)
async def queue_action(request: ScrapeQueueRequest, service: ScrapeQueueDep):
    if request.action == "add":
        item = await service.add(request.leadId or "", request.url or "")
        return ScrapeQueueItemResponse(success=True, item=item)

    if request.action == "process":
        item = await service.process_next()
        if item.status == "failed":
            body = ScrapeQueueItemResponse(success=False, item=item, error=item.error)
            return JSONResponse(status_code=500, content=body.model_dump())
        return ScrapeQueueItemResponse(success=True, item=item)

    raise InvalidArgumentError('Invalid action. Use "add" or "process"')


@router.delete("/scrape-queue/{item_id}", response_model=SuccessResponse)
async def remove_queue_item(item_id: str, service: ScrapeQueueDep) -> SuccessResponse:
    await service.remove(item_id)
    return SuccessResponse()
