import logging
import uuid
from datetime import datetime, timezone

from medspa_onboarding.exceptions.custom import InvalidArgumentError, NotFoundError
from medspa_onboarding.schemas.storage import OwnerKey, ScrapeQueueItem
from medspa_onboarding.services.full_site_scraper import FullSiteScraperService
from medspa_onboarding.services.supabase import SupabaseService

logger = logging.getLogger(__name__)

TABLE = "scrape_queue"
ACTIVE_STATUSES = ("pending", "processing")
STATUSES = ("pending", "processing", "completed", "failed")
_MAX_CLAIM_ATTEMPTS = 5


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ScrapeQueueService:
    """Lead scrape queue persisted in the ``scrape_queue`` table."""

    def __init__(self, supabase: SupabaseService, scraper: FullSiteScraperService):
        self._supabase = supabase
        self._scraper = scraper

    async def list_items(self) -> list[ScrapeQueueItem]:
        rows = await self._supabase.select(TABLE, order="created_at.asc")
        return [ScrapeQueueItem(**row) for row in rows]

    async def add(self, lead_id: str, url: str) -> ScrapeQueueItem:
        if not lead_id or not url:
            raise InvalidArgumentError("leadId and url are required")

        rows = await self._supabase.select(TABLE, {"lead_id": lead_id})
        if any(row.get("status") in ACTIVE_STATUSES for row in rows):
            raise InvalidArgumentError("Lead already in queue")

        item = ScrapeQueueItem(
            id=f"queue-{uuid.uuid4().hex[:12]}",
            lead_id=lead_id,
            url=url,
            status="pending",
            created_at=_now(),
        )
        row = await self._supabase.insert(TABLE, item.model_dump(exclude_none=True))
        logger.info("Queued scrape for lead %s (%s)", lead_id, item.id)
        return ScrapeQueueItem(**row)

    async def _claim_next(self) -> ScrapeQueueItem:
        for _ in range(_MAX_CLAIM_ATTEMPTS):
            row = await self._supabase.select_one(
                TABLE, {"status": "pending"}, order="created_at.asc"
            )
            if row is None:
                break
            # Conditional on status so a concurrent worker cannot claim the same item
            claimed = await self._supabase.update(
                TABLE,
                {"status": "processing", "started_at": _now()},
                {"id": row["id"], "status": "pending"},
            )
            if claimed:
                return ScrapeQueueItem(**claimed[0])
            logger.debug("Queue item %s was claimed by another worker", row["id"])
        raise NotFoundError("No pending items in queue")

    async def process_next(self) -> ScrapeQueueItem:
        """Claim the oldest pending item and run the full-site scrape for it.

        Scrape failures are recorded on the item (status "failed") rather
        than raised, so the caller always gets the final item back.
        """
        item = await self._claim_next()
        logger.info("Processing queue item %s for lead %s", item.id, item.lead_id)

        try:
            record, result = await self._scraper.scrape(
                OwnerKey.from_ids(lead_id=item.lead_id), item.url
            )
        except Exception as exc:
            logger.exception("Queue item %s failed", item.id)
            values = {"status": "failed", "completed_at": _now(), "error": str(exc)}
        else:
            values = {
                "status": "completed",
                "completed_at": _now(),
                "error": None,
                "result": {
                    "recordId": record.id,
                    "pagesCrawled": len(result.pages),
                    "rawTextLength": len(result.rawText),
                    "rawHtmlLength": len(result.rawHtml),
                },
            }

        rows = await self._supabase.update(TABLE, values, {"id": item.id})
        if rows:
            return ScrapeQueueItem(**rows[0])
        return item.model_copy(update=values)

    async def remove(self, item_id: str) -> None:
        row = await self._supabase.select_one(TABLE, {"id": item_id}, columns="id")
        if row is None:
            raise NotFoundError("Queue item not found")
        await self._supabase.delete(TABLE, {"id": item_id})
        logger.info("Removed queue item %s", item_id)
