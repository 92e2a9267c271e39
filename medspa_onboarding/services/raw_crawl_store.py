import logging
from datetime import datetime, timezone

from medspa_onboarding.schemas.crawl import CanonicalCrawlResult
from medspa_onboarding.schemas.storage import OwnerKey, RawCrawlRecord
from medspa_onboarding.services.supabase import SupabaseService

logger = logging.getLogger(__name__)

TABLE = "firecrawl_raw"


def _to_record(row: dict) -> RawCrawlRecord:
    row = dict(row)
    row["pages"] = row.get("pages") or []
    row["metadata"] = row.get("metadata") or {}
    return RawCrawlRecord(**row)


class RawCrawlStore:
    """Keeps at most one raw crawl record per lead or business."""

    def __init__(self, supabase: SupabaseService):
        self._supabase = supabase

    async def upsert(self, owner: OwnerKey, result: CanonicalCrawlResult) -> RawCrawlRecord:
        logger.info(
            "Storing raw crawl data for %s (html=%d, text=%d, pages=%d)",
            owner, len(result.rawHtml), len(result.rawText), len(result.pages),
        )

        existing = await self._supabase.select_one(
            TABLE, {owner.column: owner.value}, columns="id"
        )

        values = {
            "lead_id": owner.value if owner.is_lead else None,
            "business_id": None if owner.is_lead else owner.value,
            "raw_html": result.rawHtml or None,
            "raw_text": result.rawText or None,
            "pages": [p.model_dump() for p in result.pages],
            "metadata": result.metadata,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

        if existing:
            logger.info("Updating existing raw crawl record %s", existing["id"])
            rows = await self._supabase.update(TABLE, values, {"id": existing["id"]})
            row = rows[0] if rows else {**values, "id": existing["id"]}
        else:
            logger.info("Creating new raw crawl record for %s", owner)
            row = await self._supabase.insert(TABLE, values)

        return _to_record(row)

    async def get(self, owner: OwnerKey) -> RawCrawlRecord | None:
        row = await self._supabase.select_one(TABLE, {owner.column: owner.value})
        return _to_record(row) if row else None

    async def exists(self, owner: OwnerKey) -> bool:
        record = await self.get(owner)
        return record is not None and record.has_content
