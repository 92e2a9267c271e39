import logging
from datetime import datetime, timezone

from bs4 import BeautifulSoup

from medspa_onboarding.exceptions.custom import EmptyInputError, NotFoundError
from medspa_onboarding.mappers.config_normalizer import (
    apply_required_defaults,
    normalize_business_config,
)
from medspa_onboarding.mappers.crawl_normalizer import PAGE_SEPARATOR, page_text
from medspa_onboarding.mappers.extraction_prompt import MAX_INPUT_CHARS, build_extraction_prompt
from medspa_onboarding.schemas.business_config import BusinessConfig
from medspa_onboarding.schemas.storage import OwnerKey, RawCrawlRecord
from medspa_onboarding.services.gemini import GeminiService
from medspa_onboarding.services.raw_crawl_store import RawCrawlStore
from medspa_onboarding.services.supabase import SupabaseService

logger = logging.getLogger(__name__)

LEADS_TABLE = "leads"
BUSINESSES_TABLE = "businesses"


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return soup.get_text(separator="\n", strip=True)


def build_input_text(record: RawCrawlRecord) -> str:
    """Top-level text (or text of the HTML) followed by every page's text."""
    text = record.raw_text or ""
    if not text and record.raw_html:
        text = html_to_text(record.raw_html)

    pages_text = PAGE_SEPARATOR.join(
        t for t in (page_text(p) for p in record.pages if isinstance(p, dict)) if t
    )
    if pages_text:
        text = f"{text}{PAGE_SEPARATOR}{pages_text}" if text else pages_text

    return text


class BusinessExtractorService:
    def __init__(
        self,
        store: RawCrawlStore,
        gemini: GeminiService,
        supabase: SupabaseService,
    ):
        self._store = store
        self._gemini = gemini
        self._supabase = supabase

    async def extract(self, owner: OwnerKey, domain: str | None = None) -> BusinessConfig:
        self._gemini.ensure_credentials()
        logger.info("Starting business config extraction for %s", owner)

        record = await self._store.get(owner)
        if record is None:
            raise NotFoundError(
                f"No raw crawl data found for {owner.kind}: {owner.value}. "
                "Run scrape-full-site first."
            )
        if not record.has_content:
            raise EmptyInputError(
                f"Raw crawl data is empty for {owner.kind}: {owner.value}. "
                "Run scrape-full-site again."
            )

        input_text = build_input_text(record)
        if not input_text.strip():
            raise EmptyInputError("No extractable text found in raw crawl data")

        if len(input_text) > MAX_INPUT_CHARS:
            logger.warning(
                "Input text too long (%d chars), truncating to %d",
                len(input_text), MAX_INPUT_CHARS,
            )
            input_text = input_text[:MAX_INPUT_CHARS]

        prompt = build_extraction_prompt(owner.value, input_text, domain)
        raw_config = await self._gemini.generate_json(prompt)

        config = normalize_business_config(apply_required_defaults(raw_config))
        config.id = owner.value

        await self._store_config(owner, config)
        logger.info(
            "Extracted config for %s: name=%r services=%d locations=%d",
            owner, config.name, len(config.services), len(config.locations),
        )
        return config

    async def _store_config(self, owner: OwnerKey, config: BusinessConfig) -> None:
        now = datetime.now(timezone.utc).isoformat()
        if owner.is_lead:
            await self._supabase.update(
                LEADS_TABLE,
                {"scraped_data": config.model_dump(), "updated_at": now},
                {"id": owner.value},
            )
        else:
            await self._supabase.update(
                BUSINESSES_TABLE,
                {"config_json": config.model_dump(), "updated_at": now},
                {"id": owner.value},
            )
