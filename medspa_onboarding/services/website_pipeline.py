import logging
from datetime import datetime, timezone

from medspa_onboarding.exceptions.custom import EmptyInputError
from medspa_onboarding.mappers.config_normalizer import (
    apply_required_defaults,
    normalize_business_config,
)
from medspa_onboarding.mappers.contact_extractor import extract_contact_info
from medspa_onboarding.mappers.extraction_prompt import (
    MAX_INPUT_CHARS,
    build_extraction_prompt,
    build_preview_prompt,
)
from medspa_onboarding.mappers.preview_normalizer import normalize_preview_data
from medspa_onboarding.schemas.business_config import BusinessConfig
from medspa_onboarding.schemas.contact import ContactInfo
from medspa_onboarding.schemas.preview import PreviewData
from medspa_onboarding.services.business_extractor import html_to_text
from medspa_onboarding.services.firecrawl import FirecrawlService
from medspa_onboarding.services.gemini import GeminiService
from medspa_onboarding.services.supabase import SupabaseService

logger = logging.getLogger(__name__)

BUSINESSES_TABLE = "businesses"


def _with_scheme(url: str) -> str:
    return url if url.startswith(("http://", "https://")) else f"https://{url}"


class WebsitePipelineService:
    """Single-page onboarding: scrape the landing page, then build config,
    preview data and contact info and save them on the business row."""

    def __init__(
        self,
        firecrawl: FirecrawlService,
        gemini: GeminiService,
        supabase: SupabaseService,
    ):
        self._firecrawl = firecrawl
        self._gemini = gemini
        self._supabase = supabase

    async def run(
        self, business_id: str, url: str, domain: str | None = None
    ) -> tuple[BusinessConfig, PreviewData, ContactInfo]:
        self._gemini.ensure_credentials()
        logger.info("Starting website pipeline for business %s: %s", business_id, url)

        page = await self._firecrawl.scrape_page(_with_scheme(url))
        input_text = page.markdown or html_to_text(page.rawHtml)
        if not input_text.strip():
            raise EmptyInputError(f"No content scraped from {url}")
        raw_config = await self._gemini.generate_json(
            build_extraction_prompt(business_id, input_text[:MAX_INPUT_CHARS], domain)
        )
        config = normalize_business_config(apply_required_defaults(raw_config))
        config.id = business_id

        raw_preview = await self._gemini.generate_json(build_preview_prompt(page))
        preview = normalize_preview_data(raw_preview, config.name, page.images)

        contact = extract_contact_info(page)

        await self._supabase.upsert(
            BUSINESSES_TABLE,
            {
                "id": business_id,
                "name": config.name,
                "domain": domain or "",
                "config_json": config.model_dump(),
                "preview_data_json": preview.model_dump(),
                "contact_info_json": contact.model_dump(exclude_none=True),
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
            on_conflict="id",
        )
        logger.info(
            "Website pipeline complete for %s: name=%r services=%d emails=%d phones=%d",
            business_id,
            config.name,
            len(config.services),
            len(contact.emails or []),
            len(contact.phones or []),
        )
        return config, preview, contact
