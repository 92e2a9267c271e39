"""Reshape Firecrawl crawl responses into a single CanonicalCrawlResult.

The crawl service returns different payload shapes depending on the API
version and crawl mode. Each shape is handled by one candidate extractor;
extractors are tried in priority order and the first one that yields any
content wins.
"""

import logging
from collections.abc import Callable
from typing import Any

from medspa_onboarding.exceptions.custom import EmptyResultError
from medspa_onboarding.schemas.crawl import CanonicalCrawlResult, CrawlPage, PageScrape

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n---\n\n"

HTML_ALIASES = ("html", "rawHtml", "raw_html", "sourceHTML")
TEXT_ALIASES = ("markdown", "rawText", "raw_text", "text", "content")
URL_ALIASES = ("url", "sourceURL")

Extractor = Callable[[dict, Any], CanonicalCrawlResult | None]


def _first_str(obj: dict, aliases: tuple[str, ...]) -> str:
    """Return the first non-empty string value among aliases."""
    for key in aliases:
        value = obj.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def page_text(page: dict) -> str:
    return _first_str(page, TEXT_ALIASES)


def _to_page(raw: Any) -> CrawlPage:
    page = _as_dict(raw)
    metadata = _as_dict(page.get("metadata")) or _as_dict(page.get("meta"))
    url = _first_str(page, URL_ALIASES) or _first_str(metadata, URL_ALIASES)
    return CrawlPage(
        url=url,
        rawHtml=_first_str(page, HTML_ALIASES),
        rawText=page_text(page),
        metadata=metadata,
    )


def _combine(pages: list[CrawlPage], result: dict, data: Any) -> CanonicalCrawlResult:
    main_html = pages[0].rawHtml if pages else ""
    main_text = pages[0].rawText if pages else ""
    combined = PAGE_SEPARATOR.join(p.rawText for p in pages if p.rawText)

    passthrough = _as_dict(result.get("metadata")) or _as_dict(_as_dict(data).get("metadata"))
    metadata = {
        **passthrough,
        "totalPages": len(pages),
        "urls": [p.url for p in pages],
        "crawlStats": _as_dict(result.get("stats")),
    }

    return CanonicalCrawlResult(
        rawHtml=main_html,
        rawText=combined or main_text,
        pages=pages,
        metadata=metadata,
    )


def _from_pages_array(result: dict, data: Any) -> CanonicalCrawlResult | None:
    pages = _as_dict(data).get("pages")
    if not isinstance(pages, list):
        return None
    logger.debug("Crawl response has data.pages (%d entries)", len(pages))
    return _combine([_to_page(p) for p in pages], result, data)


def _from_top_level_fields(result: dict, data: Any) -> CanonicalCrawlResult | None:
    data = _as_dict(data)
    html = data.get("rawHtml") if isinstance(data.get("rawHtml"), str) else ""
    text = data.get("rawText") if isinstance(data.get("rawText"), str) else ""
    if not (html or text):
        return None
    page = CrawlPage(
        url=_first_str(data, URL_ALIASES),
        rawHtml=html,
        rawText=text,
        metadata=_as_dict(data.get("metadata")),
    )
    return _combine([page], result, data)


def _from_page_list(result: dict, data: Any) -> CanonicalCrawlResult | None:
    if not isinstance(data, list):
        return None
    logger.debug("Crawl response is a page list (%d entries)", len(data))
    return _combine([_to_page(p) for p in data], result, data)


def _from_flat_object(result: dict, data: Any) -> CanonicalCrawlResult | None:
    data = _as_dict(data)
    page = _to_page(data)
    if not (page.rawHtml or page.rawText):
        return None
    return _combine([page], result, data)


EXTRACTORS: tuple[tuple[str, Extractor], ...] = (
    ("pages_array", _from_pages_array),
    ("top_level_fields", _from_top_level_fields),
    ("page_list", _from_page_list),
    ("flat_object", _from_flat_object),
)


def normalize_crawl_result(raw: Any) -> CanonicalCrawlResult:
    """Normalize a completed crawl response.

    Raises EmptyResultError when no recognized shape carries HTML or text.
    """
    if isinstance(raw, list):
        result: dict = {}
        data: Any = raw
    else:
        result = _as_dict(raw)
        data = result.get("data", result)

    for name, extractor in EXTRACTORS:
        normalized = extractor(result, data)
        if normalized is None:
            continue
        if not normalized.pages or not normalized.has_content:
            logger.debug("Crawl shape %s matched but carried no content", name)
            continue
        logger.info(
            "Normalized crawl result via %s: %d pages, %d text chars",
            name, len(normalized.pages), len(normalized.rawText),
        )
        return normalized

    logger.error("No HTML or text content found in crawl response: %s", str(raw)[:500])
    raise EmptyResultError("Crawl completed but no HTML or text content was found in the response")


def _link_url(link: Any) -> str:
    if isinstance(link, str):
        return link
    link = _as_dict(link)
    return _first_str(link, ("url", "href"))


def normalize_page_scrape(url: str, raw: Any) -> PageScrape:
    """Flatten a single-page scrape response; links may be strings or objects."""
    result = _as_dict(raw)
    data = _as_dict(result.get("data")) or result
    metadata = _as_dict(data.get("metadata"))

    raw_links = data.get("links")
    raw_links = raw_links if isinstance(raw_links, list) else []
    links = [u for u in (_link_url(link) for link in raw_links) if u]

    images: list[str] = []
    for source in (data.get("images"), metadata.get("images")):
        if isinstance(source, list):
            images.extend(i for i in source if isinstance(i, str) and i)

    return PageScrape(
        url=url,
        markdown=_first_str(data, ("markdown", "content")),
        rawHtml=_first_str(data, ("rawHtml", "html")),
        links=links,
        images=list(dict.fromkeys(images)),
        metadata=metadata,
    )
