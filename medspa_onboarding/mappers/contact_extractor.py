"""Pull contact details out of a scraped landing page with regexes.

Text patterns run over the page markdown; ``mailto:`` and ``tel:`` links
are read from the raw HTML; social, booking, contact and maps links come
from the page's link list. Empty categories are returned as None.
"""

import re

from medspa_onboarding.schemas.contact import ContactInfo, SocialLinks
from medspa_onboarding.schemas.crawl import PageScrape

EMAIL_RE = re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE)
MAILTO_RE = re.compile(r"mailto:([^\"'\s<>]+)", re.IGNORECASE)
PHONE_RE = re.compile(r"(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
TEL_RE = re.compile(r"tel:([^\"'\s<>]+)", re.IGNORECASE)
ADDRESS_RE = re.compile(
    r"\d{2,5}\s+[A-Za-z0-9\s.,#-]+"
    r"(?:Street|St|Avenue|Ave|Blvd|Boulevard|Road|Rd|Drive|Dr|Lane|Ln|Way|Suite|Ste|Unit|Apt|#)\b"
    r"[^.!?]*",
    re.IGNORECASE,
)
HOURS_RE = re.compile(
    r"\b\d{1,2}(?::\d{2})?\s?(?:am|pm)\s?[-–—]\s?\d{1,2}(?::\d{2})?\s?(?:am|pm)\b",
    re.IGNORECASE,
)

SOCIAL_HOSTS = (
    ("instagram", ("instagram.com",)),
    ("facebook", ("facebook.com",)),
    ("tiktok", ("tiktok.com",)),
    ("youtube", ("youtube.com",)),
    ("twitter", ("twitter.com", "x.com")),
)
BOOKING_KEYWORDS = ("book", "schedule", "appointment", "calendly", "acuity", "square", "reservations")


def _unique(values) -> list[str]:
    return list(dict.fromkeys(values))


def _link_target(match: str) -> str:
    # drop query strings such as ?subject=
    return match.split("?", 1)[0].strip()


def _social_network(url: str) -> str | None:
    lower = url.lower()
    for network, hosts in SOCIAL_HOSTS:
        if any(host in lower for host in hosts):
            return network
    return None


def _social_links(links: list[str]) -> SocialLinks | None:
    found: dict[str, str] = {}
    for url in links:
        network = _social_network(url)
        if network:
            found.setdefault(network, url)
    return SocialLinks(**found) if found else None


def extract_contact_info(page: PageScrape) -> ContactInfo:
    text = page.markdown
    html = page.rawHtml

    emails = EMAIL_RE.findall(text) + [_link_target(m) for m in MAILTO_RE.findall(html)]
    phones = PHONE_RE.findall(text) + [_link_target(m) for m in TEL_RE.findall(html)]
    addresses = [a.strip() for a in ADDRESS_RE.findall(text)]
    hours = HOURS_RE.findall(text)

    # facebook.com would otherwise match "book"
    booking_links = _unique(
        url for url in page.links
        if _social_network(url) is None and any(k in url.lower() for k in BOOKING_KEYWORDS)
    )
    contact_page = next((url for url in page.links if "contact" in url.lower()), None)
    maps_links = [
        url for url in page.links if "google.com/maps" in url or "maps.google.com" in url
    ]

    return ContactInfo(
        emails=_unique(e.lower() for e in emails if e) or None,
        phones=_unique(p for p in phones if p) or None,
        addresses=_unique(addresses) or None,
        social=_social_links(page.links),
        bookingLinks=booking_links or None,
        contactPage=contact_page,
        hours=_unique(hours) or None,
        mapsLink=maps_links[-1] if maps_links else None,
    )
