"""Coerce model-generated preview landing page data into ``PreviewData``.

Missing colors, hero, navigation and sections get medspa defaults, and the
images found on the page are merged into whatever the model returned.
"""

from typing import Any

from medspa_onboarding.schemas.preview import PreviewData

DEFAULT_COLORS = {
    "primary": "#f43f5e",
    "secondary": "#8b5cf6",
    "background": "#ffffff",
    "text": "#1e293b",
}

DEFAULT_NAVIGATION = [
    {"label": "Home", "href": "#"},
    {"label": "Services", "href": "#services"},
    {"label": "About", "href": "#about"},
    {"label": "Contact", "href": "#contact"},
]

DEFAULT_SECTIONS = [
    {"type": "features", "title": "Why Choose Us", "content": "Experience world-class treatments"},
]


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _opt_str(value: Any) -> str | None:
    if isinstance(value, str):
        return value or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str) and v]


def _pick(source: dict, keys: tuple[str, ...]) -> dict[str, str | None]:
    return {key: _opt_str(source.get(key)) for key in keys}


def _default_hero(business_name: str) -> dict:
    return {
        "title": f"Welcome to {business_name}" if business_name else "Welcome",
        "subtitle": "Experience our premium services",
        "ctaText": "Book Appointment",
    }


def normalize_preview_data(
    raw: Any, business_name: str = "", scraped_images: list[str] | None = None
) -> PreviewData:
    raw = _dict(raw)

    colors = _pick(_dict(raw.get("colors")), ("primary", "secondary", "accent", "background", "text"))
    if not any(colors.values()):
        colors = dict(DEFAULT_COLORS)

    hero = _pick(_dict(raw.get("hero")), ("title", "subtitle", "image", "ctaText"))
    if not any(hero.values()):
        hero = _default_hero(business_name)

    navigation = [
        {"label": _opt_str(item.get("label")) or "", "href": _opt_str(item.get("href")) or "#"}
        for item in (raw.get("navigation") if isinstance(raw.get("navigation"), list) else [])
        if isinstance(item, dict) and _opt_str(item.get("label"))
    ] or [dict(item) for item in DEFAULT_NAVIGATION]

    sections = [
        {
            "type": _opt_str(item.get("type")) or "features",
            "title": _opt_str(item.get("title")),
            "content": _opt_str(item.get("content")),
            "images": _str_list(item.get("images")) or None,
        }
        for item in (raw.get("sections") if isinstance(raw.get("sections"), list) else [])
        if isinstance(item, dict)
    ] or [dict(item) for item in DEFAULT_SECTIONS]

    images = list(dict.fromkeys(_str_list(raw.get("images")) + list(scraped_images or [])))

    fonts = _pick(_dict(raw.get("fonts")), ("heading", "body"))
    brand_style = _pick(_dict(raw.get("brandStyle")), ("tone", "aesthetic"))

    return PreviewData(
        logo=_opt_str(raw.get("logo")),
        colors=colors,
        hero=hero,
        navigation=navigation,
        sections=sections,
        images=images,
        fonts=fonts if any(fonts.values()) else None,
        brandStyle=brand_style if any(brand_style.values()) else None,
    )
