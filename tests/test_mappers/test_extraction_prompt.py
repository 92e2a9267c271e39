from medspa_onboarding.mappers.extraction_prompt import (
    PREVIEW_INPUT_CHARS,
    build_extraction_prompt,
    build_preview_prompt,
)
from medspa_onboarding.schemas.crawl import PageScrape


def test_prompt_embeds_owner_id_and_content():
    prompt = build_extraction_prompt("lead-42", "Botox from $12/unit")

    assert '"id": "lead-42"' in prompt
    assert prompt.endswith("Scraped website content:\nBotox from $12/unit")
    assert "Business domain:" not in prompt


def test_prompt_includes_domain_hint():
    prompt = build_extraction_prompt("biz-1", "content", domain="glowmedspa.com")

    assert "Business domain: glowmedspa.com\nScraped website content:" in prompt


def test_preview_prompt_lists_images_links_and_metadata():
    page = PageScrape(
        url="https://glow.com",
        markdown="# Glow Medspa",
        links=[f"https://glow.com/p{i}" for i in range(25)],
        images=["https://glow.com/hero.jpg"],
        metadata={"title": "Glow"},
    )

    prompt = build_preview_prompt(page)

    assert '"ctaText"' in prompt
    assert "Scraped website content:\n# Glow Medspa\n" in prompt
    assert "Available images: https://glow.com/hero.jpg" in prompt
    assert "https://glow.com/p19" in prompt
    assert "https://glow.com/p20" not in prompt
    assert prompt.endswith('Metadata: {"title": "Glow"}')


def test_preview_prompt_truncates_content_and_marks_missing_lists():
    page = PageScrape(markdown="x" * (PREVIEW_INPUT_CHARS + 500))

    prompt = build_preview_prompt(page)

    assert "x" * PREVIEW_INPUT_CHARS in prompt
    assert "x" * (PREVIEW_INPUT_CHARS + 1) not in prompt
    assert "Available images: none" in prompt
    assert "Available links: none" in prompt
