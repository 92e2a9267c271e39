import json

from medspa_onboarding.schemas.business_config import DEFAULT_MEMORY_STORE
from medspa_onboarding.schemas.crawl import PageScrape

MAX_INPUT_CHARS = 100_000

_SCHEMA_EXAMPLE = {
    "id": "",
    "name": "Business Name",
    "tagline": "Optional tagline",
    "brandIdentity": {
        "tone": "Warm, friendly, professional",
        "voice": "Conversational and educational",
        "keywords": ["aesthetics", "injectables", "skin", "laser"],
        "personaName": "Serena",
        "personaBackstory": (
            "Serena is a knowledgeable and caring medspa concierge who helps "
            "clients understand treatments and feel comfortable booking."
        ),
    },
    "locations": [{
        "name": "Location Name",
        "address": "Full address",
        "phone": "Phone number",
        "email": "info@example.com",
        "parking": "Parking details if available",
    }],
    "hours": {"mon-fri": "9am–6pm", "sat": "10am–5pm", "sun": "closed"},
    "team": [{
        "name": "Provider Name",
        "role": "Provider or Staff Role",
        "title": "Professional Title",
        "bio": "Short bio based on the about/team page.",
        "specialties": ["Injectables", "Laser"],
        "certifications": ["RN", "NP", "MD"],
    }],
    "services": [{
        "name": "Service Name",
        "category": "Category (e.g., Injectables, Laser, Skin)",
        "descriptionShort": "One sentence overview.",
        "descriptionLong": "A detailed description of the treatment, its benefits, and what to expect.",
        "benefits": ["Key benefit 1", "Key benefit 2"],
        "idealCandidate": "Who this treatment is best for.",
        "contraindications": ["Contraindication 1"],
        "preCare": ["Pre-care instruction 1"],
        "postCare": ["Post-care instruction 1"],
        "downtime": "Expected downtime, if any.",
        "frequency": "How often clients typically receive this treatment.",
        "durationMinutes": 30,
        "price": {
            "startingAt": 250,
            "range": "e.g., $250–$500",
            "perUnit": "e.g., per unit, per area",
            "notes": "Any pricing notes or disclaimers.",
        },
        "faqs": [],
        "upsells": [],
        "crossSells": [],
    }],
    "memberships": [{
        "name": "Membership Name",
        "price": "$199/month",
        "perks": ["Perk 1", "Perk 2"],
        "terms": "Key terms and conditions.",
    }],
    "packages": [{
        "name": "Package Name",
        "servicesIncluded": ["Service A", "Service B"],
        "price": "$999",
        "savings": "Save 20% vs booking individually.",
    }],
    "policies": {
        "cancellation": "Cancellation policy text.",
        "noShow": "No-show policy text.",
        "late": "Late arrival policy text.",
        "refund": "Refund policy text.",
        "children": "Children policy text.",
    },
    "faqs": [{"q": "Question", "a": "Answer"}],
    "booking": {
        "type": "mock",
        "requiresPayment": False,
        "depositAmount": None,
        "url": "https://calendly.com/...",
        "instructions": "Any special booking instructions or notes.",
    },
    "safety": {
        "disclaimers": ["High-level safety and medical disclaimers."],
        "redFlags": ["When to advise seeing a doctor or not proceeding."],
        "escalationRules": "When and how to escalate to a human.",
    },
    "consultationFlows": {
        "botox": "Step-by-step consultation flow for Botox inquiries.",
        "filler": "Step-by-step consultation flow for filler inquiries.",
        "skincare": "Consultation flow for skincare/medical facials.",
        "weightLoss": "Consultation flow for weight loss programs.",
        "laser": "Consultation flow for laser treatments.",
    },
    "aiBehavior": {
        "tone": "How the AI should sound.",
        "identity": "The AI's name and role.",
        "speakingStyle": "Short, friendly, and clear.",
        "greetingStyle": "Warm greeting with business name.",
        "salesStyle": "Soft, educational, not pushy.",
        "objectionHandling": "How to respond to common objections and hesitations.",
        "closingPhrases": [
            "Would you like me to help you book that?",
            "Can I answer anything else?",
        ],
    },
    "memory": {
        "store": DEFAULT_MEMORY_STORE,
        "recallRules": "Use memory to personalize recommendations.",
        "privacyRules": "Never store medical history or PHI.",
    },
}

_RULES = """IMPORTANT RULES:
1. Extract ALL services mentioned with their prices and descriptions and map them into the rich schema above.
2. For locations:
   - Parse every address and phone number found in the scraped text.
   - Include ALL locations as SEPARATE entries in the "locations" array. Never merge several locations into one.
   - Remove duplicates and clean messy formatting, line breaks, embedded links or repeated text.
   - If ANY text resembles an address (street, avenue, road, suite, zip code), treat it as a real location and extract it.
   - Never output "default", "not found" or placeholder text for address or phone if any address-like text exists.
   - Format phone numbers as (XXX) XXX-XXXX when possible.
3. Extract operating hours in any format and normalize them to day-range -> time-range pairs (e.g. "mon-fri": "9am–5pm").
4. Extract FAQs, memberships, packages and policies if available.
5. Look for booking/calendar links (Calendly, Vagaro, Boulevard, Mindbody, etc.) and set booking.type and booking.url accordingly.
6. Infer durations, pricing ranges and ideal candidates from typical medspa patterns when not explicitly stated instead of leaving them blank.
7. If information is missing, use reasonable defaults while staying truthful to the website.
8. Infer brand tone, voice and persona from the overall copy.
9. Return ONLY valid JSON. No prose, no markdown, no code fences."""


def build_extraction_prompt(owner_id: str, input_text: str, domain: str | None = None) -> str:
    schema = dict(_SCHEMA_EXAMPLE, id=owner_id)
    parts = [
        "You are a data extraction specialist. Extract business information from the "
        "following scraped website content and return it as a JSON object matching "
        "this exact structure:",
        "",
        json.dumps(schema, indent=2, ensure_ascii=False),
        "",
        _RULES,
        "",
    ]
    if domain:
        parts.append(f"Business domain: {domain}")
    parts.append("Scraped website content:")
    parts.append(input_text)
    return "\n".join(parts)


PREVIEW_INPUT_CHARS = 6000

_PREVIEW_SCHEMA_EXAMPLE = {
    "logo": "URL to logo image or null",
    "colors": {
        "primary": "#hex color",
        "secondary": "#hex color",
        "accent": "#hex color",
        "background": "#hex color",
        "text": "#hex color",
    },
    "hero": {
        "title": "Main hero headline",
        "subtitle": "Hero subtext or tagline",
        "image": "URL to hero image",
        "ctaText": "Call to action button text",
    },
    "navigation": [{"label": "Nav item name", "href": "#section or URL"}],
    "sections": [{
        "type": "features",
        "title": "Section title",
        "content": "Section description",
        "images": ["image URL"],
    }],
    "images": ["array of all relevant image URLs"],
    "fonts": {"heading": "Font name for headings", "body": "Font name for body text"},
    "brandStyle": {"tone": "luxury, modern, medical, etc", "aesthetic": "minimalist, elegant, etc"},
}

_PREVIEW_RULES = """IMPORTANT RULES:
1. Extract the main logo URL from images or metadata.
2. Infer brand colors from the content (color mentions, CSS, or common medspa colors).
3. Extract the hero title and subtitle from the main heading.
4. Extract navigation items from links or content structure.
5. Identify key sections (features, services, testimonials, about).
6. Collect all relevant images (hero, services, team, etc.).
7. Infer font preferences from the brand style.
8. If information is missing, use reasonable defaults for a medical spa.
9. Return ONLY valid JSON, no markdown, no explanations."""


def build_preview_prompt(page: PageScrape) -> str:
    return "\n".join([
        "You are a web design data extraction specialist. Extract visual and design "
        "information from the following scraped website content to create a preview "
        "landing page. Return it as a JSON object matching this exact structure:",
        "",
        json.dumps(_PREVIEW_SCHEMA_EXAMPLE, indent=2),
        "",
        _PREVIEW_RULES,
        "",
        "Scraped website content:",
        page.markdown[:PREVIEW_INPUT_CHARS],
        "",
        f"Available images: {', '.join(page.images[:10]) or 'none'}",
        f"Available links: {', '.join(page.links[:20]) or 'none'}",
        f"Metadata: {json.dumps(page.metadata, ensure_ascii=False)[:1000]}",
    ])
