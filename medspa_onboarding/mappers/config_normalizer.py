"""Coerce business config JSON of any provenance into the canonical schema.

Accepts partial, malformed and legacy-shaped configs (flat ``aiPersonality``,
simple services with a bare ``price`` number and ``timeMinutes``,
``booking.calendarUrl``). Never raises, and normalizing an already
canonical config returns an equal config.
"""

import copy
import math
from typing import Any

from pydantic import BaseModel

from medspa_onboarding.schemas.business_config import (
    DEFAULT_HOURS,
    DEFAULT_MEMORY_STORE,
    DEFAULT_PRIVACY_RULES,
    DEFAULT_RECALL_RULES,
    BusinessConfig,
)

PLACEHOLDER_LOCATION = {
    "name": "Main Office",
    "address": "Address not provided",
    "phone": "Phone not provided",
    "email": "",
    "parking": "",
}

PLACEHOLDER_SERVICE = {
    "name": "Consultation",
    "description": "Initial consultation",
    "price": 0,
    "timeMinutes": 30,
}

# Placeholders written by the extractor when the model omits a section.
EXTRACTION_DEFAULTS: dict[str, Any] = {
    "services": [{
        "name": "Consultation",
        "category": "",
        "descriptionShort": "Initial consultation",
        "descriptionLong": "",
        "benefits": [],
        "idealCandidate": "",
        "contraindications": [],
        "preCare": [],
        "postCare": [],
        "downtime": "",
        "frequency": "",
        "durationMinutes": 30,
        "price": {"startingAt": 0, "range": "", "perUnit": "", "notes": ""},
        "faqs": [],
        "upsells": [],
        "crossSells": [],
    }],
    "locations": [{
        "name": "Main Office",
        "address": "Address not found",
        "phone": "Phone not found",
        "email": "",
        "parking": "",
    }],
    "hours": DEFAULT_HOURS,
    "booking": {
        "type": "mock",
        "requiresPayment": False,
        "depositAmount": None,
        "url": "",
        "instructions": "",
    },
    "aiBehavior": {
        "tone": "friendly, professional",
        "identity": "AI Receptionist",
        "speakingStyle": "",
        "greetingStyle": "",
        "salesStyle": "",
        "objectionHandling": "",
        "closingPhrases": [],
    },
    "memory": {
        "store": DEFAULT_MEMORY_STORE,
        "recallRules": DEFAULT_RECALL_RULES,
        "privacyRules": DEFAULT_PRIVACY_RULES,
    },
}


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _first(*values: Any) -> Any:
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return value if isinstance(value, str) else str(value)


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [_str(v) for v in value]


def _number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().lstrip("$").replace(",", ""))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _is_empty_section(value: Any) -> bool:
    return not value or not isinstance(value, (dict, list))


def apply_required_defaults(raw: dict) -> dict:
    """Fill the sections that must never be empty with placeholders."""
    config = dict(raw)
    for section, default in EXTRACTION_DEFAULTS.items():
        value = config.get(section)
        if section in ("services", "locations"):
            missing = not isinstance(value, list) or not value
        else:
            missing = _is_empty_section(value)
        if missing:
            config[section] = copy.deepcopy(default)
    return config


def _normalize_location(loc: Any) -> dict:
    loc = _dict(loc)
    return {
        "name": _str(loc.get("name")),
        "address": _str(loc.get("address")),
        "phone": _str(loc.get("phone")),
        "email": _str(loc.get("email")),
        "parking": _str(loc.get("parking")),
    }


def _normalize_team_member(member: Any) -> dict:
    member = _dict(member)
    return {
        "name": _str(member.get("name")),
        "role": _str(member.get("role")),
        "title": _str(member.get("title")),
        "bio": _str(member.get("bio")),
        "specialties": _str_list(member.get("specialties")),
        "certifications": _str_list(member.get("certifications")),
    }


def _normalize_service(svc: Any) -> dict:
    svc = _dict(svc)
    raw_price = svc.get("price")
    price = _dict(raw_price)

    starting_at = _number(price.get("startingAt"))
    if starting_at is None:
        # legacy: bare number (or numeric string) price
        starting_at = _number(raw_price) or 0.0

    duration = _number(svc.get("durationMinutes"))
    if duration is None:
        duration = _number(svc.get("timeMinutes")) or 30

    return {
        "name": _str(svc.get("name")),
        "category": _str(svc.get("category")),
        "descriptionShort": _str(_first(svc.get("descriptionShort"), svc.get("description"))),
        "descriptionLong": _str(svc.get("descriptionLong")),
        "benefits": _str_list(svc.get("benefits")),
        "idealCandidate": _str(svc.get("idealCandidate")),
        "contraindications": _str_list(svc.get("contraindications")),
        "preCare": _str_list(svc.get("preCare")),
        "postCare": _str_list(svc.get("postCare")),
        "downtime": _str(svc.get("downtime")),
        "frequency": _str(svc.get("frequency")),
        "durationMinutes": int(duration),
        "price": {
            "startingAt": starting_at,
            "range": _str(price.get("range")),
            "perUnit": _str(price.get("perUnit")),
            "notes": _str(price.get("notes")),
        },
        "faqs": _str_list(svc.get("faqs")),
        "upsells": _str_list(svc.get("upsells")),
        "crossSells": _str_list(svc.get("crossSells")),
    }


def _normalize_hours(value: Any) -> dict[str, str]:
    hours = _dict(value)
    if not hours:
        return dict(DEFAULT_HOURS)
    return {_str(day): _str(times) for day, times in hours.items()}


def _normalize_booking(value: Any) -> dict:
    booking = _dict(value)
    deposit = booking.get("depositAmount")
    requires_payment = booking.get("requiresPayment")
    return {
        "type": _str(booking.get("type"), "mock") or "mock",
        "requiresPayment": requires_payment if isinstance(requires_payment, bool) else False,
        "depositAmount": _number(deposit) if deposit is not None else None,
        "url": _str(_first(booking.get("url"), booking.get("calendarUrl"))),
        "instructions": _str(booking.get("instructions")),
    }


def normalize_business_config(raw: Any) -> BusinessConfig:
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    raw = _dict(raw)

    legacy = _dict(raw.get("aiPersonality"))
    legacy_tone = legacy.get("tone")
    legacy_identity = legacy.get("identity")

    brand_raw = _dict(raw.get("brandIdentity"))
    brand = {
        "tone": _str(_first(brand_raw.get("tone"), legacy_tone)),
        "voice": _str(brand_raw.get("voice")),
        "keywords": _str_list(brand_raw.get("keywords")),
        "personaName": _str(_first(brand_raw.get("personaName"), legacy_identity)),
        "personaBackstory": _str(brand_raw.get("personaBackstory")),
    }

    ai_raw = _dict(raw.get("aiBehavior"))
    ai_behavior = {
        "tone": _str(_first(ai_raw.get("tone"), brand["tone"])),
        "identity": _str(
            _first(ai_raw.get("identity"), brand["personaName"] or None, legacy_identity),
            "AI Receptionist",
        ),
        "speakingStyle": _str(ai_raw.get("speakingStyle")),
        "greetingStyle": _str(ai_raw.get("greetingStyle")),
        "salesStyle": _str(ai_raw.get("salesStyle")),
        "objectionHandling": _str(ai_raw.get("objectionHandling")),
        "closingPhrases": _str_list(ai_raw.get("closingPhrases")),
    }

    locations_raw = raw.get("locations")
    if isinstance(locations_raw, list) and locations_raw:
        locations = [_normalize_location(loc) for loc in locations_raw]
    else:
        locations = [dict(PLACEHOLDER_LOCATION)]

    services_raw = raw.get("services")
    if isinstance(services_raw, list) and services_raw:
        services = [_normalize_service(svc) for svc in services_raw]
    else:
        services = [_normalize_service(PLACEHOLDER_SERVICE)]

    team_raw = raw.get("team")
    team = [_normalize_team_member(m) for m in team_raw] if isinstance(team_raw, list) else []

    memberships_raw = raw.get("memberships")
    memberships = [
        {
            "name": _str(_dict(m).get("name")),
            "price": _str(_dict(m).get("price")),
            "perks": _str_list(_dict(m).get("perks")),
            "terms": _str(_dict(m).get("terms")),
        }
        for m in (memberships_raw if isinstance(memberships_raw, list) else [])
    ]

    packages_raw = raw.get("packages")
    packages = [
        {
            "name": _str(_dict(p).get("name")),
            "servicesIncluded": _str_list(_dict(p).get("servicesIncluded")),
            "price": _str(_dict(p).get("price")),
            "savings": _str(_dict(p).get("savings")),
        }
        for p in (packages_raw if isinstance(packages_raw, list) else [])
    ]

    policies_raw = _dict(raw.get("policies"))
    policies = {
        key: _str(policies_raw.get(key))
        for key in ("cancellation", "noShow", "late", "refund", "children")
    }

    safety_raw = _dict(raw.get("safety"))
    safety = {
        "disclaimers": _str_list(safety_raw.get("disclaimers")),
        "redFlags": _str_list(safety_raw.get("redFlags")),
        "escalationRules": _str(safety_raw.get("escalationRules")),
    }

    flows_raw = _dict(raw.get("consultationFlows"))
    consultation_flows = {
        key: _str(flows_raw.get(key))
        for key in ("botox", "filler", "skincare", "weightLoss", "laser")
    }

    memory_raw = _dict(raw.get("memory"))
    store = memory_raw.get("store")
    memory = {
        "store": _str_list(store) if isinstance(store, list) else list(DEFAULT_MEMORY_STORE),
        "recallRules": _str(memory_raw.get("recallRules"), DEFAULT_RECALL_RULES),
        "privacyRules": _str(memory_raw.get("privacyRules"), DEFAULT_PRIVACY_RULES),
    }

    faqs_raw = raw.get("faqs")
    faqs = (
        [{"q": _str(_dict(f).get("q")), "a": _str(_dict(f).get("a"))} for f in faqs_raw]
        if isinstance(faqs_raw, list)
        else None
    )

    return BusinessConfig(
        id=_str(raw.get("id")).strip(),
        name=_str(raw.get("name")).strip(),
        tagline=_str(raw.get("tagline")),
        brandIdentity=brand,
        locations=locations,
        hours=_normalize_hours(raw.get("hours")),
        team=team,
        services=services,
        faqs=faqs,
        memberships=memberships,
        packages=packages,
        policies=policies,
        booking=_normalize_booking(raw.get("booking")),
        safety=safety,
        consultationFlows=consultation_flows,
        aiBehavior=ai_behavior,
        memory=memory,
    )
