import json
import logging
import re

import httpx

from medspa_onboarding.exceptions.custom import (
    ConfigurationError,
    ParseError,
    RateLimitError,
    RemoteServiceError,
)
from medspa_onboarding.services.gemini_auth import GeminiAuth

logger = logging.getLogger(__name__)

SERVICE_NAME = "Gemini"
API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"
MODEL = "gemini-2.0-flash-exp"

_OPENING_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*[ \t]*\n?")
_CLOSING_FENCE_RE = re.compile(r"\n?[ \t]*```$")


def strip_code_fence(text: str) -> str:
    """Remove a leading and a trailing ``` fence; either may be missing."""
    stripped = _OPENING_FENCE_RE.sub("", text.strip(), count=1)
    return _CLOSING_FENCE_RE.sub("", stripped, count=1).strip()


class GeminiService:
    def __init__(
        self,
        client: httpx.AsyncClient,
        auth: GeminiAuth,
        api_key: str = "",
        model: str = MODEL,
    ):
        self._client = client
        self._auth = auth
        self._api_key = api_key
        self._model = model

    @property
    def url(self) -> str:
        return f"{API_BASE}/{self._model}:generateContent"

    def ensure_credentials(self) -> None:
        if not self._auth.service_account_configured and not self._api_key:
            raise ConfigurationError(
                "Either GEMINI_API_KEY or GOOGLE_APPLICATION_CREDENTIALS must be configured"
            )

    async def _auth_request(self) -> tuple[dict[str, str], dict[str, str]]:
        """Return (headers, params) for exactly one auth mode."""
        headers = {"Content-Type": "application/json"}
        if self._auth.service_account_configured:
            token = await self._auth.get_access_token()
            headers["Authorization"] = f"Bearer {token}"
            return headers, {}
        self.ensure_credentials()
        return headers, {"key": self._api_key}

    async def generate_json(self, prompt: str) -> dict:
        """Send one prompt and parse the reply as a JSON object."""
        headers, params = await self._auth_request()
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }

        logger.info("Calling Gemini %s (%d prompt chars)", self._model, len(prompt))
        resp = await self._client.post(
            self.url, json=payload, headers=headers, params=params, timeout=120.0
        )

        if resp.status_code == 429:
            raise RateLimitError(SERVICE_NAME, body=resp.text)
        if resp.status_code >= 400:
            raise RemoteServiceError(
                SERVICE_NAME,
                f"generateContent failed: {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )

        data = resp.json()
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise RemoteServiceError(
                SERVICE_NAME,
                "unexpected response structure",
                status_code=resp.status_code,
                body=resp.text[:2000],
            )

        return self._parse_json(text)

    @staticmethod
    def _parse_json(text: str) -> dict:
        cleaned = strip_code_fence(text)
        try:
            obj = json.loads(cleaned)
        except (json.JSONDecodeError, ValueError) as exc:
            raise ParseError(f"Gemini returned invalid JSON: {exc}", raw_text=text) from exc
        if not isinstance(obj, dict):
            raise ParseError("Gemini returned JSON that is not an object", raw_text=text)
        return obj
