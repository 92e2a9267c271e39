import asyncio
import logging
from pathlib import Path

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.service_account import Credentials

from medspa_onboarding.exceptions.custom import ConfigurationError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/generative-language"]


class GeminiAuth:
    """Short-lived bearer tokens for Gemini from a service-account key file."""

    def __init__(self, credentials_path: str = ""):
        self._credentials_path = credentials_path
        self._credentials: Credentials | None = None

    @property
    def service_account_configured(self) -> bool:
        return bool(self._credentials_path)

    def _load_credentials(self) -> Credentials:
        if self._credentials is not None:
            return self._credentials

        path = Path(self._credentials_path)
        if not path.is_absolute():
            path = Path.cwd() / path

        try:
            self._credentials = Credentials.from_service_account_file(str(path), scopes=SCOPES)
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"Failed to load service account credentials: {exc}") from exc
        return self._credentials

    async def get_access_token(self) -> str:
        if not self.service_account_configured:
            raise ConfigurationError("GOOGLE_APPLICATION_CREDENTIALS not configured")

        creds = self._load_credentials()
        if not creds.valid:
            try:
                await asyncio.to_thread(creds.refresh, Request())
            except GoogleAuthError as exc:
                raise ConfigurationError(f"Service account authentication failed: {exc}") from exc
            logger.debug("Refreshed Gemini service-account token")

        if not creds.token:
            raise ConfigurationError("Failed to get access token from service account")
        return creds.token
