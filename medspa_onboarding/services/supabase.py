import logging
from typing import Any

import httpx

from medspa_onboarding.exceptions.custom import (
    ConfigurationError,
    RateLimitError,
    RemoteServiceError,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "Supabase"
REST_PATH = "/rest/v1"


def _eq_filters(filters: dict[str, Any] | None) -> dict[str, str]:
    return {column: f"eq.{value}" for column, value in (filters or {}).items()}


class SupabaseService:
    """Row-level access to Supabase tables through the PostgREST API."""

    def __init__(self, client: httpx.AsyncClient, url: str, key: str):
        self._client = client
        self._base_url = f"{url.rstrip('/')}{REST_PATH}" if url else ""
        self._headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }
        self._configured = bool(url and key)

    @property
    def enabled(self) -> bool:
        return self._configured

    def _table_url(self, table: str) -> str:
        if not self._configured:
            raise ConfigurationError(
                "Supabase credentials not configured (SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY)"
            )
        return f"{self._base_url}/{table}"

    @staticmethod
    def _check(resp: httpx.Response, action: str, table: str) -> list[dict]:
        if resp.status_code == 429:
            raise RateLimitError(SERVICE_NAME, body=resp.text)
        if resp.status_code >= 400:
            raise RemoteServiceError(
                SERVICE_NAME,
                f"{action} on {table} failed: {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )
        if not resp.content:
            return []
        data = resp.json()
        return data if isinstance(data, list) else [data]

    async def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        columns: str = "*",
        order: str | None = None,
        limit: int | None = None,
        not_null: tuple[str, ...] = (),
    ) -> list[dict]:
        url = self._table_url(table)
        params = {"select": columns, **_eq_filters(filters)}
        for column in not_null:
            params[column] = "not.is.null"
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = str(limit)

        resp = await self._client.get(url, params=params, headers=self._headers)
        return self._check(resp, "select", table)

    async def select_one(
        self,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
        order: str | None = None,
        not_null: tuple[str, ...] = (),
    ) -> dict | None:
        """Return the first matching row, or None when nothing matches."""
        rows = await self.select(
            table, filters, columns=columns, order=order, limit=1, not_null=not_null
        )
        return rows[0] if rows else None

    async def insert(self, table: str, values: dict) -> dict:
        url = self._table_url(table)
        resp = await self._client.post(url, json=values, headers=self._headers)
        rows = self._check(resp, "insert", table)
        logger.debug("Inserted row into %s", table)
        return rows[0] if rows else values

    async def update(
        self, table: str, values: dict, filters: dict[str, Any]
    ) -> list[dict]:
        url = self._table_url(table)
        resp = await self._client.patch(
            url, params=_eq_filters(filters), json=values, headers=self._headers
        )
        rows = self._check(resp, "update", table)
        logger.debug("Updated %d row(s) in %s", len(rows), table)
        return rows

    async def upsert(self, table: str, values: dict, on_conflict: str = "id") -> dict:
        url = self._table_url(table)
        headers = {
            **self._headers,
            "Prefer": "resolution=merge-duplicates,return=representation",
        }
        resp = await self._client.post(
            url, params={"on_conflict": on_conflict}, json=values, headers=headers
        )
        rows = self._check(resp, "upsert", table)
        return rows[0] if rows else values

    async def delete(self, table: str, filters: dict[str, Any]) -> list[dict]:
        url = self._table_url(table)
        resp = await self._client.delete(
            url, params=_eq_filters(filters), headers=self._headers
        )
        return self._check(resp, "delete", table)
