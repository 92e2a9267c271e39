import httpx
import pytest
from httpx import ASGITransport

SUPABASE_URL = "https://db.test"


@pytest.fixture
def mock_env(monkeypatch):
    monkeypatch.setenv("FIRECRAWL_API_KEY", "fc-test-key")
    monkeypatch.setenv("GEMINI_API_KEY", "gemini-test-key")
    monkeypatch.setenv("SUPABASE_URL", SUPABASE_URL)
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "sb-test-key")
    monkeypatch.setenv("CRAWL_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("CRAWL_POLL_INTERVAL", "0")
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
    monkeypatch.delenv("GEMINI_MODEL", raising=False)


@pytest.fixture
async def client(mock_env):
    from medspa_onboarding.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c


class FakeSupabase:
    """In-memory stand-in for SupabaseService with the same call surface."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self._next_id = 1

    def _rows(self, table: str) -> list[dict]:
        return self.tables.setdefault(table, [])

    @staticmethod
    def _matches(row: dict, filters: dict | None) -> bool:
        return all(str(row.get(k)) == str(v) for k, v in (filters or {}).items())

    async def select(self, table, filters=None, columns="*", order=None, limit=None, not_null=()):
        rows = [
            dict(r) for r in self._rows(table)
            if self._matches(r, filters) and all(r.get(c) is not None for c in not_null)
        ]
        if order:
            column, _, direction = order.partition(".")
            rows.sort(key=lambda r: str(r.get(column) or ""), reverse=direction == "desc")
        return rows[:limit] if limit is not None else rows

    async def select_one(self, table, filters, columns="*", order=None, not_null=()):
        rows = await self.select(table, filters, order=order, limit=1, not_null=not_null)
        return rows[0] if rows else None

    async def insert(self, table, values):
        row = dict(values)
        if "id" not in row:
            row["id"] = self._next_id
            self._next_id += 1
        self._rows(table).append(row)
        return dict(row)

    async def update(self, table, values, filters):
        updated = []
        for row in self._rows(table):
            if self._matches(row, filters):
                row.update(values)
                updated.append(dict(row))
        return updated

    async def upsert(self, table, values, on_conflict="id"):
        rows = await self.update(table, values, {on_conflict: values[on_conflict]})
        return rows[0] if rows else await self.insert(table, values)

    async def delete(self, table, filters):
        kept = [r for r in self._rows(table) if not self._matches(r, filters)]
        removed = [r for r in self._rows(table) if self._matches(r, filters)]
        self.tables[table] = kept
        return removed


@pytest.fixture
def fake_supabase():
    return FakeSupabase()
