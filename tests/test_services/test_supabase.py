import json

import httpx
import pytest
import respx
from httpx import Response

from medspa_onboarding.exceptions.custom import (
    ConfigurationError,
    RateLimitError,
    RemoteServiceError,
)
from medspa_onboarding.services.supabase import SupabaseService

BASE_URL = "https://db.test"
LEADS_URL = f"{BASE_URL}/rest/v1/leads"


@respx.mock
@pytest.mark.asyncio
async def test_select_with_filters_and_order():
    route = respx.get(LEADS_URL).mock(
        return_value=Response(200, json=[{"id": "L1", "name": "Glow"}])
    )

    async with httpx.AsyncClient() as client:
        service = SupabaseService(client, BASE_URL + "/", "sb-key")
        rows = await service.select("leads", {"id": "L1"}, columns="id,name", order="created_at.desc")

    assert rows == [{"id": "L1", "name": "Glow"}]
    request = route.calls.last.request
    assert request.url.params["select"] == "id,name"
    assert request.url.params["id"] == "eq.L1"
    assert request.url.params["order"] == "created_at.desc"
    assert request.headers["apikey"] == "sb-key"
    assert request.headers["Authorization"] == "Bearer sb-key"


@respx.mock
@pytest.mark.asyncio
async def test_select_one_returns_none_when_empty():
    route = respx.get(LEADS_URL).mock(return_value=Response(200, json=[]))

    async with httpx.AsyncClient() as client:
        service = SupabaseService(client, BASE_URL, "sb-key")
        row = await service.select_one("leads", {"id": "missing"})

    assert row is None
    assert route.calls.last.request.url.params["limit"] == "1"


@respx.mock
@pytest.mark.asyncio
async def test_insert_returns_created_row():
    route = respx.post(LEADS_URL).mock(
        return_value=Response(201, json=[{"id": "L1", "name": "Glow"}])
    )

    async with httpx.AsyncClient() as client:
        service = SupabaseService(client, BASE_URL, "sb-key")
        row = await service.insert("leads", {"name": "Glow"})

    assert row["id"] == "L1"
    assert json.loads(route.calls.last.request.content) == {"name": "Glow"}
    assert route.calls.last.request.headers["Prefer"] == "return=representation"


@respx.mock
@pytest.mark.asyncio
async def test_update_filters_by_column():
    route = respx.patch(LEADS_URL).mock(
        return_value=Response(200, json=[{"id": "L1", "status": "done"}])
    )

    async with httpx.AsyncClient() as client:
        service = SupabaseService(client, BASE_URL, "sb-key")
        rows = await service.update("leads", {"status": "done"}, {"id": "L1"})

    assert rows == [{"id": "L1", "status": "done"}]
    assert route.calls.last.request.url.params["id"] == "eq.L1"


@respx.mock
@pytest.mark.asyncio
async def test_upsert_merges_duplicates():
    route = respx.post(LEADS_URL).mock(return_value=Response(201, json=[{"id": "L1"}]))

    async with httpx.AsyncClient() as client:
        service = SupabaseService(client, BASE_URL, "sb-key")
        await service.upsert("leads", {"id": "L1", "name": "Glow"})

    request = route.calls.last.request
    assert request.url.params["on_conflict"] == "id"
    assert "resolution=merge-duplicates" in request.headers["Prefer"]


@respx.mock
@pytest.mark.asyncio
async def test_delete_with_empty_body():
    respx.delete(LEADS_URL).mock(return_value=Response(204))

    async with httpx.AsyncClient() as client:
        service = SupabaseService(client, BASE_URL, "sb-key")
        rows = await service.delete("leads", {"id": "L1"})

    assert rows == []


@respx.mock
@pytest.mark.asyncio
async def test_error_response():
    respx.get(LEADS_URL).mock(return_value=Response(400, text='{"message":"bad column"}'))

    async with httpx.AsyncClient() as client:
        service = SupabaseService(client, BASE_URL, "sb-key")
        with pytest.raises(RemoteServiceError) as exc_info:
            await service.select("leads")

    assert exc_info.value.service == "Supabase"
    assert exc_info.value.status_code == 400
    assert "bad column" in exc_info.value.body


@respx.mock
@pytest.mark.asyncio
async def test_rate_limited():
    respx.get(LEADS_URL).mock(return_value=Response(429, text="slow down"))

    async with httpx.AsyncClient() as client:
        service = SupabaseService(client, BASE_URL, "sb-key")
        with pytest.raises(RateLimitError):
            await service.select("leads")


@pytest.mark.asyncio
async def test_not_configured():
    async with httpx.AsyncClient() as client:
        service = SupabaseService(client, "", "")
        assert service.enabled is False
        with pytest.raises(ConfigurationError):
            await service.select("leads")


@pytest.mark.asyncio
async def test_not_configured_checked_before_any_request():
    async with httpx.AsyncClient() as client:
        service = SupabaseService(client, "https://db.test", "")
        for call in (
            service.select("leads"),
            service.insert("leads", {"name": "Glow"}),
            service.update("leads", {"name": "Glow"}, {"id": "L1"}),
            service.upsert("leads", {"id": "L1"}),
            service.delete("leads", {"id": "L1"}),
        ):
            with pytest.raises(ConfigurationError):
                await call


@respx.mock
@pytest.mark.asyncio
async def test_select_not_null_columns():
    route = respx.get(LEADS_URL).mock(return_value=Response(200, json=[]))

    async with httpx.AsyncClient() as client:
        service = SupabaseService(client, BASE_URL, "sb-key")
        await service.select("leads", {"outreach_status": "pending"}, not_null=("instagram_handle",))

    params = route.calls.last.request.url.params
    assert params["outreach_status"] == "eq.pending"
    assert params["instagram_handle"] == "not.is.null"
