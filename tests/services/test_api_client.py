"""Tests for the records service HTTP client, using httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from urfocus_cli.services.api.client import APIClient


def _client(tmp_config, handler) -> APIClient:
    tmp_config.use_context("cloud")
    api = APIClient(tmp_config)
    api._client = httpx.AsyncClient(base_url=api.base_url, transport=httpx.MockTransport(handler))
    return api


class TestAPIClient:
    @pytest.mark.asyncio
    async def test_sends_bearer_token(self, tmp_config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            seen["path"] = request.url.path
            return httpx.Response(200, json={"ok": True})

        tmp_config.save_credentials("tok-9", "cloud")
        api = _client(tmp_config, handler)
        response = await api.get("records/shared/goal")
        await api.close()

        assert response.json() == {"ok": True}
        assert seen["auth"] == "Bearer tok-9"
        assert seen["path"].endswith("/records/shared/goal")

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self, tmp_config):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(404)

        api = _client(tmp_config, handler)
        with pytest.raises(httpx.HTTPStatusError):
            await api.request("GET", "/records/shared/goal", retry=3)
        await api.close()

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_server_error_is_raised_after_retries(self, tmp_config):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        api = _client(tmp_config, handler)
        with pytest.raises(httpx.HTTPStatusError):
            await api.request("GET", "/records/shared/goal", retry=0)
        await api.close()

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, tmp_config):
        api = _client(tmp_config, lambda request: httpx.Response(200))
        await api.close()
        await api.close()
        assert api._client is None
