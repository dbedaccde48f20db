"""API client for the UR Focus records service."""

import asyncio
from typing import Any

import httpx

from urfocus_cli.utils.logger import get_logger


class APIClient:
    """HTTP client for the UR Focus records API."""

    def __init__(self, config_service=None):
        if config_service is None:
            from urfocus_cli.services.config_service import get_config_service

            config_service = get_config_service()
        self.config_manager = config_service
        self.config = self.config_manager.config
        self.base_url = self.config_manager.get_current_context().source.rstrip("/")
        self.timeout = self.config.api.timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "APIClient":
        """Enter the async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit the async context manager and ensure the client is closed."""
        await self.close()

    def _get_headers(self) -> dict[str, str]:
        """Get HTTP headers with authentication."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        credentials = self.config_manager.load_credentials()
        if credentials and "token" in credentials:
            headers["Authorization"] = f"Bearer {credentials['token']}"

        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
            )
        # Always update headers to include latest auth token
        self._client.headers.update(self._get_headers())
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        retry: int | None = None,
    ) -> httpx.Response:
        """Make an HTTP request to the API."""
        if retry is None:
            retry = self.config.api.retry

        client = await self._get_client()
        url = f"{path}" if path.startswith("/") else f"/{path}"

        last_exception: Exception | None = None
        for attempt in range(retry + 1):
            try:
                response = await client.request(
                    method=method,
                    url=url,
                    json=json,
                    params=params,
                    headers=headers,
                )
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                # Don't retry client errors (4xx)
                if 400 <= e.response.status_code < 500:
                    raise
                last_exception = e
            except httpx.RequestError as e:
                last_exception = e

            get_logger().debug(
                "%s %s failed (attempt %d/%d): %s",
                method,
                url,
                attempt + 1,
                retry + 1,
                last_exception,
            )
            if attempt < retry:
                # Wait before retry (simple exponential backoff)
                await asyncio.sleep(2**attempt)

        # All retries failed
        if last_exception:
            raise last_exception
        raise RuntimeError("Request failed after all retries")

    async def get(
        self, path: str, *, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, params=params)

    async def put(
        self,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make a PUT request."""
        return await self.request("PUT", path, json=json, headers=headers)
