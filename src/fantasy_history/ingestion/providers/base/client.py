from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from .errors import (
    ProviderAuthRequired,
    ProviderNotFound,
    ProviderRateLimited,
    ProviderRequestError,
)

JsonValue = Any


@dataclass
class BaseHttpClient:
    """
    Provider-agnostic async HTTP client wrapper.

    - Uses a single underlying httpx.AsyncClient for connection pooling, so many
      season requests can be in flight at once.
    - Provides consistent error handling.
    - Provider-specific clients wrap this and add URL building / auth.
    """

    base_url: str
    timeout_s: float = 30.0
    connect_timeout_s: float = 10.0
    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict, repr=False)

    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self.base_url.rstrip("/") + "/",
            timeout=httpx.Timeout(self.timeout_s, connect=self.connect_timeout_s),
            headers=dict(self.headers),
            cookies=dict(self.cookies),
            transport=self.transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> BaseHttpClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> JsonValue:
        """
        Perform an HTTP request and return parsed JSON (object or array).
        Raises ProviderRequestError (or one of its status-specific subclasses)
        on transport issues / non-2xx.
        """
        try:
            resp = await self._client.request(
                method=method,
                url=path.lstrip("/"),
                params=params,
                headers=headers,
            )
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            raise ProviderRequestError(str(e)) from e

        status = resp.status_code
        if status in (401, 403):
            raise ProviderAuthRequired(
                f"HTTP {status} for {method} {resp.request.url}", status_code=status
            )
        if status == 404:
            raise ProviderNotFound(
                f"HTTP 404 for {method} {resp.request.url}", status_code=status
            )
        if status == 429:
            raise ProviderRateLimited(
                "Provider rate limited the request (HTTP 429).", status_code=status
            )

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderRequestError(
                f"HTTP {status} for {method} {resp.request.url}", status_code=status
            ) from e

        try:
            return resp.json()
        except ValueError as e:
            raise ProviderRequestError("Response was not valid JSON.", status_code=status) from e

    async def get_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> JsonValue:
        return await self.request_json("GET", path, params=params, headers=headers)
