from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from fantasy_history.core.config import Settings
from fantasy_history.domain.enums import ApiVersionEnum
from fantasy_history.ingestion.providers.base.client import BaseHttpClient
from fantasy_history.ingestion.providers.base.errors import ProviderNotFound

_DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0",
    "Referer": "https://fantasy.espn.com",
    "Origin": "https://fantasy.espn.com",
}


@dataclass
class EspnClient:
    """
    ESPN fantasy football transport.

    Modern seasons live under `seasons/{year}/segments/0/leagues/{league}`; seasons
    before the cutoff are only served by `leagueHistory/{league}?seasonId={year}`,
    which answers with a JSON array.
    """

    http: BaseHttpClient
    league_id: str
    modern_views: tuple[str, ...] = ()
    legacy_views: tuple[str, ...] = ()

    @classmethod
    def from_settings(
        cls,
        config: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> EspnClient:
        cookies: dict[str, str] = {}
        if config.espn_s2 and config.espn_swid:
            cookies = {"espn_s2": config.espn_s2, "SWID": config.espn_swid}

        http = BaseHttpClient(
            base_url=config.espn_base_url,
            timeout_s=config.http_timeout_s,
            connect_timeout_s=config.http_connect_timeout_s,
            headers=_DEFAULT_HEADERS,
            cookies=cookies,
            transport=transport,
        )
        return cls(
            http=http,
            league_id=config.require_league_id(),
            modern_views=tuple(config.modern_views),
            legacy_views=tuple(config.legacy_views),
        )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> EspnClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def get(
        self,
        year: int,
        api_version: ApiVersionEnum,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        if api_version == ApiVersionEnum.MODERN:
            return await self._get_modern(year, params)
        return await self._get_legacy(year, params)

    async def _get_modern(self, year: int, params: Mapping[str, Any] | None) -> Any:
        query: dict[str, Any] = {"view": list(self.modern_views)}
        query.update(params or {})
        return await self.http.get_json(
            f"/seasons/{year}/segments/0/leagues/{self.league_id}", params=query
        )

    async def _get_legacy(self, year: int, params: Mapping[str, Any] | None) -> Any:
        query: dict[str, Any] = {"seasonId": str(year), "view": list(self.legacy_views)}
        query.update(params or {})
        payload = await self.http.get_json(f"/leagueHistory/{self.league_id}", params=query)

        # leagueHistory answers 200 with an empty array when the league did not exist.
        if isinstance(payload, list) and not payload:
            raise ProviderNotFound(f"No league history for {year}.", status_code=404)
        return payload
