from __future__ import annotations

import logging
from dataclasses import dataclass

from fantasy_history.core.config import Settings
from fantasy_history.domain.enums import ApiVersionEnum, FailureKindEnum
from fantasy_history.ingestion.providers.base.adapter import SeasonTransport
from fantasy_history.ingestion.providers.base.errors import (
    ProviderAuthRequired,
    ProviderNotFound,
    format_failure_reason,
)
from fantasy_history.ingestion.providers.base.types import (
    FetchFailure,
    FetchSuccess,
    SeasonFetchResult,
    select_api_version,
)

logger = logging.getLogger(__name__)


@dataclass
class SeasonFetcher:
    """
    One upstream request per season.

    Never raises for a failed year: the failure is classified and returned as a
    `FetchFailure` so the caller can keep going with sibling years. Cancellation
    is not a failure and propagates.
    """

    transport: SeasonTransport
    config: Settings

    def api_version_for(self, year: int) -> ApiVersionEnum:
        return select_api_version(year, cutoff_year=self.config.api_cutoff_year)

    async def fetch(self, year: int) -> SeasonFetchResult:
        api_version = self.api_version_for(year)
        logger.info("Fetching %s season data for %s", api_version, year)

        try:
            payload = await self.transport.get(year, api_version)
        except ProviderAuthRequired:
            creds = "configured" if self.config.has_credentials else "not configured"
            failure = FetchFailure(
                kind=FailureKindEnum.AUTH_REQUIRED,
                reason=(
                    f"Authentication required for {year}. Private league history needs ESPN "
                    f"credentials (espn_s2/SWID are {creds})."
                ),
            )
        except ProviderNotFound:
            failure = FetchFailure(
                kind=FailureKindEnum.NOT_FOUND,
                reason=(
                    f"No {api_version} data found for {year}. The league may not have existed "
                    f"that season or the data is unavailable."
                ),
            )
        except Exception as exc:
            failure = FetchFailure(
                kind=FailureKindEnum.TRANSPORT_ERROR,
                reason=format_failure_reason(exc),
            )
        else:
            return SeasonFetchResult(
                year=year, api_version=api_version, outcome=FetchSuccess(payload=payload)
            )

        logger.warning("Season %s unavailable (%s): %s", year, failure.kind, failure.reason)
        return SeasonFetchResult(year=year, api_version=api_version, outcome=failure)
