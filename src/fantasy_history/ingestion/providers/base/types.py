from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fantasy_history.domain.enums import ApiVersionEnum, FailureKindEnum


def select_api_version(year: int, *, cutoff_year: int) -> ApiVersionEnum:
    """Seasons before `cutoff_year` are served by the legacy endpoint/shape."""
    return ApiVersionEnum.LEGACY if year < cutoff_year else ApiVersionEnum.MODERN


@dataclass(frozen=True)
class FetchSuccess:
    payload: Any


@dataclass(frozen=True)
class FetchFailure:
    kind: FailureKindEnum
    reason: str


@dataclass(frozen=True)
class SeasonFetchResult:
    """
    Outcome of one upstream request for one season.
    Failures are carried as data so sibling fetches are never aborted.
    """

    year: int
    api_version: ApiVersionEnum
    outcome: FetchSuccess | FetchFailure

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, FetchSuccess)
