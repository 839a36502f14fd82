from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from fantasy_history.domain.enums import ApiVersionEnum
from fantasy_history.domain.season import Season


class SeasonAdapter(Protocol):
    """
    Pure transform from one upstream schema version to the canonical Season.

    Raises ProviderMappingError when the payload does not match the expected shape.
    """

    api_version: ApiVersionEnum

    def adapt(self, payload: Any, year: int) -> Season:
        ...


class SeasonTransport(Protocol):
    """
    Capability that returns one season's raw payload.

    Orchestration depends on this, not on any HTTP client. Implementations raise
    ProviderRequestError (or a subclass) on failure.
    """

    async def get(
        self,
        year: int,
        api_version: ApiVersionEnum,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        ...
