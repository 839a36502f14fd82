from __future__ import annotations

from typing import Callable

from fantasy_history.domain.enums import ApiVersionEnum

from .adapter import SeasonAdapter
from .errors import ProviderCapabilityError

AdapterFactory = Callable[[], SeasonAdapter]


class AdapterRegistry:
    def __init__(self) -> None:
        self._factories: dict[ApiVersionEnum, AdapterFactory] = {}

    def register(self, api_version: ApiVersionEnum, factory: AdapterFactory) -> None:
        if api_version in self._factories:
            raise ValueError(f"Duplicate adapter registration: {api_version}")
        self._factories[api_version] = factory

    def get(self, api_version: ApiVersionEnum) -> SeasonAdapter:
        factory = self._factories.get(api_version)
        if factory is None:
            raise ProviderCapabilityError(f"No adapter registered for api_version={api_version}")
        return factory()
