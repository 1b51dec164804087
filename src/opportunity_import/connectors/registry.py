"""Registry for discovering and instantiating staging-store backends."""

from typing import Type

from opportunity_import.connectors.base import BaseStagingStore
from opportunity_import.connectors.http import HttpStagingStore
from opportunity_import.store.sqlite_store import TempOpportunityStore


class ConnectorRegistry:
    """Discovers and provides staging-store backends."""

    _staging_stores: dict[str, Type[BaseStagingStore]] = {
        "http": HttpStagingStore,
        "sqlite": TempOpportunityStore,
    }

    @classmethod
    def get_staging_store(cls, backend: str, **kwargs) -> BaseStagingStore:
        """Get a staging store for the given backend. kwargs passed to its __init__."""
        store_cls = cls._staging_stores.get(backend.lower())
        if not store_cls:
            raise ValueError(
                f"Unknown staging backend: {backend}. Available: {list(cls._staging_stores.keys())}"
            )
        return store_cls(**kwargs)

    @classmethod
    def available_backends(cls) -> list[str]:
        """Return list of available backend identifiers."""
        return list(cls._staging_stores.keys())
