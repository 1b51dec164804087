"""Unit tests for ConnectorRegistry."""

from pathlib import Path

import pytest

from opportunity_import.config import ImportSettings
from opportunity_import.connectors.http import HttpStagingStore
from opportunity_import.connectors.registry import ConnectorRegistry
from opportunity_import.store import TempOpportunityStore


class TestConnectorRegistry:
    """Tests for ConnectorRegistry."""

    def test_get_sqlite(self, temp_db_path: Path) -> None:
        """Registry returns the SQLite store for 'sqlite'."""
        store = ConnectorRegistry.get_staging_store("sqlite", db_path=temp_db_path)
        assert isinstance(store, TempOpportunityStore)

    def test_get_http(self) -> None:
        """Registry returns the HTTP store for 'http'."""
        store = ConnectorRegistry.get_staging_store("http", settings=ImportSettings())
        assert isinstance(store, HttpStagingStore)
        store.close()

    def test_get_case_insensitive(self, temp_db_path: Path) -> None:
        store = ConnectorRegistry.get_staging_store("SQLite", db_path=temp_db_path)
        assert isinstance(store, TempOpportunityStore)

    def test_unknown_backend_raises(self) -> None:
        """Unknown backend raises ValueError."""
        with pytest.raises(ValueError, match="Unknown staging backend: redis"):
            ConnectorRegistry.get_staging_store("redis")

    def test_available_backends(self) -> None:
        assert ConnectorRegistry.available_backends() == ["http", "sqlite"]
