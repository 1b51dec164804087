"""Scraper, enrichment and staging-store collaborators."""

from opportunity_import.connectors.base import BaseEnhancer, BaseScraper, BaseStagingStore
from opportunity_import.connectors.http import HttpEnhancer, HttpScraper, HttpStagingStore

__all__ = [
    "BaseEnhancer",
    "BaseScraper",
    "BaseStagingStore",
    "HttpEnhancer",
    "HttpScraper",
    "HttpStagingStore",
]
