"""Opportunity import: scrape, enrich, normalize and deduplicate leads into a staging queue."""

__version__ = "0.1.0"
