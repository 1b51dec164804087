"""Local storage for the staging queue."""

from opportunity_import.store.sqlite_store import TempOpportunityStore, risk_level_from_score

__all__ = ["TempOpportunityStore", "risk_level_from_score"]
