"""Search workflow."""

from .search import SearchOrchestrator, SearchResult, search_hotels
from .search_payloads import SearchCriteria, build_query, validate_criteria

__all__ = [
    "SearchCriteria",
    "SearchOrchestrator",
    "SearchResult",
    "build_query",
    "search_hotels",
    "validate_criteria",
]
