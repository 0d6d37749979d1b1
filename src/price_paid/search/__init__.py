"""Property transaction search over the properties index."""

from price_paid.search.executor import PAGE_SIZE, SearchExecutor, SearchPage
from price_paid.search.filters import by_distance, by_town
from price_paid.search.mapper import to_search_result
from price_paid.search.service import PropertySearchService

__all__ = [
    "PAGE_SIZE",
    "PropertySearchService",
    "SearchExecutor",
    "SearchPage",
    "by_distance",
    "by_town",
    "to_search_result",
]
