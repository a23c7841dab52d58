from .engine import QueryEngine
from .params import Filter, QueryParams, SortDirective, normalize_query_params
from .search import normalize_text

__all__ = [
    "Filter",
    "QueryEngine",
    "QueryParams",
    "SortDirective",
    "normalize_query_params",
    "normalize_text",
]
