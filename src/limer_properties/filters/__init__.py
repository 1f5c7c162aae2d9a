"""Property filtering, select options and query-string binding."""

from limer_properties.filters.criteria import CriteriaFilter, filter_properties, matches_criteria
from limer_properties.filters.options import (
    FilterEntities,
    FilterOptions,
    build_filter_options,
    build_options,
)
from limer_properties.filters.query import (
    QueryHydrator,
    parse_query,
    parse_query_string,
    serialize_criteria,
    to_query_string,
)
from limer_properties.filters.state import FilterState

__all__ = [
    "CriteriaFilter",
    "FilterEntities",
    "FilterOptions",
    "FilterState",
    "QueryHydrator",
    "build_filter_options",
    "build_options",
    "filter_properties",
    "matches_criteria",
    "parse_query",
    "parse_query_string",
    "serialize_criteria",
    "to_query_string",
]
