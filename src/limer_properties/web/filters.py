"""FastAPI dependency for hydrating filter criteria from query parameters."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from limer_properties.filters.options import FilterOptions
from limer_properties.filters.query import QueryHydrator
from limer_properties.filters.state import FilterState
from limer_properties.models import (
    ALL,
    DEFAULT_MAX_PRICE,
    FilterCriteria,
    FurnishedFilter,
    Purpose,
    SelectOption,
)
from limer_properties.utils.formatting import format_price


def parse_criteria(request: Request) -> FilterCriteria:
    """FastAPI dependency: one-shot hydration of default criteria from the URL."""
    state = FilterState()
    QueryHydrator(state).hydrate(request.query_params)
    return state.criteria


CriteriaDep = Annotated[FilterCriteria, Depends(parse_criteria)]


def _option_label(options: list[SelectOption], value: str) -> str:
    for option in options:
        if option.value == value:
            return option.label
    return value.replace("-", " ").title()


def active_filter_chips(
    criteria: FilterCriteria, options: FilterOptions | None = None
) -> list[dict[str, str]]:
    """Build chip descriptors for the active criteria, in display order."""
    options = options or FilterOptions()
    chips: list[dict[str, str]] = []
    if criteria.purpose is not Purpose.ALL:
        chips.append({"key": "purpose", "label": criteria.purpose.value.title()})
    if criteria.search.strip():
        chips.append({"key": "search", "label": f"“{criteria.search.strip()}”"})
    if criteria.type != ALL:
        chips.append({"key": "type", "label": _option_label(options.property_types, criteria.type)})
    if criteria.location != ALL:
        chips.append(
            {"key": "location", "label": _option_label(options.locations, criteria.location)}
        )
    if criteria.bedrooms != ALL:
        chips.append({"key": "bedrooms", "label": f"{criteria.bedrooms} bed"})
    if criteria.bathrooms != ALL:
        chips.append({"key": "bathrooms", "label": f"{criteria.bathrooms} bath"})
    if criteria.structure != ALL:
        chips.append(
            {"key": "structure", "label": _option_label(options.structures, criteria.structure)}
        )
    if criteria.furnished is not FurnishedFilter.ALL:
        chips.append({"key": "furnished", "label": criteria.furnished.value.title()})
    if criteria.min_price != 0:
        chips.append({"key": "minPrice", "label": f"Min {format_price(criteria.min_price)}"})
    if criteria.max_price != DEFAULT_MAX_PRICE:
        chips.append({"key": "maxPrice", "label": f"Max {format_price(criteria.max_price)}"})
    return chips
