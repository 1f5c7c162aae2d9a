"""Binding between filter criteria and URL query parameters.

Hydration is a guarded one-shot read (``QueryHydrator``); serialization runs
on explicit submission only. The two are not a live two-way sync.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, Final, TypeVar
from urllib.parse import parse_qsl, urlencode

from limer_properties.logging import get_logger
from limer_properties.models import (
    ALL,
    DEFAULT_MAX_PRICE,
    FilterCriteria,
    FurnishedFilter,
    Purpose,
)

if TYPE_CHECKING:
    from limer_properties.filters.state import FilterState

logger = get_logger(__name__)

QUERY_PARAMS: Final = (
    "type",
    "location",
    "search",
    "bedrooms",
    "bathrooms",
    "structure",
    "furnished",
    "minPrice",
    "maxPrice",
    "purpose",
)

_IDENTIFIER_PARAMS: Final = ("type", "location", "structure")

E = TypeVar("E", bound=Enum)


def _parse_finite(value: str | None) -> float | None:
    """Parse a string as a finite number, returning None otherwise."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _parse_count(value: str | None) -> int | None:
    """Whole, non-negative count (bedrooms, bathrooms)."""
    number = _parse_finite(value)
    if number is None or number < 0 or not number.is_integer():
        return None
    return int(number)


def _parse_price(value: str | None) -> int | None:
    number = _parse_finite(value)
    if number is None or number < 0:
        return None
    return int(number)


def _parse_identifier(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _parse_enum(value: str | None, enum_cls: type[E]) -> E | None:
    """Strip, lowercase, and validate against an enum. Returns None if invalid."""
    if not value:
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        return None


def parse_query(
    params: Mapping[str, str], *, current: FilterCriteria | None = None
) -> dict[str, Any]:
    """Parse navigation query parameters into a partial criteria update.

    Only recognized, syntactically valid parameters appear in the result;
    everything else leaves the corresponding criterion untouched. The price
    bounds are merged into a single ``price_range`` update, and only when at
    least one of ``minPrice``/``maxPrice`` is valid; the absent bound keeps
    its value from ``current``. A range whose minimum exceeds its maximum is
    dropped.

    Args:
        params: Query parameters (any ``str -> str`` mapping).
        current: Criteria the update will be applied to (defaults when None).
    """
    current = current or FilterCriteria()
    update: dict[str, Any] = {}

    for name in _IDENTIFIER_PARAMS:
        parsed = _parse_identifier(params.get(name))
        if parsed is not None:
            update[name] = parsed

    search = _parse_identifier(params.get("search"))
    if search is not None:
        update["search"] = search

    for name in ("bedrooms", "bathrooms"):
        count = _parse_count(params.get(name))
        if count is not None:
            update[name] = count

    furnished = _parse_enum(params.get("furnished"), FurnishedFilter)
    if furnished is not None:
        update["furnished"] = furnished

    purpose = _parse_enum(params.get("purpose"), Purpose)
    if purpose is not None:
        update["purpose"] = purpose

    min_price = _parse_price(params.get("minPrice"))
    max_price = _parse_price(params.get("maxPrice"))
    if min_price is not None or max_price is not None:
        low = current.min_price if min_price is None else min_price
        high = current.max_price if max_price is None else max_price
        if low <= high:
            update["price_range"] = (low, high)

    ignored = sorted(
        name for name in QUERY_PARAMS if params.get(name) and _param_field(name) not in update
    )
    if ignored:
        logger.debug("invalid_query_params_ignored", params=ignored)

    return update


def _param_field(name: str) -> str:
    return "price_range" if name in ("minPrice", "maxPrice") else name


def parse_query_string(query: str, *, current: FilterCriteria | None = None) -> dict[str, Any]:
    """Parse a raw query string (with or without the leading ``?``)."""
    return parse_query(dict(parse_qsl(query.lstrip("?"))), current=current)


def serialize_criteria(criteria: FilterCriteria) -> dict[str, str]:
    """Render criteria as query parameters, omitting disabled criteria.

    ``purpose`` is always included.
    """
    params: dict[str, str] = {"purpose": criteria.purpose.value}

    search = criteria.search.strip()
    if search:
        params["search"] = search
    for name in _IDENTIFIER_PARAMS:
        value = getattr(criteria, name)
        if value != ALL:
            params[name] = value
    if criteria.bedrooms != ALL:
        params["bedrooms"] = str(criteria.bedrooms)
    if criteria.bathrooms != ALL:
        params["bathrooms"] = str(criteria.bathrooms)
    if criteria.furnished is not FurnishedFilter.ALL:
        params["furnished"] = criteria.furnished.value
    if criteria.min_price != 0:
        params["minPrice"] = str(criteria.min_price)
    if criteria.max_price != DEFAULT_MAX_PRICE:
        params["maxPrice"] = str(criteria.max_price)

    return params


def to_query_string(criteria: FilterCriteria) -> str:
    """Serialize criteria to a URL query string (without the leading ``?``)."""
    return urlencode(serialize_criteria(criteria))


class QueryHydrator:
    """Seeds a ``FilterState`` from query parameters exactly once.

    Later calls are ignored, so navigation after the first read never
    overwrites criteria the user has since changed.
    """

    def __init__(self, state: FilterState) -> None:
        self._state = state
        self._hydrated = False

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    def hydrate(self, params: Mapping[str, str]) -> bool:
        """Apply ``params`` to the state. Returns False if already hydrated."""
        if self._hydrated:
            logger.debug("query_hydration_skipped")
            return False
        self._hydrated = True

        update = parse_query(params, current=self._state.criteria)
        if update:
            self._state.apply(update)
            logger.debug("query_hydrated", fields=sorted(update))
        return True
