"""Explicit filter state with setters and a recomputed filtered view."""

from collections.abc import Mapping, Sequence
from typing import Any, Literal

from limer_properties.filters.criteria import filter_properties
from limer_properties.models import (
    DEFAULT_MAX_PRICE,
    FilterCriteria,
    FurnishedFilter,
    PropertyRecord,
    Purpose,
)


class FilterState:
    """Current criteria for a listing view over a fixed set of records.

    Every transition replaces the frozen ``FilterCriteria``; ``filtered`` is
    recomputed from the records and the current criteria on access.
    """

    def __init__(
        self,
        records: Sequence[PropertyRecord] = (),
        *,
        initial_purpose: Purpose = Purpose.ALL,
    ) -> None:
        self._records = list(records)
        self._initial_purpose = initial_purpose
        self._criteria = FilterCriteria(purpose=initial_purpose)

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def records(self) -> list[PropertyRecord]:
        return list(self._records)

    def set_records(self, records: Sequence[PropertyRecord]) -> None:
        self._records = list(records)

    @property
    def filtered(self) -> list[PropertyRecord]:
        return filter_properties(self._records, self._criteria)

    @property
    def result_count(self) -> int:
        return len(self.filtered)

    def apply(self, update: Mapping[str, Any]) -> FilterCriteria:
        """Apply a partial update (validated) and return the new criteria."""
        self._criteria = FilterCriteria.model_validate(
            {**self._criteria.model_dump(), **update}
        )
        return self._criteria

    def set_purpose(self, purpose: Purpose) -> None:
        self.apply({"purpose": purpose})

    def set_search(self, term: str) -> None:
        self.apply({"search": term})

    def set_type(self, type_key: str) -> None:
        self.apply({"type": type_key})

    def set_location(self, location: str) -> None:
        self.apply({"location": location})

    def set_bedrooms(self, bedrooms: int | Literal["all"]) -> None:
        self.apply({"bedrooms": bedrooms})

    def set_bathrooms(self, bathrooms: int | Literal["all"]) -> None:
        self.apply({"bathrooms": bathrooms})

    def set_structure(self, structure: str) -> None:
        self.apply({"structure": structure})

    def set_furnished(self, furnished: FurnishedFilter) -> None:
        self.apply({"furnished": furnished})

    def set_price_range(self, min_price: int, max_price: int = DEFAULT_MAX_PRICE) -> None:
        self.apply({"price_range": (min_price, max_price)})

    def reset(self) -> None:
        """Restore every criterion to its default at once.

        Purpose returns to the purpose the state was created with.
        """
        self._criteria = FilterCriteria(purpose=self._initial_purpose)
