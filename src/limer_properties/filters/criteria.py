"""Property criteria filtering."""

from collections.abc import Sequence
from typing import Final

from limer_properties.logging import get_logger
from limer_properties.models import (
    ALL,
    FilterCriteria,
    FurnishedFilter,
    PropertyRecord,
    Purpose,
)

logger = get_logger(__name__)

# Property-type slug fragments belonging to each purpose.
PURPOSE_TYPE_GROUPS: Final[dict[Purpose, tuple[str, ...]]] = {
    Purpose.BUY: ("sale", "land"),
    Purpose.RENT: ("rent",),
    Purpose.SHORTLET: ("shortlet",),
}


def _matches_purpose(record: PropertyRecord, purpose: Purpose) -> bool:
    if purpose is Purpose.ALL:
        return True
    type_slug = (record.property_type.slug or "").lower()
    if not type_slug:
        # Untyped listings are never hidden by the coarse purpose filter
        return True
    return any(fragment in type_slug for fragment in PURPOSE_TYPE_GROUPS[purpose])


def _matches_location(record: PropertyRecord, location: str) -> bool:
    if location == ALL:
        return True
    if record.location is None:
        return False
    return location in (record.location.slug, record.location.id)


def _matches_furnished(record: PropertyRecord, furnished: FurnishedFilter) -> bool:
    if furnished is FurnishedFilter.ALL:
        return True
    # Records without a furnished flag (e.g. land) never satisfy an active constraint
    if record.furnished is None:
        return False
    return record.furnished == (furnished is FurnishedFilter.FURNISHED)


def matches_criteria(record: PropertyRecord, criteria: FilterCriteria, *, search: str = "") -> bool:
    """Check whether a record satisfies every active criterion.

    Args:
        record: Property to test.
        criteria: Current filter criteria.
        search: Pre-normalized (stripped, lowercased) search term. Computed
            from ``criteria.search`` when empty.
    """
    term = search or criteria.search.strip().lower()
    min_price, max_price = criteria.price_range
    return (
        _matches_purpose(record, criteria.purpose)
        and (not term or term in record.location_text.lower())
        and (criteria.type == ALL or record.type_key == criteria.type)
        and _matches_location(record, criteria.location)
        and (criteria.bedrooms == ALL or record.bedrooms == criteria.bedrooms)
        and (criteria.bathrooms == ALL or record.bathrooms == criteria.bathrooms)
        and (
            criteria.structure == ALL
            or (record.structure is not None and record.structure.key == criteria.structure)
        )
        and _matches_furnished(record, criteria.furnished)
        and min_price <= record.price <= max_price
    )


def filter_properties(
    records: Sequence[PropertyRecord], criteria: FilterCriteria
) -> list[PropertyRecord]:
    """Return the records satisfying every active criterion, in input order.

    Pure and deterministic: disabled criteria are no-ops, so default criteria
    return the input unchanged.
    """
    term = criteria.search.strip().lower()
    return [r for r in records if matches_criteria(r, criteria, search=term)]


class CriteriaFilter:
    """Filter property records by the current criteria, logging a summary."""

    def __init__(self, criteria: FilterCriteria) -> None:
        """Initialize the criteria filter.

        Args:
            criteria: Criteria to filter by.
        """
        self.criteria = criteria

    def filter_properties(self, properties: Sequence[PropertyRecord]) -> list[PropertyRecord]:
        """Filter properties by criteria.

        Args:
            properties: Records to filter.

        Returns:
            Records matching the criteria, in input order.
        """
        matching = filter_properties(properties, self.criteria)

        logger.info(
            "criteria_filter_complete",
            total_properties=len(properties),
            matching=len(matching),
            purpose=self.criteria.purpose.value,
            type=self.criteria.type,
            location=self.criteria.location,
            min_price=self.criteria.min_price,
            max_price=self.criteria.max_price,
        )

        return matching
