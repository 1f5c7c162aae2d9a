"""Deduplicated select options derived from CMS reference entities."""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from limer_properties.logging import get_logger
from limer_properties.models import (
    Location,
    PropertyTypeRef,
    ReferenceEntity,
    SelectOption,
    StatusRef,
    StructureRef,
)

logger = get_logger(__name__)


def build_options(entities: Iterable[ReferenceEntity]) -> list[SelectOption]:
    """Collapse reference entities into ``{value, label}`` options.

    Entities are keyed by slug (falling back to id); the first occurrence of
    a key wins. Entities whose trimmed, case-insensitive label was already
    emitted are dropped too, since the content store can hold near-duplicate
    documents under different keys. Blank labels display the raw value.
    Output order is first-occurrence order.
    """
    seen_keys: set[str] = set()
    seen_labels: set[str] = set()
    options: list[SelectOption] = []
    dropped = 0

    for entity in entities:
        value = entity.key
        label = entity.label.strip() or value
        label_key = label.casefold()
        if value in seen_keys or label_key in seen_labels:
            dropped += 1
            continue
        seen_keys.add(value)
        seen_labels.add(label_key)
        options.append(SelectOption(value=value, label=label))

    if dropped:
        logger.debug("duplicate_options_dropped", kept=len(options), dropped=dropped)
    return options


class FilterEntities(BaseModel):
    """Raw reference documents backing the filter controls."""

    model_config = ConfigDict(frozen=True)

    property_types: list[PropertyTypeRef] = Field(default_factory=list)
    locations: list[Location] = Field(default_factory=list)
    structures: list[StructureRef] = Field(default_factory=list)
    statuses: list[StatusRef] = Field(default_factory=list)


class FilterOptions(BaseModel):
    """Select options for every filter control."""

    model_config = ConfigDict(frozen=True)

    property_types: list[SelectOption] = Field(default_factory=list)
    locations: list[SelectOption] = Field(default_factory=list)
    structures: list[SelectOption] = Field(default_factory=list)
    statuses: list[SelectOption] = Field(default_factory=list)


def build_filter_options(entities: FilterEntities) -> FilterOptions:
    return FilterOptions(
        property_types=build_options(entities.property_types),
        locations=build_options(entities.locations),
        structures=build_options(entities.structures),
        statuses=build_options(entities.statuses),
    )
