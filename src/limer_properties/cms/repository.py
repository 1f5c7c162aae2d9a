"""Typed reads from the content store, plus non-raising fetch-state loaders."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from limer_properties.cms import queries
from limer_properties.cms.client import SanityClient
from limer_properties.exceptions import ContentStoreError, LimerError
from limer_properties.filters.options import FilterEntities
from limer_properties.logging import get_logger
from limer_properties.models import (
    CompanyContact,
    Location,
    PropertyRecord,
    PropertyTypeRef,
    StatusRef,
    StructureRef,
)

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")


def _validate_list(model: type[M], raw: Any, *, kind: str) -> list[M]:
    """Validate documents one by one, skipping (and logging) malformed ones."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ContentStoreError(f"Expected a list of {kind} documents")

    items: list[M] = []
    for doc in raw:
        try:
            items.append(model.model_validate(doc))
        except ValidationError as e:
            doc_id = doc.get("_id") if isinstance(doc, dict) else None
            logger.warning(
                "invalid_document_skipped",
                kind=kind,
                doc_id=doc_id,
                errors=e.error_count(),
            )
    return items


class ContentRepository:
    """Property and reference-data reads over a ``SanityClient``."""

    def __init__(self, client: SanityClient) -> None:
        self.client = client

    async def fetch_properties(self) -> list[PropertyRecord]:
        raw = await self.client.fetch(queries.PROPERTIES_QUERY)
        properties = _validate_list(PropertyRecord, raw, kind="property")
        logger.debug("properties_fetched", count=len(properties))
        return properties

    async def fetch_property(self, slug_or_id: str) -> PropertyRecord | None:
        """Fetch a single property by slug or document id."""
        raw = await self.client.fetch(queries.PROPERTY_QUERY, {"id": slug_or_id})
        if raw is None:
            return None
        try:
            return PropertyRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                "invalid_document_skipped",
                kind="property",
                doc_id=slug_or_id,
                errors=e.error_count(),
            )
            return None

    async def fetch_filter_entities(self) -> FilterEntities:
        """Fetch the four reference collections concurrently."""
        types_raw, locations_raw, structures_raw, statuses_raw = await asyncio.gather(
            self.client.fetch(queries.PROPERTY_TYPES_QUERY),
            self.client.fetch(queries.LOCATIONS_QUERY),
            self.client.fetch(queries.STRUCTURES_QUERY),
            self.client.fetch(queries.STATUSES_QUERY),
        )
        return FilterEntities(
            property_types=_validate_list(PropertyTypeRef, types_raw, kind="propertyType"),
            locations=_validate_list(Location, locations_raw, kind="location"),
            structures=_validate_list(StructureRef, structures_raw, kind="propertyStructure"),
            statuses=_validate_list(StatusRef, statuses_raw, kind="propertyStatus"),
        )

    async def fetch_company_info(self) -> CompanyContact | None:
        raw = await self.client.fetch(queries.COMPANY_INFO_QUERY)
        if raw is None:
            return None
        try:
            return CompanyContact.model_validate(raw)
        except ValidationError as e:
            raise ContentStoreError("Company info document is malformed") from e


# ---------------------------------------------------------------------------
# Fetch state
# ---------------------------------------------------------------------------


@dataclass
class FetchState(Generic[T]):
    """Result of a best-effort read: data (or its empty default) plus flags."""

    data: T
    loading: bool = True
    error: LimerError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


async def load(fetch: Callable[[], Awaitable[T]], default: T, *, name: str) -> FetchState[T]:
    """Run ``fetch``, converting content-store failures into an error flag.

    The error is logged here and never propagates; callers render the
    default (empty) data instead.
    """
    state: FetchState[T] = FetchState(data=default)
    try:
        state.data = await fetch()
    except ContentStoreError as e:
        logger.error("content_fetch_failed", fetch=name, error=str(e), exc_info=True)
        state.error = e
    finally:
        state.loading = False
    return state


async def load_properties(repo: ContentRepository) -> FetchState[list[PropertyRecord]]:
    return await load(repo.fetch_properties, [], name="properties")


async def load_filter_entities(repo: ContentRepository) -> FetchState[FilterEntities]:
    return await load(repo.fetch_filter_entities, FilterEntities(), name="filters")


async def load_company_info(repo: ContentRepository) -> FetchState[CompanyContact | None]:
    return await load(repo.fetch_company_info, None, name="company_info")


@dataclass
class ListingLoad:
    """Independent property and filter-option reads for a listing view."""

    properties: FetchState[list[PropertyRecord]]
    filters: FetchState[FilterEntities]

    @property
    def loading(self) -> bool:
        return self.properties.loading or self.filters.loading

    @property
    def failed(self) -> bool:
        return self.properties.failed or self.filters.failed


async def load_listing(repo: ContentRepository) -> ListingLoad:
    """Load properties and filter entities in parallel; neither depends on the other."""
    properties, filters = await asyncio.gather(
        load_properties(repo),
        load_filter_entities(repo),
    )
    return ListingLoad(properties=properties, filters=filters)
