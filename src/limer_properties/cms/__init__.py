"""Content store access."""

from limer_properties.cms.client import SanityClient
from limer_properties.cms.images import image_url
from limer_properties.cms.repository import (
    ContentRepository,
    FetchState,
    ListingLoad,
    load_company_info,
    load_filter_entities,
    load_listing,
    load_properties,
)

__all__ = [
    "ContentRepository",
    "FetchState",
    "ListingLoad",
    "SanityClient",
    "image_url",
    "load_company_info",
    "load_filter_entities",
    "load_listing",
    "load_properties",
]
