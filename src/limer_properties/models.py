"""Pydantic models for property records, filter criteria and inquiries."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Final, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ALL: Final = "all"

# Upper price bound meaning "no cap" (NGN).
DEFAULT_MAX_PRICE: Final = 500_000_000


def _flatten_slug(v: object) -> object:
    """CMS slugs arrive as ``{"current": "..."}``; keep only the string."""
    if isinstance(v, dict):
        return v.get("current")
    return v


class CmsModel(BaseModel):
    """Base for documents materialized from the content store.

    Fields accept both the CMS (camelCase / ``_id``) names and Python names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class ReferenceEntity(CmsModel):
    """A reference document (type, location, structure, ...) with a display label."""

    id: str = Field(alias="_id")
    slug: str | None = None

    @field_validator("slug", mode="before")
    @classmethod
    def flatten_slug(cls, v: object) -> object:
        return _flatten_slug(v)

    @property
    def key(self) -> str:
        """Identifier used for matching and deduplication: slug if present, else id."""
        return self.slug or self.id

    @property
    def label(self) -> str:
        return ""


class City(ReferenceEntity):
    name: str = ""

    @property
    def label(self) -> str:
        return self.name


class State(ReferenceEntity):
    name: str = ""

    @property
    def label(self) -> str:
        return self.name


class Location(ReferenceEntity):
    """A neighbourhood with its parent city and state."""

    name: str = ""
    city: City | None = None
    state: State | None = None

    @property
    def label(self) -> str:
        return self.name

    @property
    def display_text(self) -> str:
        """Human-readable "name, city, state" used by free-text search."""
        parts = [self.name]
        if self.city is not None:
            parts.append(self.city.name)
        if self.state is not None:
            parts.append(self.state.name)
        return ", ".join(p for p in parts if p)


class PropertyTypeRef(ReferenceEntity):
    """Listing category, e.g. house-sale, house-rent, land, shortlet."""

    title: str = ""

    @property
    def label(self) -> str:
        return self.title


class StructureRef(ReferenceEntity):
    """Building form, e.g. bungalow, duplex, flat."""

    title: str = ""

    @property
    def label(self) -> str:
        return self.title


class StatusRef(ReferenceEntity):
    title: str = ""

    @property
    def label(self) -> str:
        return self.title


class PropertyStatus(str, Enum):
    """Availability of a listing."""

    AVAILABLE = "available"
    SOLD = "sold"
    RENTED = "rented"


class PropertyImage(CmsModel):
    """An image attached to a listing; ``asset`` holds the Sanity asset reference."""

    asset: dict[str, Any] = Field(default_factory=dict)
    alt: str | None = None
    caption: str | None = None

    @field_validator("asset", mode="before")
    @classmethod
    def default_asset(cls, v: object) -> object:
        return {} if v is None else v


class PropertyRecord(CmsModel):
    """A property listing, fully materialized at fetch time."""

    id: str = Field(alias="_id")
    slug: str
    title: str
    property_type: PropertyTypeRef = Field(alias="propertyType")
    status: PropertyStatus | None = None
    location: Location | None = None
    structure: StructureRef | None = None
    description: str = ""
    price: int = Field(ge=0)
    bedrooms: int | None = Field(default=None, ge=0)
    bathrooms: int | None = Field(default=None, ge=0)
    area: float | None = Field(default=None, gt=0, description="Square meters")
    floors: int | None = Field(default=None, ge=1)
    floor_position: int | None = Field(default=None, ge=0, alias="floorPosition")
    parking: int | None = Field(default=None, ge=0)
    year_built: int | None = Field(default=None, alias="yearBuilt")
    furnished: bool | None = None
    features: list[str] = Field(default_factory=list)
    images: list[PropertyImage] = Field(default_factory=list)
    is_featured: bool = Field(default=False, alias="isFeatured")
    created_at: datetime | None = Field(default=None, alias="_createdAt")
    published_at: datetime | None = Field(default=None, alias="publishedAt")

    @field_validator("slug", mode="before")
    @classmethod
    def flatten_slug(cls, v: object) -> object:
        return _flatten_slug(v)

    @field_validator("description", mode="before")
    @classmethod
    def empty_description(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("features", "images", mode="before")
    @classmethod
    def empty_list(cls, v: object) -> object:
        return [] if v is None else v

    @field_validator("is_featured", mode="before")
    @classmethod
    def default_featured(cls, v: object) -> object:
        return False if v is None else v

    @property
    def type_key(self) -> str:
        return self.property_type.key

    @property
    def location_text(self) -> str:
        return self.location.display_text if self.location is not None else ""


class Purpose(str, Enum):
    """Coarse listing purpose used as a pre-filter over property-type groupings."""

    BUY = "buy"
    RENT = "rent"
    SHORTLET = "shortlet"
    ALL = "all"


class FurnishedFilter(str, Enum):
    ALL = "all"
    FURNISHED = "furnished"
    UNFURNISHED = "unfurnished"


Count = Annotated[int, Field(ge=0)]


class FilterCriteria(BaseModel):
    """Independent filter criteria, combined with logical AND.

    ``"all"``, an empty search term and the default price bounds disable
    their criterion. Instances are frozen; transitions build a new instance.
    """

    model_config = ConfigDict(frozen=True)

    purpose: Purpose = Purpose.ALL
    search: str = ""
    type: str = ALL
    location: str = ALL
    bedrooms: Count | Literal["all"] = ALL
    bathrooms: Count | Literal["all"] = ALL
    structure: str = ALL
    furnished: FurnishedFilter = FurnishedFilter.ALL
    price_range: tuple[int, int] = (0, DEFAULT_MAX_PRICE)

    @field_validator("type", "location", "structure", mode="before")
    @classmethod
    def blank_identifier_is_all(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip() or ALL
        return v

    @property
    def min_price(self) -> int:
        return self.price_range[0]

    @property
    def max_price(self) -> int:
        return self.price_range[1]


class SearchRequest(FilterCriteria):
    """Criteria submitted from the search form; the price range must be ordered."""

    @model_validator(mode="after")
    def ordered_price_range(self) -> Self:
        if self.min_price > self.max_price:
            raise ValueError("price_range minimum exceeds maximum")
        return self


class SelectOption(BaseModel):
    """A ``{value, label}`` pair for a selection control."""

    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class SocialLinks(CmsModel):
    facebook: str | None = None
    instagram: str | None = None
    twitter: str | None = None
    linkedin: str | None = None
    tiktok: str | None = None
    whatsapp: str | None = None


class CompanyContact(CmsModel):
    """Company contact details used to route inquiries."""

    id: str | None = Field(default=None, alias="_id")
    company_name: str = Field(default="", alias="companyName")
    phone: str = ""
    email: str = ""
    address: str = ""
    description: str | None = None
    socials: SocialLinks | None = None

    @field_validator("company_name", "phone", "email", "address", mode="before")
    @classmethod
    def empty_string(cls, v: object) -> object:
        return "" if v is None else v


class Channel(str, Enum):
    """Contact channels offered for an inquiry."""

    WHATSAPP = "whatsapp"
    CALL = "call"
    EMAIL = "email"


class InquiryKind(str, Enum):
    """General (not property-specific) inquiry forms."""

    RENT = "rent"
    CUSTOM_REQUEST = "custom_request"  # couldn't find a matching listing
    CONTACT = "contact"
    MANAGEMENT = "management"


class InquiryRequest(BaseModel):
    """Body accepted by the inquiry endpoint.

    ``fields`` holds the form values for ``kind``; unknown names are ignored.
    """

    model_config = ConfigDict(populate_by_name=True)

    channel: Channel
    kind: InquiryKind
    fields: dict[str, str] = Field(default_factory=dict)
    from_name: str | None = Field(default=None, alias="fromName")
    from_email: str | None = Field(default=None, alias="fromEmail")


class InquiryPayload(BaseModel):
    """User-filled inquiry, rendered into a message in a fixed order.

    ``details`` are ``(label, value)`` pairs rendered as ``Label: value`` lines,
    joined by ``detail_separator``.
    """

    model_config = ConfigDict(frozen=True)

    subject: str
    intro: str
    details: tuple[tuple[str, str], ...] = ()
    detail_separator: str = "\n"
    closing: str = ""
    from_name: str | None = None
    from_email: str | None = None


class SendResult(BaseModel):
    """Outcome of an email send."""

    success: bool
    message_id: str | None = None
    error: str | None = None
    details: Any = None


class SendEmailRequest(BaseModel):
    """Body accepted by the email-send endpoint.

    Required fields are optional here so that absence maps to a 400 outcome
    rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    to: str | None = None
    subject: str | None = None
    message: str | None = None
    from_email: str | None = Field(default=None, alias="fromEmail")
    from_name: str | None = Field(default=None, alias="fromName")

    @property
    def missing_required(self) -> bool:
        return not (self.to and self.subject and self.message)
