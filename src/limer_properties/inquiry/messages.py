"""Inquiry message composition and outbound deep links."""

import re
from collections.abc import Mapping
from enum import Enum
from typing import Final
from urllib.parse import quote

from limer_properties.models import InquiryKind, InquiryPayload

WHATSAPP_BASE_URL: Final = "https://wa.me"

# Same unescaped set as JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE: Final = "-_.!~*'()"

_MATCH_CLOSING: Final = (
    "Please let me know if you have anything that matches my criteria.\n\nThank you!"
)


def encode_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def compose_message(payload: InquiryPayload) -> str:
    """Render a payload as plain text: intro, ``Label: value`` lines, closing.

    Sections are separated by a blank line; detail lines by the payload's
    ``detail_separator``.
    """
    sections = [payload.intro]
    if payload.details:
        lines = (f"{label}: {value}" for label, value in payload.details)
        sections.append(payload.detail_separator.join(lines))
    if payload.closing:
        sections.append(payload.closing)
    return "\n\n".join(s for s in sections if s)


def tel_link(phone: str) -> str:
    return "tel:" + re.sub(r"\s+", "", phone)


def whatsapp_link(phone: str, message: str) -> str:
    """WhatsApp click-to-chat URL; the number keeps digits only."""
    digits = re.sub(r"\D", "", phone)
    return f"{WHATSAPP_BASE_URL}/{digits}?text={encode_component(message)}"


def mailto_link(email: str, subject: str, body: str) -> str:
    return f"mailto:{email}?subject={encode_component(subject)}&body={encode_component(body)}"


# ---------------------------------------------------------------------------
# Requirement forms
# ---------------------------------------------------------------------------


def _or_any(value: str, placeholder: str = "Any") -> str:
    return value.strip() or placeholder


def rent_inquiry(
    *,
    location: str = "",
    bedrooms: str = "",
    bathrooms: str = "",
    budget: str = "",
    structure: str = "",
    from_name: str | None = None,
    from_email: str | None = None,
) -> InquiryPayload:
    """Requirements for a property to rent."""
    return InquiryPayload(
        subject="Property Rental Inquiry",
        intro="Hello! I'm looking for a property to rent.",
        details=(
            ("Location", _or_any(location)),
            ("Bedrooms", _or_any(bedrooms)),
            ("Bathrooms", _or_any(bathrooms)),
            ("Maximum Budget", _or_any(budget, "Any budget")),
            ("House Structure", _or_any(structure)),
        ),
        closing=_MATCH_CLOSING,
        from_name=from_name,
        from_email=from_email,
    )


def custom_request_inquiry(
    *,
    property_type: str = "",
    location: str = "",
    bedrooms: str = "",
    bathrooms: str = "",
    budget: str = "",
    from_name: str | None = None,
    from_email: str | None = None,
) -> InquiryPayload:
    """Requirements from a visitor who found no matching listing."""
    return InquiryPayload(
        subject="Property Inquiry - Couldn't Find What I'm Looking For",
        intro="Hello! I'm looking for a property and couldn't find what I need on your website.",
        details=(
            ("Property Type", _or_any(property_type)),
            ("Location", _or_any(location)),
            ("Bedrooms", _or_any(bedrooms)),
            ("Bathrooms", _or_any(bathrooms)),
            ("Budget", _or_any(budget, "Any budget")),
        ),
        closing=_MATCH_CLOSING,
        from_name=from_name,
        from_email=from_email,
    )


def contact_inquiry(
    *,
    company_name: str,
    from_name: str | None = None,
    from_email: str | None = None,
) -> InquiryPayload:
    """General get-in-touch message (about page)."""
    return InquiryPayload(
        subject=f"Inquiry - {company_name}",
        intro=f"Hello! I'd like to get in touch with {company_name}. "
        "Please provide more information.",
        closing="Thank you!",
        from_name=from_name,
        from_email=from_email,
    )


def management_inquiry(
    *,
    from_name: str | None = None,
    from_email: str | None = None,
) -> InquiryPayload:
    """Interest in the company's property management services."""
    return InquiryPayload(
        subject="Property Management Services Inquiry",
        intro="Hello! I'm interested in your property management services. "
        "Please provide more information.",
        from_name=from_name,
        from_email=from_email,
    )


_FORM_FIELDS: Final[dict[InquiryKind, tuple[str, ...]]] = {
    InquiryKind.RENT: ("location", "bedrooms", "bathrooms", "budget", "structure"),
    InquiryKind.CUSTOM_REQUEST: ("property_type", "location", "bedrooms", "bathrooms", "budget"),
    InquiryKind.CONTACT: (),
    InquiryKind.MANAGEMENT: (),
}


def build_inquiry(
    kind: InquiryKind,
    fields: Mapping[str, str],
    *,
    company_name: str,
    from_name: str | None = None,
    from_email: str | None = None,
) -> InquiryPayload:
    """Build the payload for a general inquiry form from its submitted values.

    Only the form's own field names are read; anything else in ``fields`` is
    ignored.
    """
    values = {name: fields[name] for name in _FORM_FIELDS[kind] if name in fields}
    sender = {"from_name": from_name, "from_email": from_email}

    if kind is InquiryKind.RENT:
        return rent_inquiry(**values, **sender)
    if kind is InquiryKind.CUSTOM_REQUEST:
        return custom_request_inquiry(**values, **sender)
    if kind is InquiryKind.CONTACT:
        return contact_inquiry(company_name=company_name, **sender)
    return management_inquiry(**sender)


# ---------------------------------------------------------------------------
# Single-property messages
# ---------------------------------------------------------------------------


class PropertyMessageKind(str, Enum):
    INTEREST = "interest"
    TOUR = "tour"
    QUESTION = "question"


_PROPERTY_TEMPLATES: Final[dict[PropertyMessageKind, tuple[str, str, str]]] = {
    PropertyMessageKind.INTEREST: (
        "Property Inquiry",
        "I'm interested in the property",
        "Could you please provide more details?",
    ),
    PropertyMessageKind.TOUR: (
        "Property Tour Request",
        "I would like to schedule a tour for the property",
        "Please let me know your available dates and times for a property viewing.",
    ),
    PropertyMessageKind.QUESTION: (
        "Property Question",
        "I have some questions about the property",
        "I would appreciate if you could provide more information about this property.",
    ),
}


def property_inquiry(
    kind: PropertyMessageKind,
    *,
    company_name: str,
    title: str,
    property_id: str,
    details_url: str | None = None,
    image_url: str | None = None,
) -> InquiryPayload:
    """Message about one listing, addressed to the company.

    The image link is only included for interest messages.
    """
    subject, lead, request = _PROPERTY_TEMPLATES[kind]
    details: list[tuple[str, str]] = [("Property ID", property_id)]
    if details_url:
        details.append(("View Details", details_url))
    if image_url and kind is PropertyMessageKind.INTEREST:
        details.append(("Property Image", image_url))

    return InquiryPayload(
        subject=f"{subject}: {title}",
        intro=f"Hello {company_name},\n\n{lead}: *{title}*",
        details=tuple(details),
        detail_separator="\n\n",
        closing=f"{request}\n\nThank you!",
    )
