"""Inquiry routing over WhatsApp, telephone and email."""

from limer_properties.inquiry.dispatcher import (
    DeepLink,
    DispatchResult,
    DispatchStatus,
    InquiryDispatcher,
)
from limer_properties.inquiry.messages import (
    PropertyMessageKind,
    build_inquiry,
    compose_message,
    contact_inquiry,
    custom_request_inquiry,
    mailto_link,
    management_inquiry,
    property_inquiry,
    rent_inquiry,
    tel_link,
    whatsapp_link,
)

__all__ = [
    "DeepLink",
    "DispatchResult",
    "DispatchStatus",
    "InquiryDispatcher",
    "PropertyMessageKind",
    "build_inquiry",
    "compose_message",
    "contact_inquiry",
    "custom_request_inquiry",
    "mailto_link",
    "management_inquiry",
    "property_inquiry",
    "rent_inquiry",
    "tel_link",
    "whatsapp_link",
]
