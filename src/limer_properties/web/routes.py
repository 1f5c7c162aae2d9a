"""HTTP routes: listings, filter options, company info, inquiries and the email-send endpoint."""

from typing import Any, Final

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from limer_properties.cms.images import image_url
from limer_properties.cms.repository import (
    ContentRepository,
    load_company_info,
    load_filter_entities,
    load_listing,
)
from limer_properties.config import Settings
from limer_properties.exceptions import ContentStoreError, EmailDeliveryError
from limer_properties.filters.criteria import CriteriaFilter
from limer_properties.filters.options import build_filter_options
from limer_properties.filters.query import serialize_criteria, to_query_string
from limer_properties.inquiry.dispatcher import DispatchResult, DispatchStatus, InquiryDispatcher
from limer_properties.inquiry.messages import (
    PropertyMessageKind,
    build_inquiry,
    compose_message,
    mailto_link,
    property_inquiry,
    tel_link,
    whatsapp_link,
)
from limer_properties.logging import get_logger
from limer_properties.mailer.resend import ResendEmailSender
from limer_properties.models import (
    CompanyContact,
    InquiryRequest,
    PropertyRecord,
    SearchRequest,
    SendEmailRequest,
)
from limer_properties.utils.formatting import format_price
from limer_properties.web.filters import CriteriaDep, active_filter_chips

logger = get_logger(__name__)

router = APIRouter()

MISSING_FIELDS_ERROR = "Missing required fields: to, subject, message"


def _get_repository(request: Request) -> ContentRepository:
    return request.app.state.repository  # type: ignore[no-any-return]


def _get_email_sender(request: Request) -> ResendEmailSender:
    return request.app.state.email_sender  # type: ignore[no-any-return]


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def _get_http_client(request: Request) -> httpx.AsyncClient | None:
    return getattr(request.app.state, "http_client", None)


def _first_image_url(prop: PropertyRecord, settings: Settings) -> str | None:
    if not prop.images:
        return None
    return image_url(
        prop.images[0], project_id=settings.sanity_project_id, dataset=settings.sanity_dataset
    )


def _property_json(prop: PropertyRecord, settings: Settings) -> dict[str, Any]:
    data = prop.model_dump(mode="json")
    data["priceDisplay"] = format_price(prop.price)
    data["locationText"] = prop.location_text
    data["detailsUrl"] = settings.property_details_url(prop.slug)
    data["imageUrl"] = _first_image_url(prop, settings)
    return data


@router.get("/health")
async def health_check() -> JSONResponse:
    return JSONResponse({"status": "ok"})


@router.get("/api/properties")
async def list_properties(request: Request, criteria: CriteriaDep) -> JSONResponse:
    """Filtered listing. Content-store failures degrade to an empty list."""
    listing = await load_listing(_get_repository(request))
    options = build_filter_options(listing.filters.data)
    matching = CriteriaFilter(criteria).filter_properties(listing.properties.data)
    settings = _get_settings(request)

    return JSONResponse(
        {
            "properties": [_property_json(p, settings) for p in matching],
            "count": len(matching),
            "total": len(listing.properties.data),
            "criteria": criteria.model_dump(mode="json"),
            "query": serialize_criteria(criteria),
            "queryString": to_query_string(criteria),
            "chips": active_filter_chips(criteria, options),
            "error": listing.failed,
        }
    )


@router.post("/api/search")
async def submit_search(criteria: SearchRequest) -> JSONResponse:
    """Explicit search submission: return the shareable listing URL."""
    query_string = to_query_string(criteria)
    return JSONResponse(
        {
            "url": f"/properties?{query_string}",
            "query": serialize_criteria(criteria),
        }
    )


@router.get("/api/properties/{slug}")
async def property_detail(request: Request, slug: str) -> JSONResponse:
    repo = _get_repository(request)
    try:
        prop = await repo.fetch_property(slug)
    except ContentStoreError:
        logger.error("detail_query_failed", slug=slug, exc_info=True)
        return JSONResponse(
            {"error": "Failed to load property details. Please try again."}, status_code=500
        )

    if prop is None:
        return JSONResponse({"error": "Property not found."}, status_code=404)
    return JSONResponse(_property_json(prop, _get_settings(request)))


@router.get("/api/properties/{slug}/contact-links")
async def property_contact_links(request: Request, slug: str) -> JSONResponse:
    """Deep links for contacting the company about one property."""
    repo = _get_repository(request)
    settings = _get_settings(request)
    try:
        prop = await repo.fetch_property(slug)
    except ContentStoreError:
        logger.error("detail_query_failed", slug=slug, exc_info=True)
        return JSONResponse(
            {"error": "Failed to load property details. Please try again."}, status_code=500
        )
    if prop is None:
        return JSONResponse({"error": "Property not found."}, status_code=404)

    company = (await load_company_info(repo)).data
    company_name = (company.company_name if company else "") or settings.company_name
    picture = _first_image_url(prop, settings)
    links: dict[str, Any] = {"call": None, "email": None, "whatsapp": {}}

    for kind in PropertyMessageKind:
        payload = property_inquiry(
            kind,
            company_name=company_name,
            title=prop.title,
            property_id=prop.id,
            details_url=settings.property_details_url(prop.slug),
            image_url=picture,
        )
        if company and company.phone:
            links["whatsapp"][kind.value] = whatsapp_link(company.phone, compose_message(payload))
        if company and company.email and kind is PropertyMessageKind.QUESTION:
            links["email"] = mailto_link(company.email, payload.subject, compose_message(payload))

    if company and company.phone:
        links["call"] = tel_link(company.phone)
    return JSONResponse(links)


@router.get("/api/filters")
async def filter_options(request: Request) -> JSONResponse:
    state = await load_filter_entities(_get_repository(request))
    options = build_filter_options(state.data)
    return JSONResponse({**options.model_dump(mode="json"), "error": state.failed})


@router.get("/api/company")
async def company_info(request: Request) -> JSONResponse:
    state = await load_company_info(_get_repository(request))
    company = state.data.model_dump(mode="json") if state.data else None
    return JSONResponse({"company": company, "error": state.failed})


_DISPATCH_STATUS_CODES: Final = {
    DispatchStatus.OPENED: 200,
    DispatchStatus.SENT: 200,
    DispatchStatus.INVALID: 400,
    DispatchStatus.SKIPPED: 409,
    DispatchStatus.BUSY: 429,
    DispatchStatus.FAILED: 502,
}


def _dispatch_json(result: DispatchResult) -> dict[str, Any]:
    link = result.link
    return {
        "status": result.status.value,
        "link": {"url": link.url, "newWindow": link.new_window} if link else None,
        "messageId": result.send_result.message_id if result.send_result else None,
        "error": result.error,
    }


@router.post("/api/inquiries")
async def submit_inquiry(request: Request, body: InquiryRequest) -> JSONResponse:
    """Route a general inquiry (rent, custom request, contact, management).

    ``call`` and ``whatsapp`` return the deep link to open; ``email`` is sent
    through the configured email endpoint, or returned as a ``mailto:`` link
    when none is configured.
    """
    settings = _get_settings(request)
    state = await load_company_info(_get_repository(request))
    if state.failed:
        return JSONResponse(
            {"error": "Contact details are unavailable. Please try again."}, status_code=503
        )
    contact = state.data or CompanyContact()

    payload = build_inquiry(
        body.kind,
        body.fields,
        company_name=contact.company_name or settings.company_name,
        from_name=body.from_name,
        from_email=body.from_email,
    )
    dispatcher = InquiryDispatcher.from_settings(settings, client=_get_http_client(request))
    result = await dispatcher.dispatch(body.channel, contact, payload)

    logger.info(
        "inquiry_dispatched",
        kind=body.kind.value,
        channel=body.channel.value,
        status=result.status.value,
    )
    return JSONResponse(_dispatch_json(result), status_code=_DISPATCH_STATUS_CODES[result.status])


@router.post("/api/send-email")
async def send_email(request: Request) -> JSONResponse:
    """Validate an inquiry email and forward it to the delivery provider.

    An unreadable body is a 500; a body without usable ``to``/``subject``/
    ``message`` strings is a 400.
    """
    try:
        data = await request.json()
    except ValueError:
        logger.error("email_api_error", exc_info=True)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    if not isinstance(data, dict):
        return JSONResponse({"error": MISSING_FIELDS_ERROR}, status_code=400)
    try:
        body = SendEmailRequest.model_validate(data)
    except ValidationError as e:
        logger.info("email_request_invalid", errors=e.error_count())
        return JSONResponse({"error": MISSING_FIELDS_ERROR}, status_code=400)

    if body.missing_required:
        return JSONResponse({"error": MISSING_FIELDS_ERROR}, status_code=400)

    sender = _get_email_sender(request)
    try:
        message_id = await sender.send(
            to=body.to or "",
            subject=body.subject or "",
            message=body.message or "",
            from_email=body.from_email,
            from_name=body.from_name,
        )
    except EmailDeliveryError as e:
        logger.error("email_send_failed", error=str(e), details=e.details)
        return JSONResponse(
            {"error": "Failed to send email", "details": e.details}, status_code=500
        )

    return JSONResponse({"success": True, "messageId": message_id}, status_code=200)
