"""Shared pytest fixtures."""

import os
from collections.abc import Callable
from typing import Any

import pytest
from hypothesis import HealthCheck, settings

from limer_properties.config import Settings
from limer_properties.models import CompanyContact, PropertyRecord

# Hypothesis settings profiles for different environments
settings.register_profile("fast", max_examples=25)
settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "fast"))


@pytest.fixture(autouse=True)
def _isolate_settings_from_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent the local .env file from leaking into test Settings instances."""
    monkeypatch.setattr(
        Settings,
        "model_config",
        {**Settings.model_config, "env_file": None},
    )


def property_doc(**overrides: Any) -> dict[str, Any]:
    """A raw CMS property document as returned by the listings query."""
    doc: dict[str, Any] = {
        "_id": "prop-1",
        "_createdAt": "2025-03-01T09:00:00Z",
        "title": "3 Bedroom Duplex in Lekki",
        "slug": "3-bedroom-duplex-lekki",
        "propertyType": {"_id": "type-rent", "title": "House for Rent", "slug": "house-rent"},
        "status": "available",
        "location": {
            "_id": "loc-lekki",
            "name": "Lekki Phase 1",
            "slug": "lekki-phase-1",
            "city": {"_id": "city-lagos", "name": "Lagos", "slug": "lagos"},
            "state": {"_id": "state-lagos", "name": "Lagos State", "slug": "lagos-state"},
        },
        "structure": {"_id": "st-duplex", "title": "Duplex", "slug": "duplex"},
        "description": "A well-finished duplex close to the expressway.",
        "price": 6_500_000,
        "images": [{"asset": {"_ref": "image-abc-800x600-jpg"}, "alt": "Front view"}],
        "bedrooms": 3,
        "bathrooms": 4,
        "area": 320,
        "furnished": True,
        "features": ["Borehole", "24/7 Power"],
        "isFeatured": True,
        "publishedAt": "2025-03-02T10:00:00Z",
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def make_doc() -> Callable[..., dict[str, Any]]:
    """Factory for raw CMS property documents."""
    return property_doc


@pytest.fixture
def make_property() -> Callable[..., PropertyRecord]:
    """Factory building validated records from ``property_doc`` overrides."""

    def _make(**overrides: Any) -> PropertyRecord:
        return PropertyRecord.model_validate(property_doc(**overrides))

    return _make


@pytest.fixture
def sample_properties(make_property: Callable[..., PropertyRecord]) -> list[PropertyRecord]:
    """A small mixed catalogue: rent, sale, land and shortlet listings."""
    return [
        make_property(),
        make_property(
            _id="prop-2",
            slug="4-bedroom-bungalow-ikeja",
            title="4 Bedroom Bungalow for Sale",
            propertyType={"_id": "type-sale", "title": "House for Sale", "slug": "house-sale"},
            location={
                "_id": "loc-ikeja",
                "name": "Ikeja GRA",
                "slug": "ikeja-gra",
                "city": {"_id": "city-lagos", "name": "Lagos"},
                "state": {"_id": "state-lagos", "name": "Lagos State"},
            },
            structure={"_id": "st-bungalow", "title": "Bungalow", "slug": "bungalow"},
            price=85_000_000,
            bedrooms=4,
            bathrooms=4,
            furnished=False,
        ),
        make_property(
            _id="prop-3",
            slug="600sqm-plot-ibeju-lekki",
            title="600sqm Plot in Ibeju-Lekki",
            propertyType={"_id": "type-land", "title": "Land", "slug": "land"},
            location={
                "_id": "loc-ibeju",
                "name": "Ibeju-Lekki",
                "slug": "ibeju-lekki",
                "city": {"_id": "city-lagos", "name": "Lagos"},
                "state": {"_id": "state-lagos", "name": "Lagos State"},
            },
            structure=None,
            price=12_000_000,
            bedrooms=None,
            bathrooms=None,
            furnished=None,
            area=600,
        ),
        make_property(
            _id="prop-4",
            slug="2-bedroom-flat-wuse",
            title="2 Bedroom Serviced Flat",
            propertyType={"_id": "type-shortlet", "title": "Shortlet", "slug": "shortlet"},
            location={
                "_id": "loc-wuse",
                "name": "Wuse 2",
                "slug": "wuse-2",
                "city": {"_id": "city-abuja", "name": "Abuja"},
                "state": {"_id": "state-fct", "name": "FCT"},
            },
            structure={"_id": "st-flat", "title": "Flat", "slug": "flat"},
            price=150_000,
            bedrooms=2,
            bathrooms=2,
            furnished=True,
        ),
    ]


@pytest.fixture
def company() -> CompanyContact:
    return CompanyContact.model_validate(
        {
            "_id": "company",
            "companyName": "Limer Estate And Facility Management LTD",
            "phone": "+234 803 123 4567",
            "email": "hello@limer.example",
            "address": "12 Admiralty Way, Lekki",
        }
    )


@pytest.fixture
def settings_for_tests() -> Settings:
    return Settings(
        sanity_project_id="abc123",
        sanity_dataset="production",
        resend_api_key="re_test_key",
        site_base_url="https://limer.example",
    )
