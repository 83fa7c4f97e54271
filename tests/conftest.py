import pytest
from django.core.cache import caches

from rest_framework.test import APIClient

from modules.orders.stores import ADMISSION_CACHE_ALIAS, DUPLICATE_CACHE_ALIAS


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_intake_caches():
    """Admission counters and fingerprints must not leak between tests."""
    caches[ADMISSION_CACHE_ALIAS].clear()
    caches[DUPLICATE_CACHE_ALIAS].clear()
    yield
    caches[ADMISSION_CACHE_ALIAS].clear()
    caches[DUPLICATE_CACHE_ALIAS].clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def order_payload():
    """A valid storefront submission, as posted by the watch landing page."""
    return {
        "full_name": "Ada Obi",
        "phone": "08012345678",
        "email": "ada@example.com",
        "state": "Lagos",
        "address": "12 Admiralty Way, Lekki Phase 1",
        "product_name": "MEGIR Chronograph Watch",
        "color": "Navy Blue",
        "quantity": 1,
        "price": 57000,
        "total_price": 57000,
    }
