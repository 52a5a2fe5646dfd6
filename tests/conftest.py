# tests/conftest.py
import json
import pytest
from unittest.mock import patch
from django.core.cache import cache

from billing.models import Variant
from billing.services import CancellationService
from users.mock import get_mock_user


@pytest.fixture(autouse=True)
def no_ratelimit(settings):
    """Rate limiting is switched on only by the tests that exercise it."""
    settings.RATELIMIT_ENABLE = False
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def mock_user(db):
    return get_mock_user()


@pytest.fixture
def subscription(mock_user):
    return mock_user.subscription


@pytest.fixture
def force_variant():
    """Pins the next drawn variant: ``force_variant('B')``."""
    patchers = []

    def _force(variant):
        p = patch.object(CancellationService, 'draw_variant', return_value=Variant(variant))
        patchers.append(p)
        return p.start()

    yield _force
    for p in reversed(patchers):
        p.stop()


@pytest.fixture
def post_api(client):
    def _post(payload, raw=None):
        body = raw if raw is not None else json.dumps(payload)
        return client.post('/api/cancel/', data=body, content_type='application/json')
    return _post
