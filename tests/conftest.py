"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from kissanapp import create_app
from kissanapp.node import SensorNodeClient
from kissanapp.state import IrrigationState

# ============================================================================
# State and App
# ============================================================================


@pytest.fixture
def state() -> IrrigationState:
    """Fresh state record with defaults."""
    return IrrigationState()


@pytest.fixture
def app(state):
    """Flask app serving the fixture state."""
    return create_app(state=state, test_config={"TESTING": True})


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 1, 12, 30, tzinfo=timezone.utc)


# ============================================================================
# Node Client
# ============================================================================


@pytest.fixture
def make_response():
    """Factory for fake requests.Response objects."""

    def _make(status_code=200, payload=None):
        response = MagicMock()
        response.status_code = status_code
        if isinstance(payload, Exception):
            response.json.side_effect = payload
        else:
            response.json.return_value = payload
        return response

    return _make


@pytest.fixture
def node_client() -> SensorNodeClient:
    """Node client with its HTTP session replaced by a mock."""
    client = SensorNodeClient("http://backend.local:5000/", timeout=1.0, threshold=30.0)
    client.session = MagicMock()
    return client
