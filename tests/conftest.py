import hashlib
import hmac
from unittest.mock import MagicMock

import pytest
import requests

from utils.config_manager import VenueConfig

FIXED_MS = 1700000000000
FIXED_CLOCK = lambda: FIXED_MS / 1000  # noqa: E731


def make_response(status: int, body: str) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body.encode()
    resp.encoding = "utf-8"
    return resp


def manual_hmac(secret: str, payload: str) -> str:
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def venue_config():
    return VenueConfig(url="https://mock.exchange", api_key="test_api_key", api_secret="test_secret_key")
