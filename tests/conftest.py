"""Shared fixtures: configs and a fake urlopen."""
from urllib.parse import parse_qs, urlsplit

import pytest

from core.config import ApiConfig
from tests.helpers import FakeResponse


@pytest.fixture
def mock_config():
    return ApiConfig()


@pytest.fixture
def live_config():
    return ApiConfig(service_key="test-key", use_live=True, timeout=3.0)


@pytest.fixture
def fake_urlopen(monkeypatch):
    """Patch core.http.urlopen; queue payloads, inspect recorded requests.

    Each recorded request is (path, {param: value}, timeout).
    """
    state = {"payloads": [], "requests": []}

    def _urlopen(req, timeout=None):
        parts = urlsplit(req.full_url)
        params = {k: v[0] for k, v in parse_qs(parts.query).items()}
        state["requests"].append((parts.path, params, timeout))
        payload = state["payloads"].pop(0)
        if isinstance(payload, Exception):
            raise payload
        return FakeResponse(payload)

    monkeypatch.setattr("core.http.urlopen", _urlopen)
    return state
