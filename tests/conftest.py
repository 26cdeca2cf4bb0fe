import random
from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from ocr.samples import MCDONALDS, SHELL, STARBUCKS, TARGET, WALMART

FIXED_TODAY = date(2024, 3, 1)


class FakeClock:
    """Settable UTC clock for cache TTL tests."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


def make_response(status_code=200, payload=None, headers=None, json_error=False):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.reason = "OK" if resp.ok else "Error"
    resp.headers = headers or {}
    if json_error:
        resp.json.side_effect = ValueError("not json")
    else:
        resp.json.return_value = payload
    return resp


@pytest.fixture
def today():
    return lambda: FIXED_TODAY


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def starbucks_text():
    return STARBUCKS


@pytest.fixture
def sample_receipts():
    return {
        "starbucks": STARBUCKS,
        "walmart": WALMART,
        "shell": SHELL,
        "target": TARGET,
        "mcdonalds": MCDONALDS,
    }


@pytest.fixture
def seeded_rng():
    return random.Random(1234)


@pytest.fixture
def sample_receipt_txt(tmp_path):
    p = tmp_path / "starbucks.txt"
    p.write_text(STARBUCKS, encoding="utf-8")
    return p


@pytest.fixture
def http_response():
    return make_response
