from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

import requests

from fin_core.errors import RateFetchError
from fin_core.models import RateSnapshot

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.exchangerate-api.com/v4/latest"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HTTPRateClient:
    """One GET per refresh: <base_url>/<BASE> -> {"base", "date", "rates"}."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        clock: Optional[Clock] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = float(timeout)
        self.clock = clock or utc_now

    def __call__(self, base_currency: str) -> RateSnapshot:
        return self.fetch(base_currency)

    def fetch(self, base_currency: str) -> RateSnapshot:
        url = f"{self.base_url}/{base_currency.upper()}"
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise RateFetchError(f"Rate request failed for {base_currency}: {e}") from e

        if not r.ok:
            raise RateFetchError(f"HTTP error {r.status_code} from {url}")

        try:
            payload = r.json()
        except ValueError as e:
            raise RateFetchError(f"Rate response from {url} is not JSON") from e

        snapshot = RateSnapshot.from_payload(payload, fetched_at=self.clock())
        LOGGER.debug(
            "Fetched %d rates for %s (as of %s)",
            len(snapshot.rates),
            snapshot.base_currency,
            snapshot.as_of,
        )
        return snapshot
