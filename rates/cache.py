"""
Exchange-rate cache: one snapshot per base currency, refreshed after a TTL.

A RateCache is built once per process and handed to whoever needs
conversions. The cache map is a plain dict overwritten per base currency;
concurrent callers may read a snapshot from just before or just after a
refresh, and both are valid.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from config.loader import section
from fin_core.models import RateSnapshot
from rates.client import DEFAULT_BASE_URL, Clock, HTTPRateClient, utc_now

LOGGER = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=30)

Fetcher = Callable[[str], RateSnapshot]


def fallback_snapshot(base_currency: str, now: datetime) -> RateSnapshot:
    """Hardcoded rates used when no fetched snapshot is available."""
    base = base_currency.upper()
    rates = {
        "PKR": 1.0 if base == "PKR" else 280.0,
        "USD": 1.0 if base == "USD" else 0.0036,
        "EUR": 0.85,
        "GBP": 0.73,
        "JPY": 110.0,
    }
    rates.setdefault(base, 1.0)
    return RateSnapshot(
        base_currency=base,
        as_of=now.date(),
        rates=rates,
        fetched_at=None,
    )


class RateCache:
    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        *,
        ttl: timedelta = DEFAULT_TTL,
        clock: Optional[Clock] = None,
    ):
        self.clock = clock or utc_now
        self.fetcher = fetcher or HTTPRateClient(clock=self.clock)
        self.ttl = ttl
        self._snapshots: Dict[str, RateSnapshot] = {}

    def get_rates(self, base_currency: str) -> RateSnapshot:
        """
        Fresh cached snapshot if younger than the TTL; otherwise fetch and
        cache. On a failed fetch the stale snapshot is reused if there is one,
        else the hardcoded fallback is returned (and not cached).
        """
        base = base_currency.upper()
        now = self.clock()
        cached = self._snapshots.get(base)
        if cached is not None and cached.age(now) < self.ttl:
            return cached

        try:
            snapshot = self.fetcher(base)
        except Exception as e:
            LOGGER.warning("Failed to fetch exchange rates for %s: %s", base, e)
            if cached is not None:
                return cached
            return fallback_snapshot(base, now)

        if snapshot.fetched_at is None:
            snapshot.fetched_at = now
        self._snapshots[base] = snapshot
        return snapshot

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Best effort: an unknown target rate leaves the amount unchanged."""
        if from_currency.upper() == to_currency.upper():
            return amount
        rate = self.get_rates(from_currency).rate_for(to_currency)
        if not rate:
            return amount
        return amount * rate

    def clear(self) -> None:
        self._snapshots.clear()

    def cached_bases(self) -> List[str]:
        return sorted(self._snapshots)


def build_rate_cache(cfg=None, *, session=None, clock: Optional[Clock] = None) -> RateCache:
    r = section(cfg, "rates")
    clock = clock or utc_now
    client = HTTPRateClient(
        r.get("base_url", DEFAULT_BASE_URL),
        session=session,
        timeout=float(r.get("timeout_seconds", 10)),
        clock=clock,
    )
    ttl = timedelta(minutes=float(r.get("ttl_minutes", 30)))
    return RateCache(client, ttl=ttl, clock=clock)
