from __future__ import annotations
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Mapping, Optional, Tuple

from fin_core.errors import RateFetchError

UNKNOWN_MERCHANT = "Unknown Merchant"
OTHER = "Other"


@dataclass
class CategoryPrediction:
    category: str
    confidence: float = 0.0


@dataclass
class TransactionSignal:
    description: str
    amount: float  # negative = expense
    currency: str = "USD"
    date: Optional[date] = None

    @property
    def is_expense(self) -> bool:
        return self.amount < 0


@dataclass(frozen=True)
class ReceiptData:
    amount: float
    merchant: str
    date: str  # ISO "YYYY-MM-DD"
    category: str
    items: Tuple[str, ...] = ()
    confidence: int = 0
    raw_text: str = ""

    def as_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["items"] = list(self.items)
        return out


@dataclass
class RateSnapshot:
    base_currency: str
    as_of: date
    rates: Dict[str, float] = field(default_factory=dict)
    fetched_at: Optional[datetime] = None

    def rate_for(self, code: str) -> Optional[float]:
        return self.rates.get(code.upper())

    def age(self, now: datetime) -> timedelta:
        if self.fetched_at is None:
            return timedelta.max
        return now - self.fetched_at

    @classmethod
    def from_payload(
        cls, payload: Any, *, fetched_at: datetime
    ) -> "RateSnapshot":
        """
        Build a snapshot from the rate endpoint's JSON body:
          {"base": "USD", "date": "2024-01-31", "rates": {"EUR": 0.92, ...}}
        Any other shape is a fetch failure.
        """
        if not isinstance(payload, Mapping):
            raise RateFetchError(f"Unexpected payload type: {type(payload).__name__}")
        base = payload.get("base")
        raw_date = payload.get("date")
        rates = payload.get("rates")
        if not isinstance(base, str) or not base:
            raise RateFetchError("Payload is missing 'base'")
        if not isinstance(rates, Mapping):
            raise RateFetchError("Payload is missing 'rates'")
        try:
            as_of = date.fromisoformat(str(raw_date)[:10])
        except ValueError as e:
            raise RateFetchError(f"Bad rate date: {raw_date!r}") from e

        clean: Dict[str, float] = {}
        for code, value in rates.items():
            try:
                clean[str(code).upper()] = float(value)
            except (TypeError, ValueError) as e:
                raise RateFetchError(f"Bad rate for {code}: {value!r}") from e

        return cls(
            base_currency=base.upper(),
            as_of=as_of,
            rates=clean,
            fetched_at=fetched_at,
        )
