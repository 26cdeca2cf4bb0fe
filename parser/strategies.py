from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Candidate(Generic[T]):
    """One strategy's answer for a field plus how strongly it vouches for it."""

    value: T
    strength: int


Strategy = Callable[..., Optional[Candidate]]


def first_candidate(
    strategies: Iterable[Tuple[str, Strategy]], *args: Any
) -> Tuple[Optional[str], Optional[Candidate]]:
    """
    Run named strategies in order; the first that yields a candidate wins.
    Returns (strategy_name, candidate) or (None, None).
    """
    for name, strategy in strategies:
        cand = strategy(*args)
        if cand is not None:
            return name, cand
    return None, None
