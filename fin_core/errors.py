from __future__ import annotations


class FinSignalError(Exception):
    """Base error for the signal extraction engine."""


class ConfigError(FinSignalError):
    """config.toml missing or unreadable."""


class RateFetchError(FinSignalError):
    """Exchange-rate endpoint unreachable or returned an unexpected shape."""


class OCRError(FinSignalError):
    """Text-recognition request failed, was rejected or timed out."""
