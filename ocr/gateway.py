"""
Remote text recognition over a submit-then-poll protocol.

  POST <endpoint>/vision/v3.2/read/analyze   (image bytes)
    -> 202, header Operation-Location: <result url>
  GET <result url>   every poll_interval seconds, up to max_attempts times
    -> {"status": "running" | "succeeded" | "failed", "analyzeResult": ...}

extract_text always returns usable text: missing credentials, HTTP or
network errors, a failed analysis and polling timeouts all yield one of the
canned fallback receipts instead. The poll loop blocks; callers keep it off
interactive paths and may simply ignore a result they no longer want.
"""
from __future__ import annotations

import logging
import os
import random
import time
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests

from config.loader import section
from fin_core.errors import OCRError
from ocr.samples import fallback_receipt

LOGGER = logging.getLogger(__name__)

ANALYZE_PATH = "vision/v3.2/read/analyze"
ENDPOINT_ENV = "AZURE_VISION_ENDPOINT"
API_KEY_ENV = "AZURE_VISION_API_KEY"
KEY_HEADER = "Ocp-Apim-Subscription-Key"


def lines_from_result(result: Mapping[str, Any]) -> List[str]:
    """
    Recognized lines in reading order (page by page, top to bottom).
    A result that does not have the readResults/lines shape raises OCRError.
    """
    analyze = result.get("analyzeResult") or {}
    if not isinstance(analyze, Mapping):
        raise OCRError("analyzeResult is not an object")
    pages = analyze.get("readResults") or []
    if not isinstance(pages, list):
        raise OCRError("readResults is not a list")

    lines: List[str] = []
    for page in pages:
        if not isinstance(page, Mapping) or not isinstance(page.get("lines") or [], list):
            raise OCRError("unexpected page shape in readResults")
        for line in page.get("lines") or []:
            if not isinstance(line, Mapping):
                raise OCRError("unexpected line shape in readResults")
            text = line.get("text")
            if isinstance(text, str) and text:
                lines.append(text)
    return lines


class OCRGateway:
    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        *,
        session: Optional[requests.Session] = None,
        poll_interval: float = 1.0,
        max_attempts: int = 10,
        request_timeout: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.endpoint = endpoint or None
        self.api_key = api_key or None
        self.session = session or requests.Session()
        self.poll_interval = float(poll_interval)
        self.max_attempts = int(max_attempts)
        self.request_timeout = float(request_timeout)
        self.sleep = sleep
        self.rng = rng

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        cfg: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> "OCRGateway":
        env = os.environ if environ is None else environ
        o = section(cfg, "ocr")
        kwargs.setdefault("poll_interval", float(o.get("poll_interval_seconds", 1.0)))
        kwargs.setdefault("max_attempts", int(o.get("max_attempts", 10)))
        kwargs.setdefault(
            "request_timeout", float(o.get("request_timeout_seconds", 30))
        )
        return cls(
            env.get(o.get("endpoint_env", ENDPOINT_ENV)),
            env.get(o.get("api_key_env", API_KEY_ENV)),
            **kwargs,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.endpoint and self.api_key)

    @property
    def analyze_url(self) -> str:
        return f"{(self.endpoint or '').rstrip('/')}/{ANALYZE_PATH}"

    def fallback_text(self) -> str:
        return fallback_receipt(self.rng)

    def extract_text(self, image_bytes: bytes) -> str:
        if not self.has_credentials:
            LOGGER.info("OCR credentials not configured; using a sample receipt.")
            return self.fallback_text()

        try:
            text = self._recognize(image_bytes)
        except OCRError as e:
            LOGGER.warning("OCR failed (%s); using a sample receipt.", e)
            return self.fallback_text()

        LOGGER.debug("OCR extracted %d characters", len(text))
        return text

    # --------- protocol ---------

    def _recognize(self, image_bytes: bytes) -> str:
        location = self._submit(image_bytes)
        result = self._poll(location)
        return "\n".join(lines_from_result(result)).strip()

    def _submit(self, image_bytes: bytes) -> str:
        headers = {
            "Content-Type": "application/octet-stream",
            KEY_HEADER: self.api_key,
        }
        try:
            r = self.session.post(
                self.analyze_url,
                headers=headers,
                data=image_bytes,
                timeout=self.request_timeout,
            )
        except requests.RequestException as e:
            raise OCRError(f"submit failed: {e}") from e
        if not r.ok:
            raise OCRError(f"submit rejected: {r.status_code} {r.reason}")

        location = r.headers.get("Operation-Location")
        if not location:
            raise OCRError("no Operation-Location in response")
        return location

    def _poll(self, location: str) -> Mapping[str, Any]:
        headers = {KEY_HEADER: self.api_key}
        for attempt in range(1, self.max_attempts + 1):
            self.sleep(self.poll_interval)
            try:
                r = self.session.get(
                    location, headers=headers, timeout=self.request_timeout
                )
            except requests.RequestException as e:
                raise OCRError(f"poll failed: {e}") from e
            if not r.ok:
                raise OCRError(f"poll rejected: {r.status_code}")
            try:
                result = r.json()
            except ValueError as e:
                raise OCRError("poll response is not JSON") from e
            if not isinstance(result, Mapping):
                raise OCRError("poll response is not an object")

            status = result.get("status")
            if status == "succeeded":
                return result
            if status == "failed":
                raise OCRError("analysis failed")
            LOGGER.debug("OCR status %r after attempt %d", status, attempt)

        raise OCRError(f"timed out after {self.max_attempts} polls")


def build_gateway(cfg=None, environ: Optional[Mapping[str, str]] = None) -> OCRGateway:
    return OCRGateway.from_env(environ, cfg)
