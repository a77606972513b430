# ytt/transcripts/http_client.py
"""
Page/session client for YouTube endpoints.

Responsibility:
- Issue GET/POST requests that look enough like a browser to avoid trivial blocking
- Carry the consent cookie that bypasses the EU cookie-consent interstitial
- Sleep a configured delay before every request
- Translate HTTP outcomes into the typed error taxonomy

One attempt per call. Retries belong to the caller.
Not designed for overlapping requests from concurrent callers.
"""

from __future__ import annotations

import asyncio
import json
import logging
from http.cookiejar import CookieJar
from typing import Any, Dict, Optional

import httpx

from ytt.logging_core.logger import log_event
from ytt.transcripts.errors import (
    FailedToCreateConsentCookie,
    HttpError,
    IpBlocked,
    JsonParseError,
    RequestBlocked,
)
from ytt.transcripts.schema import DEFAULT_DELAY_MS, DEFAULT_TIMEOUT_SECONDS


CONSENT_COOKIE_NAME = "CONSENT"
CONSENT_COOKIE_VALUE = "YES+cb"
CONSENT_COOKIE_DOMAIN = ".youtube.com"

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}

RECAPTCHA_MARKER = 'class="g-recaptcha"'
SORRY_PAGE_MARKER = "google.com/sorry/"


class PageClient:
    """
    Thin async wrapper around httpx.AsyncClient.

    An injected http_client is used as-is and left open on aclose();
    a client created here is owned and closed here.
    """

    def __init__(
        self,
        logger: logging.Logger,
        delay_ms: int = DEFAULT_DELAY_MS,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")

        self._logger = logger
        self._delay_seconds = delay_ms / 1000
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            headers=DEFAULT_HEADERS,
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )
        self.set_consent_cookie(CONSENT_COOKIE_VALUE)

    @property
    def delay_ms(self) -> int:
        return int(self._delay_seconds * 1000)

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    def set_consent_cookie(self, value: str, *, video_id: str = "") -> None:
        """Attach (or replace) the consent cookie for every youtube.com request."""
        try:
            self._client.cookies.set(CONSENT_COOKIE_NAME, value, domain=CONSENT_COOKIE_DOMAIN)
        except (TypeError, ValueError) as exc:
            raise FailedToCreateConsentCookie(video_id or value) from exc

        jar: CookieJar = self._client.cookies.jar
        if not any(c.name == CONSENT_COOKIE_NAME and c.value == value for c in jar):
            raise FailedToCreateConsentCookie(video_id or value)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "PageClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def get_text(self, url: str, *, video_id: str, params: Optional[Dict[str, str]] = None) -> str:
        """GET `url` and return the body text of a successful response."""
        response = await self._send("GET", url, video_id=video_id, params=params)
        return response.text

    async def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        *,
        video_id: str,
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """POST a JSON payload and return the decoded JSON object."""
        response = await self._send("POST", url, video_id=video_id, params=params, json_body=payload)
        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            raise JsonParseError(f"{url}: {exc}") from exc
        if not isinstance(data, dict):
            raise JsonParseError(f"{url}: expected a JSON object, got {type(data).__name__}")
        return data

    async def _send(
        self,
        method: str,
        url: str,
        *,
        video_id: str,
        params: Optional[Dict[str, str]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)

        log_event(
            self._logger,
            logging.DEBUG,
            "Sending request",
            stage_name="http_client",
            event_type="start",
            metadata={"method": method, "url": url, "video_id": video_id},
        )

        try:
            response = await self._client.request(method, url, params=params, json=json_body)
        except httpx.HTTPError as exc:
            log_event(
                self._logger,
                logging.WARNING,
                "Transport failure",
                stage_name="http_client",
                event_type="failure",
                metadata={"method": method, "url": url, "error": str(exc)},
            )
            raise HttpError(f"{method} {url}: {exc}") from exc

        self._raise_for_status(response, video_id)

        log_event(
            self._logger,
            logging.DEBUG,
            "Request succeeded",
            stage_name="http_client",
            event_type="success",
            metadata={"method": method, "url": url, "status_code": response.status_code},
        )
        return response

    def _raise_for_status(self, response: httpx.Response, video_id: str) -> None:
        status = response.status_code
        if status == 429 or SORRY_PAGE_MARKER in str(response.url):
            self._log_blocked(response, "rate_limited")
            raise IpBlocked(video_id)
        if status == 403:
            self._log_blocked(response, "forbidden")
            raise RequestBlocked(video_id)
        if not response.is_success:
            raise HttpError(f"{response.request.method} {response.url} returned HTTP {status}", status_code=status)
        if RECAPTCHA_MARKER in response.text:
            self._log_blocked(response, "recaptcha")
            raise IpBlocked(video_id)

    def _log_blocked(self, response: httpx.Response, cause: str) -> None:
        log_event(
            self._logger,
            logging.WARNING,
            "Request blocked by YouTube",
            stage_name="http_client",
            event_type="failure",
            metadata={"cause": cause, "status_code": response.status_code, "url": str(response.url)},
        )
