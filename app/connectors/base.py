"""
app/connectors/base.py

Base connector abstraction and shared HTTP mechanics.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from app.config import TrackerHTTPSettings

logger = logging.getLogger(__name__)


class TrackerConnectorError(RuntimeError):
    """
    Base class for failures reaching or reading the task tracker.
    """


class TransportError(TrackerConnectorError):
    """
    Raised on network failure, timeout, or a non-2xx response.
    """


class DecodeError(TrackerConnectorError):
    """
    Raised when a response body is not JSON or has an unexpected shape.
    """


class BaseConnector:
    """
    Authenticated JSON-over-HTTP access with client-side rate limiting.

    Requests are never retried: a failed call is terminal for the caller, so
    a partially fetched window is never mistaken for a complete one.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        http_settings: TrackerHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._token = http_settings.token
        self._timeout_seconds = http_settings.timeout_seconds
        self._min_request_interval_seconds = (
            1.0 / http_settings.rate_limit_per_second if http_settings.rate_limit_per_second > 0 else 0.0
        )
        self._last_request_monotonic: float = 0.0

    def _auth_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = self._token
        return headers

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        params: Any = None,
    ) -> Any:
        """
        Execute an HTTP request and return the parsed JSON body.
        """

        response = self._request(method=method, url=url, params=params)
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"{self.source}: response was not valid JSON url={url}.") from exc

    def _request(
        self,
        *,
        method: str,
        url: str,
        params: Any = None,
    ) -> requests.Response:
        """
        Execute one rate-limited HTTP request.
        """

        self._apply_rate_limit()
        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                headers=self._auth_headers(),
                timeout=self._timeout_seconds,
            )
        except requests.Timeout as exc:
            logger.error("Connector request timed out source=%s url=%s", self.source, url)
            raise TransportError(f"{self.source}: request timed out url={url}.") from exc
        except requests.RequestException as exc:
            logger.error(
                "Connector request failed source=%s url=%s error=%s",
                self.source,
                url,
                exc,
            )
            raise TransportError(f"{self.source}: request failed url={url}.") from exc

        if not 200 <= response.status_code < 300:
            logger.error(
                "Connector request rejected source=%s status=%s url=%s",
                self.source,
                response.status_code,
                url,
            )
            raise TransportError(
                f"{self.source}: request failed with status {response.status_code} url={url}."
            )
        return response

    def _apply_rate_limit(self) -> None:
        """
        Enforce minimum interval between outbound requests.
        """

        if self._min_request_interval_seconds <= 0:
            return

        now = time.monotonic()
        elapsed = now - self._last_request_monotonic
        remaining = self._min_request_interval_seconds - elapsed
        if remaining > 0:
            time.sleep(remaining)
        self._last_request_monotonic = time.monotonic()
