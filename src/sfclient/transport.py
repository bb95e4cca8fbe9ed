from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

import requests

_logger = logging.getLogger(__name__)

RETRY_STATUSES = (429, 500, 502, 503, 504)
RETRY_METHODS = ("GET", "HEAD", "PUT", "PATCH", "DELETE")


@dataclass
class RestRequest:
    """One HTTP call: ``resource`` is appended to the target base URL."""

    resource: Optional[str] = None
    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    request_format: str = "json"
    # Overrides the transport's base_url for this call only.
    base_url: Optional[str] = None

    def add_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def build_url(self, default_base: Optional[str]) -> str:
        base = self.base_url or default_base
        if not base:
            raise ValueError("No base URL set for request.")
        if not self.resource:
            return base
        return f"{base.rstrip('/')}/{self.resource.lstrip('/')}"


@dataclass
class RestResponse:
    """Outcome of a transport call.

    A call that could not complete has ``status_code`` None and the exception in
    ``error_exception``; it is not raised by the transport.
    """

    status_code: Optional[int]
    content: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    error_exception: Optional[BaseException] = None


class RequestsTransport:
    """Transport backed by a requests.Session.

    Idempotent methods are retried on connection errors and 429/5xx answers;
    POST is sent exactly once.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        retries: int = 3,
        backoff: float = 0.8,
    ) -> None:
        self.base_url = base_url
        self.session = session or requests.Session()
        self.timeout = timeout
        self.retries = max(1, retries)
        self.backoff = backoff

    def set_base_url(self, url: str) -> None:
        self.base_url = url

    def execute(self, request: RestRequest) -> RestResponse:
        url = request.build_url(self.base_url)
        headers = dict(request.headers)
        if request.request_format == "json":
            headers.setdefault("Accept", "application/json")
            if request.body is not None:
                headers.setdefault("Content-Type", "application/json")

        attempts = self.retries if request.method.upper() in RETRY_METHODS else 1

        for attempt in range(1, attempts + 1):
            try:
                r = self.session.request(
                    request.method,
                    url,
                    data=request.body.encode("utf-8") if request.body is not None else None,
                    headers=headers,
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                _logger.warning("Request error (attempt %d/%d): %s", attempt, attempts, e)
                if attempt == attempts:
                    return RestResponse(status_code=None, error_exception=e)
                time.sleep(self.backoff * attempt)
                continue

            if r.status_code in RETRY_STATUSES and attempt < attempts:
                _logger.warning("HTTP %s -> retrying %d/%d", r.status_code, attempt, attempts)
                time.sleep(self.backoff * attempt)
                continue

            _logger.debug("%s %s -> HTTP %s", request.method, url, r.status_code)
            return RestResponse(
                status_code=r.status_code,
                content=r.text,
                headers=dict(r.headers),
            )
        raise RuntimeError("Exceeded maximum retries.")
