"""HTTP client for the headless CMS content API.

One GET per call: no retries, no auth headers, transport-default timeouts
unless configured. Failures are logged with the request URL, HTTP status and
response body, then raised as ContentAPIError.

Usage:
    with ContentAPIClient(settings.api.base_url) as client:
        envelope = client.fetch("posts", {"sort": ["publishedAt:desc"]})
        posts = envelope["data"]
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

import requests

from src.common.logging import setup_logging

from .exceptions import ContentAPIError
from .query import serialize_query

logger = setup_logging(module_name="content_api.client")

DEFAULT_PARAMS: dict[str, Any] = {"populate": "*"}


class FetchStatus(str, Enum):
    """Outcome of a fetch at the client boundary."""
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class FetchResult:
    """Result-or-error value returned by ContentAPIClient.fetch_result."""
    status: FetchStatus
    data: Any = None
    meta: Optional[dict] = None
    error: Optional[ContentAPIError] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.SUCCESS


class ContentAPIClient:
    """Read-only client for a Strapi-style REST API.

    Args:
        base_url: API root, e.g. "https://example.strapiapp.com/api".
        timeout: Request timeout in seconds. None keeps the transport default.
        session: Optional pre-configured requests.Session.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def build_url(self, path: str, params: Mapping[str, Any] | None = None) -> str:
        """Compose the request URL with the default populate merged in.

        The caller's keys win over the defaults (shallow override).
        """
        merged = {**DEFAULT_PARAMS, **(params or {})}
        query = serialize_query(merged)
        return f"{self.base_url}/{path.lstrip('/')}?{query}"

    def fetch(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """GET a resource and return the decoded JSON envelope verbatim.

        Args:
            path: Resource path relative to the base URL, e.g. "posts".
            params: Query configuration (filters, populate, sort, fields,
                    pagination, ...). Passed through without validation.

        Returns:
            The parsed JSON body, usually ``{"data": ..., "meta": ...}``.

        Raises:
            ContentAPIError: On connection failure, non-2xx status or a body
                that is not valid JSON.
            QuerySerializationError: If params cannot be serialized.
        """
        request_url = self.build_url(path, params)

        response: requests.Response | None = None
        try:
            response = self._session.get(request_url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            # HTTPError carries its response; connection errors have none
            failed = getattr(exc, "response", None)
            if failed is None:
                failed = response
            status_code = failed.status_code if failed is not None else None
            body = failed.text if failed is not None else None

            logger.error("API Error: %s", exc)
            logger.error("Response: %s", body)
            logger.error("Status: %s", status_code)
            logger.error("URL: %s", request_url)
            raise ContentAPIError(
                request_url,
                str(exc) or exc.__class__.__name__,
                status_code=status_code,
                body=body,
            ) from exc

    def fetch_result(self, path: str, params: Mapping[str, Any] | None = None) -> FetchResult:
        """Like fetch(), but returns a FetchResult instead of raising.

        EMPTY means the envelope's ``data`` is missing, null or an empty list.
        """
        try:
            envelope = self.fetch(path, params)
        except ContentAPIError as exc:
            return FetchResult(status=FetchStatus.ERROR, error=exc)

        if not isinstance(envelope, Mapping):
            return FetchResult(status=FetchStatus.SUCCESS, data=envelope)

        data = envelope.get("data")
        meta = envelope.get("meta")
        if data is None or data == []:
            return FetchResult(status=FetchStatus.EMPTY, data=data, meta=meta)
        return FetchResult(status=FetchStatus.SUCCESS, data=data, meta=meta)

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> ContentAPIClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
