"""Exceptions raised by the content API client."""

from __future__ import annotations

from typing import Optional


class ContentAPIException(Exception):
    """Base exception for content API access."""
    pass


class QuerySerializationError(ContentAPIException, ValueError):
    """Query configuration cannot be turned into a query string."""
    pass


class ContentAPIError(ContentAPIException):
    """A request to the content API failed.

    Covers connection failures, non-2xx responses and bodies that are not
    valid JSON. The original ``requests`` exception is chained as the cause.
    """

    def __init__(
        self,
        url: str,
        reason: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        self.body = body
        super().__init__(f"Error fetching from {url}: {reason}")
