# Content API — query serialization and fetch for the headless CMS
"""
Read-only access to the CMS REST API:
- query: bracket-encoded query string serializer
- client: single-GET fetch wrapper with diagnostic logging
- images: media URL allow-list
"""

from .client import ContentAPIClient, FetchResult, FetchStatus
from .exceptions import ContentAPIError, ContentAPIException, QuerySerializationError
from .images import ImagePolicy, RemotePattern
from .query import serialize_query

__all__ = [
    "ContentAPIClient",
    "ContentAPIError",
    "ContentAPIException",
    "FetchResult",
    "FetchStatus",
    "ImagePolicy",
    "QuerySerializationError",
    "RemotePattern",
    "serialize_query",
]
