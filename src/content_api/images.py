"""Allow-list for externally hosted media.

Patterns follow the remote-pattern convention of the Next.js image
component:

- hostname "cdn.example.com" matches that host only
- "*.example.com" matches exactly one extra label ("a.example.com")
- "**.example.com" matches one or more extra labels
- pathname "/**" matches any path, "/uploads/**" any path under /uploads,
  anything else must match exactly
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import urljoin, urlsplit

from src.common.logging import setup_logging

logger = setup_logging(module_name="content_api.images")


@dataclass(frozen=True)
class RemotePattern:
    """A single allowed media origin."""
    hostname: str
    protocol: str = "https"
    pathname: str = "/**"

    def matches(self, url: str) -> bool:
        parts = urlsplit(url)
        if parts.scheme != self.protocol:
            return False
        if not _host_matches(self.hostname, (parts.hostname or "").lower()):
            return False
        return _path_matches(self.pathname, parts.path or "/")


def _host_matches(pattern: str, host: str) -> bool:
    pattern = pattern.lower()
    if not host:
        return False
    if pattern.startswith("**."):
        suffix = pattern[2:]
        return host.endswith(suffix) and len(host) > len(suffix)
    if pattern.startswith("*."):
        suffix = pattern[1:]
        if not host.endswith(suffix):
            return False
        label = host[: -len(suffix)]
        return bool(label) and "." not in label
    return host == pattern


def _path_matches(pattern: str, path: str) -> bool:
    if pattern == "/**":
        return True
    if pattern.endswith("/**"):
        prefix = pattern[:-2]
        return path.startswith(prefix)
    return path == pattern


class ImagePolicy:
    """Resolves media URLs and rejects anything outside the allow-list.

    Args:
        patterns: Allowed remote patterns.
        media_origin: Origin used to absolutize relative URLs such as
            "/uploads/photo.jpg" (normally the CMS origin).
    """

    def __init__(self, patterns: Iterable[RemotePattern], media_origin: str = "") -> None:
        self.patterns = tuple(patterns)
        self.media_origin = media_origin.rstrip("/")

    @classmethod
    def from_settings(cls, settings) -> ImagePolicy:
        patterns = [
            RemotePattern(hostname=p.hostname, protocol=p.protocol, pathname=p.pathname)
            for p in settings.images.remote_patterns
        ]
        return cls(patterns, media_origin=settings.media_origin)

    def is_allowed(self, url: str) -> bool:
        return any(pattern.matches(url) for pattern in self.patterns)

    def resolve(self, url: Optional[str]) -> Optional[str]:
        """Return an absolute, allowed URL, or None if the image must not render."""
        if not url:
            return None
        absolute = url
        if not urlsplit(url).scheme:
            if not self.media_origin:
                logger.warning("Rejected relative image URL without media origin: %s", url)
                return None
            absolute = urljoin(self.media_origin + "/", url)
        if not self.is_allowed(absolute):
            logger.warning("Rejected image URL outside allow-list: %s", absolute)
            return None
        return absolute
