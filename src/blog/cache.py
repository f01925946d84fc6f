"""Time-based page regeneration.

Rendered pages are kept for a fixed interval. The first request after the
interval re-renders the page and replaces the cached entry in one step.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from src.common.logging import setup_logging
from src.common.models import RenderedPage

logger = setup_logging(module_name="blog.cache")


class PageCache:
    """In-process cache of rendered pages keyed by route path.

    Args:
        revalidate_seconds: Age after which an entry is regenerated.
        enabled: When False every call renders.
        clock: Monotonic time source (seconds).
    """

    def __init__(
        self,
        revalidate_seconds: int = 60,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.revalidate_seconds = revalidate_seconds
        self.enabled = enabled
        self._clock = clock
        self._entries: dict[str, tuple[float, RenderedPage]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[RenderedPage]:
        """Return the entry for key if it is still fresh."""
        if not self.enabled:
            return None
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        rendered_at, page = entry
        if self._clock() - rendered_at >= self.revalidate_seconds:
            return None
        return page

    def set(self, key: str, page: RenderedPage) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._entries[key] = (self._clock(), page)

    def get_or_render(self, key: str, render: Callable[[], RenderedPage]) -> RenderedPage:
        """Serve a fresh cached page or regenerate it.

        Exceptions from render propagate and leave any previous entry in place.
        """
        page = self.get(key)
        if page is not None:
            return page

        logger.debug("Regenerating %s", key)
        page = render()
        self.set(key, page)
        return page

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one entry, or all entries when key is None."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)
