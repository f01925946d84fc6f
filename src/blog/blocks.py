"""Rich-text body rendering for CMS "blocks" content.

A post body is a list of block nodes:

    [{"type": "heading", "level": 2, "children": [{"type": "text", "text": "Intro"}]},
     {"type": "paragraph", "children": [{"type": "text", "text": "Hi", "bold": True}]}]

Every text leaf is HTML-escaped. Images go through the media allow-list.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional
from urllib.parse import urlsplit

from markupsafe import Markup, escape

from src.common.logging import setup_logging
from src.content_api.images import ImagePolicy

logger = setup_logging(module_name="blog.blocks")

# Applied innermost first
TEXT_MODIFIERS = (
    ("code", "code"),
    ("strikethrough", "del"),
    ("underline", "u"),
    ("italic", "em"),
    ("bold", "strong"),
)

# Relative hrefs have no scheme and are always allowed
LINK_SCHEMES = ("http", "https", "mailto")

# Browsers ignore these inside a scheme, so "java\tscript:" still runs
_IGNORED_URL_CHARS = re.compile(r"[\x00-\x20\x7f]+")


def safe_href(url: Any) -> str:
    """Return url if it is relative or uses an allowed scheme, else "#"."""
    if not isinstance(url, str) or not url.strip():
        return "#"
    try:
        scheme = urlsplit(_IGNORED_URL_CHARS.sub("", url)).scheme.lower()
    except ValueError:
        return "#"
    if scheme and scheme not in LINK_SCHEMES:
        logger.warning("Dropping link with scheme %r", scheme)
        return "#"
    return url.strip()


class BlocksRenderer:
    """Converts block nodes to HTML markup."""

    def __init__(self, image_policy: Optional[ImagePolicy] = None):
        self.image_policy = image_policy

    def render(self, blocks: Optional[Iterable[dict[str, Any]]]) -> Markup:
        if not blocks:
            return Markup("")
        return Markup("\n").join(self._block(block) for block in blocks if isinstance(block, dict))

    # --- Block level ---

    def _block(self, node: dict[str, Any]) -> Markup:
        block_type = node.get("type")

        if block_type == "paragraph":
            return Markup("<p>%s</p>") % self._inline(node.get("children"))

        if block_type == "heading":
            level = node.get("level", 1)
            if not isinstance(level, int) or not 1 <= level <= 6:
                level = 1
            return Markup(f"<h{level}>%s</h{level}>") % self._inline(node.get("children"))

        if block_type == "list":
            return self._list(node)

        if block_type == "quote":
            return Markup("<blockquote>%s</blockquote>") % self._inline(node.get("children"))

        if block_type == "code":
            code = "".join(self._plain_text(node.get("children")))
            return Markup("<pre><code>%s</code></pre>") % code

        if block_type == "image":
            return self._image(node.get("image") or {})

        logger.debug("Unknown block type %r, rendering children", block_type)
        return self._inline(node.get("children"))

    def _list(self, node: dict[str, Any]) -> Markup:
        tag = "ol" if node.get("format") == "ordered" else "ul"
        items = []
        for child in node.get("children") or []:
            if not isinstance(child, dict):
                continue
            if child.get("type") == "list":
                items.append(self._list(child))
            else:
                items.append(Markup("<li>%s</li>") % self._inline(child.get("children")))
        return Markup(f"<{tag}>%s</{tag}>") % Markup("").join(items)

    def _image(self, image: dict[str, Any]) -> Markup:
        url = image.get("url")
        if self.image_policy is not None:
            url = self.image_policy.resolve(url)
        if not url:
            return Markup("")
        alt = image.get("alternativeText") or ""
        size = ""
        if isinstance(image.get("width"), int) and isinstance(image.get("height"), int):
            size = Markup(' width="%s" height="%s"') % (image["width"], image["height"])
        return Markup('<img src="%s" alt="%s"%s loading="lazy">') % (url, alt, size)

    # --- Inline level ---

    def _inline(self, children: Any) -> Markup:
        if not children:
            return Markup("")
        parts = []
        for child in children:
            if not isinstance(child, dict):
                continue
            if child.get("type") == "text":
                parts.append(self._text(child))
            elif child.get("type") == "link":
                parts.append(
                    Markup('<a href="%s">%s</a>')
                    % (safe_href(child.get("url")), self._inline(child.get("children")))
                )
            else:
                parts.append(self._inline(child.get("children")))
        return Markup("").join(parts)

    def _text(self, leaf: dict[str, Any]) -> Markup:
        lines = str(leaf.get("text", "")).split("\n")
        html = Markup("<br>").join(escape(line) for line in lines)
        for flag, tag in TEXT_MODIFIERS:
            if leaf.get(flag):
                html = Markup(f"<{tag}>%s</{tag}>") % html
        return html

    def _plain_text(self, children: Any) -> Iterable[str]:
        for child in children or []:
            if not isinstance(child, dict):
                continue
            if child.get("type") == "text":
                yield str(child.get("text", ""))
            else:
                yield from self._plain_text(child.get("children"))
