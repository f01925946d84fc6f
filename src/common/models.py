"""Shared Pydantic data models for the blog front end.

Articles are parsed from the CMS response envelope (camelCase keys) into
read-only view models. Nothing here is persisted.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CMSModel(BaseModel):
    """Base for models parsed from CMS JSON."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


# === CMS content ===

class FeaturedImage(_CMSModel):
    """Media relation attached to a post."""
    url: str
    alternative_text: Optional[str] = Field(default=None, alias="alternativeText")


class SeoOverride(_CMSModel):
    """Optional SEO component on a post."""
    seo_title: Optional[str] = Field(default=None, alias="seoTitle")
    seo_description: Optional[str] = Field(default=None, alias="seoDescription")


class Article(_CMSModel):
    """A blog post as returned by the `posts` collection."""
    id: int
    document_id: Optional[str] = Field(default=None, alias="documentId")
    title: str
    slug: str
    author: str = ""
    content: list[dict[str, Any]] = Field(default_factory=list)
    published_at: Optional[datetime] = Field(default=None, alias="publishedAt")
    seo: Optional[SeoOverride] = None
    featured_image: Optional[FeaturedImage] = Field(default=None, alias="featuredImage")

    @property
    def display_title(self) -> str:
        """SEO title when set, otherwise the post title."""
        if self.seo and self.seo.seo_title:
            return self.seo.seo_title
        return self.title

    @property
    def image_alt(self) -> str:
        if self.featured_image and self.featured_image.alternative_text:
            return self.featured_image.alternative_text
        return self.title


# === Page metadata ===

class OpenGraphImage(BaseModel):
    url: str
    alt: str = ""


class OpenGraph(BaseModel):
    """Social preview fields (og:*)."""
    title: str
    description: Optional[str] = None
    images: list[OpenGraphImage] = Field(default_factory=list)
    type: str = "article"
    published_time: Optional[str] = None
    authors: list[str] = Field(default_factory=list)


class TwitterCard(BaseModel):
    """Social preview fields (twitter:*)."""
    card: str = "summary_large_image"
    title: str
    description: Optional[str] = None
    images: list[str] = Field(default_factory=list)


class PageMetadata(BaseModel):
    """Head metadata for a rendered page."""
    title: str
    description: Optional[str] = None
    open_graph: Optional[OpenGraph] = None
    twitter: Optional[TwitterCard] = None


# === Rendering ===

class RenderedPage(BaseModel):
    """Final HTML for one route."""
    status_code: int = 200
    html: str
