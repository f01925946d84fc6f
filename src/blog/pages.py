"""Page renderers — listing page, post detail page and their metadata.

Each render performs its own lookup against the content API and maps the
result to one of three outcomes: content, empty, or failure. Failures never
reach the caller as raw fetch errors:

- listing: always a 200 page, with an explicit empty or failed-to-load notice
- detail: PostNotFound for zero matches or any failure
- metadata / static params: generic fallbacks
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from src.common.config import BlogSettings
from src.common.logging import setup_logging
from src.common.models import (
    Article,
    OpenGraph,
    OpenGraphImage,
    PageMetadata,
    RenderedPage,
    TwitterCard,
)
from src.content_api.client import ContentAPIClient, FetchResult, FetchStatus
from src.content_api.images import ImagePolicy

from .blocks import BlocksRenderer
from .renderer import TemplateRenderer

logger = setup_logging(module_name="blog.pages")

POSTS_PATH = "posts"

POST_POPULATE: dict[str, Any] = {
    "featuredImage": {"fields": ["url", "alternativeText"]},
    "seo": {"fields": ["seoTitle", "seoDescription"]},
}

LISTING_PARAMS: dict[str, Any] = {
    "sort": ["publishedAt:desc"],
    "populate": POST_POPULATE,
}

NOT_FOUND_TITLE = "Post Not Found"

# Raised when fetched JSON does not have the expected shape
SHAPE_ERRORS = (ValidationError, TypeError, KeyError, IndexError, AttributeError)


class PostNotFound(Exception):
    """No post can be shown for this slug. Rendered as the 404 page."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Post not found: {slug}")


def post_params(slug: str) -> dict[str, Any]:
    """Query for a single post by exact slug match."""
    return {
        "filters": {"slug": {"$eq": slug}},
        "populate": POST_POPULATE,
    }


class BlogPages:
    """Builds every page of the site from content API lookups.

    Args:
        client: Content API client.
        renderer: Template renderer.
        settings: Application settings (site strings, image allow-list,
                  slug pre-enumeration cap).
    """

    def __init__(
        self,
        client: ContentAPIClient,
        renderer: Optional[TemplateRenderer] = None,
        settings: Optional[BlogSettings] = None,
    ):
        self.client = client
        self.settings = settings or BlogSettings()
        self.renderer = renderer or TemplateRenderer(site=self.settings.site)
        self.image_policy = ImagePolicy.from_settings(self.settings)
        self.blocks = BlocksRenderer(self.image_policy)

    # --- Listing ---

    def render_home(self) -> RenderedPage:
        """Render the post listing, newest first. Always status 200."""
        result = self.client.fetch_result(POSTS_PATH, LISTING_PARAMS)

        state = "posts"
        posts: list[dict[str, Any]] = []
        if result.status is FetchStatus.ERROR:
            logger.error("Error loading posts: %s", result.error)
            state = "error"
        elif result.status is FetchStatus.EMPTY:
            state = "empty"
        else:
            try:
                posts = [self._post_view(article) for article in self._articles(result)]
            except SHAPE_ERRORS as exc:
                logger.error("Error loading posts: unexpected response shape: %s", exc)
                state = "error"
            else:
                if not posts:
                    state = "empty"

        html = self.renderer.render("home.html.jinja2", {"state": state, "posts": posts})
        return RenderedPage(status_code=200, html=html)

    # --- Detail ---

    def render_post(self, slug: str) -> RenderedPage:
        """Render a single post.

        Raises:
            PostNotFound: No post matches the slug, or the lookup failed.
        """
        article = self._find_post(slug)
        metadata = self.generate_metadata(slug)
        html = self.renderer.render(
            "post.html.jinja2",
            {"post": self._post_view(article, with_body=True), "metadata": metadata},
        )
        return RenderedPage(status_code=200, html=html)

    def generate_metadata(self, slug: str) -> PageMetadata:
        """Head metadata for a post page. Never raises."""
        try:
            result = self.client.fetch_result(POSTS_PATH, post_params(slug))
            if result.status is FetchStatus.ERROR:
                logger.error("Error generating metadata: %s", result.error)
                return PageMetadata(title=self.settings.site.title)
            if result.status is FetchStatus.EMPTY:
                return PageMetadata(title=NOT_FOUND_TITLE)
            return self.build_metadata(self._articles(result)[0])
        except Exception as exc:
            logger.error("Error generating metadata: %s", exc)
            return PageMetadata(title=self.settings.site.title)

    def build_metadata(self, article: Article) -> PageMetadata:
        """Derive title, description and social previews from a post."""
        seo = article.seo
        title = article.display_title
        seo_description = seo.seo_description if seo and seo.seo_description else None
        description = seo_description or f"Read {article.title} by {article.author}"

        image_url = self.image_policy.resolve(
            article.featured_image.url if article.featured_image else None
        )
        published = article.published_at.isoformat() if article.published_at else None

        return PageMetadata(
            title=title,
            description=description,
            open_graph=OpenGraph(
                title=title,
                description=seo_description,
                images=[OpenGraphImage(url=image_url, alt=article.image_alt)] if image_url else [],
                type="article",
                published_time=published,
                authors=[article.author],
            ),
            twitter=TwitterCard(
                card="summary_large_image",
                title=title,
                description=seo_description,
                images=[image_url] if image_url else [],
            ),
        )

    def generate_static_params(self) -> list[dict[str, str]]:
        """Known slugs for pre-rendering, at most static_params_limit. Never raises."""
        limit = self.settings.static_params_limit
        try:
            result = self.client.fetch_result(
                POSTS_PATH,
                {"fields": ["slug"], "pagination": {"limit": limit}},
            )
            if result.status is FetchStatus.ERROR:
                logger.error("Error generating static params: %s", result.error)
                return []
            if result.status is FetchStatus.EMPTY:
                return []
            return [
                {"slug": item["slug"]}
                for item in result.data[:limit]
                if isinstance(item.get("slug"), str) and item["slug"]
            ]
        except Exception as exc:
            logger.error("Error generating static params: %s", exc)
            return []

    # --- Fallback pages ---

    def render_not_found(self) -> RenderedPage:
        html = self.renderer.render(
            "not_found.html.jinja2",
            {"metadata": PageMetadata(title=NOT_FOUND_TITLE)},
        )
        return RenderedPage(status_code=404, html=html)

    def render_error(self, message: Optional[str] = None, retry_path: str = "/") -> RenderedPage:
        html = self.renderer.render(
            "error.html.jinja2",
            {"message": message, "retry_path": retry_path},
        )
        return RenderedPage(status_code=500, html=html)

    # --- Helpers ---

    def _find_post(self, slug: str) -> Article:
        result = self.client.fetch_result(POSTS_PATH, post_params(slug))
        if result.status is FetchStatus.ERROR:
            logger.error("Error loading post %s: %s", slug, result.error)
            raise PostNotFound(slug)
        if result.status is FetchStatus.EMPTY:
            raise PostNotFound(slug)
        try:
            return self._articles(result)[0]
        except SHAPE_ERRORS as exc:
            logger.error("Error loading post %s: unexpected response shape: %s", slug, exc)
            raise PostNotFound(slug) from exc

    @staticmethod
    def _articles(result: FetchResult) -> list[Article]:
        if not isinstance(result.data, list):
            raise TypeError(f"expected a list of posts, got {type(result.data).__name__}")
        return [Article.model_validate(item) for item in result.data]

    def _post_view(self, article: Article, with_body: bool = False) -> dict[str, Any]:
        image_url = self.image_policy.resolve(
            article.featured_image.url if article.featured_image else None
        )
        view = {
            "id": article.id,
            "slug": article.slug,
            "title": article.title,
            "author": article.author,
            "published_at": article.published_at,
            "image_url": image_url,
            "image_alt": article.image_alt,
        }
        if with_body:
            view["body"] = self.blocks.render(article.content)
        return view
