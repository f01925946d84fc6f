"""
FastAPI application for the blog front end.

Routes:
    GET /              post listing
    GET /blog/{slug}   post detail (404 page when the slug is unknown)
    GET /health        liveness probe

Rendered pages are cached and regenerated after the configured interval.
Known slugs are pre-rendered at startup.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.common.config import BlogSettings
from src.common.logging import setup_logging
from src.common.models import RenderedPage
from src.content_api.client import ContentAPIClient

from . import __version__
from .cache import PageCache
from .pages import BlogPages, PostNotFound

logger = setup_logging(module_name="blog.app")


def _html(page: RenderedPage) -> HTMLResponse:
    return HTMLResponse(content=page.html, status_code=page.status_code)


def prerender(pages: BlogPages, cache: PageCache) -> int:
    """Render the listing and every known slug into the cache.

    Returns:
        Number of post pages rendered. Unknown or failing slugs are skipped,
        their stale entries dropped, and resolved on demand later.
    """
    cache.set("/", pages.render_home())

    rendered = 0
    for params in pages.generate_static_params():
        slug = params["slug"]
        try:
            cache.set(f"/blog/{slug}", pages.render_post(slug))
            rendered += 1
        except PostNotFound:
            logger.warning("Skipping pre-render of %s: not found", slug)
            cache.invalidate(f"/blog/{slug}")
    logger.info("Pre-rendered %d post pages", rendered)
    return rendered


def create_app(
    settings: Optional[BlogSettings] = None,
    client: Optional[ContentAPIClient] = None,
    prerender_on_startup: bool = True,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Application settings. Loaded from config/settings.yaml and
                  the environment when omitted.
        client: Content API client. Built from settings when omitted.
        prerender_on_startup: Warm the cache with known pages at startup.
    """
    settings = settings or BlogSettings.load()
    client = client or ContentAPIClient(
        settings.api.base_url,
        timeout=settings.api.request_timeout,
    )
    pages = BlogPages(client, settings=settings)
    cache = PageCache(
        revalidate_seconds=settings.cache.revalidate_seconds,
        enabled=settings.cache.enabled,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if prerender_on_startup:
            try:
                prerender(pages, cache)
            except Exception:
                logger.exception("Pre-rendering failed; pages will render on demand")
        yield
        client.close()

    app = FastAPI(
        title=settings.site.title,
        description=settings.site.description,
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.pages = pages
    app.state.cache = cache

    @app.exception_handler(PostNotFound)
    async def post_not_found(request: Request, exc: PostNotFound):
        logger.info("Not found: %s", exc.slug)
        return _html(pages.render_not_found())

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _html(pages.render_not_found())
        page = pages.render_error(str(exc.detail), retry_path=request.url.path)
        return HTMLResponse(content=page.html, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def application_error(request: Request, exc: Exception):
        logger.error("Application error on %s: %s", request.url.path, exc, exc_info=exc)
        return _html(pages.render_error(retry_path=request.url.path))

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    @app.get("/", response_class=HTMLResponse)
    def home():
        """Post listing, newest first."""
        return _html(cache.get_or_render("/", pages.render_home))

    @app.get("/blog/{slug}", response_class=HTMLResponse)
    def blog_post(slug: str):
        """Single post by slug."""
        return _html(cache.get_or_render(f"/blog/{slug}", lambda: pages.render_post(slug)))

    return app
