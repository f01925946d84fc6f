"""CLI entry point for the blog front end.

Usage:
    # Serve pages with time-based regeneration:
    python -m src.blog.main serve --host 0.0.0.0 --port 3000

    # Write the listing, every known post and the 404 page to disk:
    python -m src.blog.main build --output-dir data/exports/site
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from src.common.config import DATA_EXPORTS_DIR, BlogSettings
from src.common.logging import LOG_LEVELS, set_level, setup_logging
from src.content_api.client import ContentAPIClient

from .pages import BlogPages, PostNotFound

logger = setup_logging(module_name="blog.main")


def build_site(pages: BlogPages, output_dir: Path) -> list[Path]:
    """Render every pre-enumerated page into output_dir.

    Layout:
        index.html
        404.html
        blog/<slug>/index.html

    Returns:
        Paths written, in order.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    index = output_dir / "index.html"
    index.write_text(pages.render_home().html, encoding="utf-8")
    written.append(index)

    blog_dir = (output_dir / "blog").resolve()
    for params in pages.generate_static_params():
        slug = params["slug"]
        path = output_dir / "blog" / slug / "index.html"
        if not path.resolve().is_relative_to(blog_dir):
            logger.warning("Skipping %s: path escapes %s", slug, blog_dir)
            continue
        try:
            page = pages.render_post(slug)
        except PostNotFound:
            logger.warning("Skipping %s: not found", slug)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(page.html, encoding="utf-8")
        written.append(path)

    not_found = output_dir / "404.html"
    not_found.write_text(pages.render_not_found().html, encoding="utf-8")
    written.append(not_found)

    logger.info("Wrote %d pages to %s", len(written), output_dir)
    return written


def _serve(settings: BlogSettings, host: str, port: int) -> None:
    import uvicorn

    from .app import create_app

    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())


def _build(settings: BlogSettings, output_dir: Path) -> None:
    with ContentAPIClient(settings.api.base_url, timeout=settings.api.request_timeout) as client:
        build_site(BlogPages(client, settings=settings), output_dir)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Headless CMS blog front end")
    parser.add_argument("--config", type=Path, help="Path to settings.yaml")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, help="Override LOG_LEVEL"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the web server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=3000)

    build = sub.add_parser("build", help="Write static HTML pages")
    build.add_argument("--output-dir", type=Path, default=DATA_EXPORTS_DIR / "site")

    args = parser.parse_args(argv)

    settings = BlogSettings.load(args.config)
    if args.log_level:
        settings.log_level = args.log_level
    set_level(settings.log_level)

    logger.info("Content API: %s", settings.api.base_url)

    if args.command == "serve":
        _serve(settings, args.host, args.port)
    else:
        _build(settings, args.output_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
