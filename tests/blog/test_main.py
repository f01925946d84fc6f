"""Tests for the serve / build CLI."""

from pathlib import Path
from unittest.mock import patch

import pytest
import requests

from src.blog.main import build_site, main

from conftest import make_response


class TestBuildSite:
    def test_writes_listing_posts_and_404(self, pages, session, sample_post, tmp_path):
        session.get.return_value = make_response({"data": [sample_post]})

        written = build_site(pages, tmp_path / "site")

        site = tmp_path / "site"
        assert written == [
            site / "index.html",
            site / "blog" / "fleet-maintenance-basics" / "index.html",
            site / "404.html",
        ]
        assert "Fleet Maintenance Basics" in (site / "index.html").read_text(encoding="utf-8")
        assert "Post Not Found" in (site / "404.html").read_text(encoding="utf-8")

    @pytest.mark.parametrize("slug", ["../../escaped", "..", "/tmp/absolute-slug"])
    def test_slug_cannot_escape_output_dir(self, pages, session, second_post, tmp_path, slug):
        second_post["slug"] = slug
        session.get.return_value = make_response({"data": [second_post]})
        site = tmp_path / "out" / "site"

        written = build_site(pages, site)

        assert [p.name for p in written] == ["index.html", "404.html"]
        assert not (tmp_path / "out" / "escaped").exists()
        assert not (tmp_path / "escaped").exists()
        for path in written:
            assert path.resolve().is_relative_to(site.resolve())

    def test_nested_slug_inside_blog_dir_is_written(self, pages, session, second_post, tmp_path):
        second_post["slug"] = "2026/route-planning"
        session.get.return_value = make_response({"data": [second_post]})

        written = build_site(pages, tmp_path)

        assert tmp_path / "blog" / "2026" / "route-planning" / "index.html" in written

    def test_api_down_still_builds_fallbacks(self, pages, session, tmp_path):
        session.get.side_effect = requests.ConnectionError("down")

        written = build_site(pages, tmp_path)

        assert [p.name for p in written] == ["index.html", "404.html"]
        assert "Failed to load posts" in (tmp_path / "index.html").read_text(encoding="utf-8")


class TestMain:
    def test_build_command(self, tmp_path):
        with patch("src.blog.main._build") as build:
            assert main(["build", "--output-dir", str(tmp_path)]) == 0
        settings, output_dir = build.call_args.args
        assert output_dir == tmp_path
        assert settings.api.base_url

    def test_serve_command(self):
        with patch("src.blog.main._serve") as serve:
            main(["--log-level", "debug", "serve", "--port", "8080"])
        settings, host, port = serve.call_args.args
        assert (host, port) == ("127.0.0.1", 8080)
        assert settings.log_level == "DEBUG"

    def test_config_file(self, tmp_path: Path):
        config = tmp_path / "settings.yaml"
        config.write_text("site:\n  title: Depot Notes\n", encoding="utf-8")
        with patch("src.blog.main._build") as build:
            main(["--config", str(config), "build"])
        assert build.call_args.args[0].site.title == "Depot Notes"

    def test_unknown_log_level_rejected(self, capsys):
        with patch("src.blog.main._build") as build, pytest.raises(SystemExit):
            main(["--log-level", "verbose", "build"])
        build.assert_not_called()
        err = capsys.readouterr().err
        assert "invalid choice" in err
        assert "VERBOSE" in err

    def test_command_required(self):
        with pytest.raises(SystemExit):
            main([])
