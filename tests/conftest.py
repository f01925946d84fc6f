"""Shared test fixtures for the blog front end."""

import sys
from pathlib import Path
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.blog.pages import BlogPages
from src.common.config import BlogSettings
from src.content_api.client import ContentAPIClient

API_URL = "https://cms.example.com/api"


def make_response(
    payload: Any = None,
    status_code: int = 200,
    text: Optional[str] = None,
) -> MagicMock:
    """Build a mock requests.Response."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.text = text if text is not None else ("" if payload is None else str(payload))
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Client Error", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def settings() -> BlogSettings:
    """Settings pointing at a fake CMS with a matching media allow-list."""
    return BlogSettings(
        api={"base_url": API_URL},
        images={
            "remote_patterns": [
                {"hostname": "cms.example.com"},
                {"hostname": "*.media.example.com"},
            ]
        },
    )


@pytest.fixture
def session() -> MagicMock:
    """A mock requests.Session; set session.get.return_value per test."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session: MagicMock) -> ContentAPIClient:
    return ContentAPIClient(API_URL, session=session)


@pytest.fixture
def pages(client: ContentAPIClient, settings: BlogSettings) -> BlogPages:
    return BlogPages(client, settings=settings)


@pytest.fixture
def sample_post() -> dict:
    """A post as returned by the CMS with image and SEO populated."""
    return {
        "id": 7,
        "documentId": "abc123",
        "title": "Fleet Maintenance Basics",
        "slug": "fleet-maintenance-basics",
        "author": "Jordan Lee",
        "publishedAt": "2026-01-05T09:30:00.000Z",
        "content": [
            {
                "type": "heading",
                "level": 2,
                "children": [{"type": "text", "text": "Why it matters"}],
            },
            {
                "type": "paragraph",
                "children": [
                    {"type": "text", "text": "Check tyres "},
                    {"type": "text", "text": "weekly", "bold": True},
                    {"type": "text", "text": "."},
                ],
            },
        ],
        "seo": {
            "seoTitle": "Fleet Maintenance 101",
            "seoDescription": "A checklist for keeping vans on the road.",
        },
        "featuredImage": {
            "url": "https://assets.media.example.com/van.jpg",
            "alternativeText": "A white van",
        },
    }


@pytest.fixture
def second_post() -> dict:
    """A post without SEO override or featured image."""
    return {
        "id": 8,
        "documentId": "def456",
        "title": "Route Planning",
        "slug": "route-planning",
        "author": "Sam Park",
        "publishedAt": "2025-12-20T12:00:00.000Z",
        "content": [],
    }
