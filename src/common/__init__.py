# Common utilities and shared modules
"""
Shared components used by the content API client and the blog site:
- Data models (Pydantic schemas)
- Logging configuration
- Project configuration
"""

from .config import BlogSettings, PROJECT_ROOT, DATA_DIR
from .logging import setup_logging

__all__ = [
    "BlogSettings",
    "PROJECT_ROOT",
    "DATA_DIR",
    "setup_logging",
]
