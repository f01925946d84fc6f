# Blog — server-rendered pages backed by the content API
"""
Blog site modules:
- pages: listing / detail renderers, metadata, known slugs
- blocks: rich-text body rendering
- renderer: Jinja2 templates
- cache: time-based page regeneration
- app: FastAPI routes
- main: serve / build CLI
"""

__version__ = "1.0.0"
