"""
Import all models to ensure they are registered with SQLAlchemy
"""
from cineshelf.models.content_cache import ContentCache

__all__ = [
    "ContentCache",
]
