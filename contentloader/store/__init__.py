"""Content store access: REST client and tag resolution."""

from .client import StoreClient
from .tags import TagResolver

__all__ = ["StoreClient", "TagResolver"]
