"""
Target schema registry for contentloader.

This module defines the collections the loader can write to: their REST
endpoint, natural key field, block namespace and body/summary fields. The
registry makes it easy to add a new collection without touching the runners.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass


@dataclass
class TargetSchema:
    """
    Description of one remote collection.
    """
    name: str
    label: str
    endpoint: str
    key_field: str
    block_namespace: str = "page"
    body_field: str = "content"
    summary_field: Optional[str] = None
    upsert_env: str = "UPSERT_MODE"


class SchemaRegistry:
    """
    Registry of all known target schemas.
    """

    def __init__(self):
        """Initialize the registry with the default collections."""
        self._schemas: Dict[str, TargetSchema] = {}
        self._register_default_schemas()

    def _register_default_schemas(self):
        """Register the collections of the content store."""

        self.register_schema(TargetSchema(
            name="pages",
            label="pages",
            endpoint="/api/pages",
            key_field="routePath",
            block_namespace="page",
            upsert_env="PAGE_UPSERT_MODE",
        ))

        self.register_schema(TargetSchema(
            name="blog",
            label="blog posts",
            endpoint="/api/blog-posts",
            key_field="slug",
            block_namespace="article",
            summary_field="excerpt",
            upsert_env="ARTICLE_UPSERT_MODE",
        ))

        self.register_schema(TargetSchema(
            name="news",
            label="news articles",
            endpoint="/api/news-articles",
            key_field="slug",
            block_namespace="article",
            summary_field="summary",
            upsert_env="ARTICLE_UPSERT_MODE",
        ))

        self.register_schema(TargetSchema(
            name="redirects",
            label="redirects",
            endpoint="/api/redirects",
            key_field="fromPath",
            upsert_env="REDIRECT_UPSERT_MODE",
        ))

        self.register_schema(TargetSchema(
            name="tags",
            label="content tags",
            endpoint="/api/content-tags",
            key_field="slug",
        ))

    def register_schema(self, schema: TargetSchema) -> None:
        """
        Register a new target schema.

        Args:
            schema: The schema to register
        """
        self._schemas[schema.name] = schema

    def get_schema(self, name: str) -> Optional[TargetSchema]:
        """
        Get a schema by name.

        Args:
            name: The schema name ('pages', 'blog', ...)

        Returns:
            The schema, or None if not found
        """
        return self._schemas.get(name)

    def list_schemas(self) -> List[str]:
        return list(self._schemas.keys())


# Global schema registry instance
schema_registry = SchemaRegistry()
