"""
Canonical payload models for contentloader.

Payloads are filled in by the builders in ``contentloader.normalize.payloads``.
Only fields a builder sets explicitly are sent to the store: an optional field
left untouched is omitted, while one explicitly set to None (for instance
``published_at`` on a forced unpublish) is sent as null.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class StorePayload(BaseModel):
    """Common behaviour for everything written to the store."""

    model_config = ConfigDict(populate_by_name=True)

    published_at: Optional[str] = Field(
        default=None,
        alias="publishedAt",
        description="ISO timestamp to publish, or None to revert to draft"
    )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize the explicitly-set fields using the store's field names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class SeoEntry(BaseModel):
    """
    The shared SEO component.
    """

    model_config = ConfigDict(populate_by_name=True)

    meta_title: Optional[str] = Field(default=None, alias="metaTitle")
    meta_description: Optional[str] = Field(default=None, alias="metaDescription")
    canonical_url: Optional[str] = Field(default=None, alias="canonicalUrl")
    noindex: bool = False
    structured_data: Optional[Any] = Field(default=None, alias="schemaJson")


class PagePayload(StorePayload):
    """
    A page keyed by its route path.
    """

    route_path: str = Field(..., alias="routePath")
    page_name: str = Field(..., alias="pageName")
    content: str = ""
    is_active: bool = Field(default=True, alias="isActive")
    seo: Optional[SeoEntry] = None
    content_blocks: Optional[List[Dict[str, Any]]] = Field(default=None, alias="contentBlocks")


class ArticlePayload(StorePayload):
    """
    A blog post or news article keyed by its slug.
    """

    title: str
    slug: str
    content: str = ""
    excerpt: Optional[str] = None
    summary: Optional[str] = None
    seo: List[SeoEntry] = Field(default_factory=list)
    tags: Optional[List[Union[int, str]]] = None
    publish_date: Optional[str] = Field(default=None, alias="publishDate")
    cover_image: Optional[Union[int, str]] = Field(default=None, alias="coverImage")


class RedirectPayload(StorePayload):
    """
    A redirect keyed by its source path.
    """

    from_path: str = Field(..., alias="fromPath")
    to_url: str = Field(..., alias="toUrl")
    status_code: str = Field(default="Redirect-301", alias="statusCode")
    is_active: bool = Field(default=True, alias="isActive")
    notes: Optional[str] = None


class TagPayload(StorePayload):
    """A content tag, created on demand while importing articles."""

    name: str
    slug: str


class EntryPatch(StorePayload):
    """
    Partial update sent by the sync and migration commands.
    """

    content: Optional[str] = None
    content_blocks: Optional[List[Dict[str, Any]]] = Field(default=None, alias="contentBlocks")
