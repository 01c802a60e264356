"""Data models for contentloader."""

from .rows import Row
from .records import StoreRecord
from .blocks import (
    ContentBlock,
    SectionHeading,
    RichText,
    ListBlock,
    Callout,
    CallToAction,
    PullQuote,
    block_from_payload,
)
from .payloads import (
    StorePayload,
    SeoEntry,
    PagePayload,
    ArticlePayload,
    RedirectPayload,
    TagPayload,
    EntryPatch,
)
from .outcome import Action, RowResult, BatchOutcome
from .options import RunOptions

__all__ = [
    "Row",
    "StoreRecord",
    "ContentBlock",
    "SectionHeading",
    "RichText",
    "ListBlock",
    "Callout",
    "CallToAction",
    "PullQuote",
    "block_from_payload",
    "StorePayload",
    "SeoEntry",
    "PagePayload",
    "ArticlePayload",
    "RedirectPayload",
    "TagPayload",
    "EntryPatch",
    "Action",
    "RowResult",
    "BatchOutcome",
    "RunOptions",
]
