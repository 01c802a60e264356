"""Batch runners: file-driven imports and syncs, and in-place migrations."""

from .batch import (
    BatchRunner,
    PreparedRow,
    PageImportRunner,
    ArticleImportRunner,
    RedirectImportRunner,
    ContentSyncRunner,
    BlockSyncRunner,
)
from .migration import MigrationRunner

__all__ = [
    "BatchRunner",
    "PreparedRow",
    "PageImportRunner",
    "ArticleImportRunner",
    "RedirectImportRunner",
    "ContentSyncRunner",
    "BlockSyncRunner",
    "MigrationRunner",
]
