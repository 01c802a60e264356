"""
contentloader: idempotent bulk loading of seed content into a headless CMS.

Reads CSV or JSON records, normalizes them and upserts each one into a
Strapi-style REST collection, with dry runs, forced publishing and per-row
failure isolation. Also converts legacy plain-text bodies into structured
content blocks, either from a seed file or in place.
"""

__version__ = "0.1.0"
__author__ = "contentloader Project"

# Import main components
from .errors import ConfigurationError, ParseError, ValidationError, RemoteError
from .models import Row, StoreRecord, BatchOutcome, RowResult, RunOptions
from .importers import load_rows
from .blocks import convert_text_to_blocks
from .store import StoreClient
from .reconcile import Reconciler, UpsertMode
from .runner import BatchRunner, MigrationRunner

__all__ = [
    "ConfigurationError",
    "ParseError",
    "ValidationError",
    "RemoteError",
    "Row",
    "StoreRecord",
    "BatchOutcome",
    "RowResult",
    "RunOptions",
    "load_rows",
    "convert_text_to_blocks",
    "StoreClient",
    "Reconciler",
    "UpsertMode",
    "BatchRunner",
    "MigrationRunner",
]
