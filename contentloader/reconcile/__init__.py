"""Create-or-update reconciliation against the content store."""

from .engine import Reconciler, UpsertMode

__all__ = ["Reconciler", "UpsertMode"]
