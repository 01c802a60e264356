"""
Reconciliation engine.

Given a natural key and a payload, looks up the existing entry in the store,
decides between create, update and skip according to the upsert mode, and
performs the write unless the run is a dry run. The decision is identical in
dry and live runs so a dry run reports exactly what a live run would do.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from ..errors import RemoteError
from ..models import Action, StoreRecord
from ..store import StoreClient


class UpsertMode(str, Enum):
    """
    How to treat an entry that already exists (imports) or is missing (syncs).

    Seed imports use UPDATE or SKIP: missing entries are always created.
    Sync runs use SKIP or CREATE: existing entries are always updated.
    """

    UPDATE = "update"
    SKIP = "skip"
    CREATE = "create"


class Reconciler:
    """
    Decides and executes one upsert per natural key against one collection.
    """

    def __init__(self, client: StoreClient, endpoint: str, key_field: str,
                 dry_run: bool = False, sync: bool = False):
        """
        Initialize the reconciler.

        Args:
            client: Store client
            endpoint: Collection endpoint, e.g. /api/pages
            key_field: Field holding the natural key (routePath, slug, fromPath)
            dry_run: Decide and log, but never write
            sync: Use sync semantics (existing entries are updated, the mode
                decides whether missing ones are created)
        """
        self.client = client
        self.endpoint = endpoint
        self.key_field = key_field
        self.dry_run = dry_run
        self.sync = sync

    def find_existing(self, key: str) -> Optional[StoreRecord]:
        return self.client.find_one(self.endpoint, self.key_field, key)

    def decide(self, existing: Optional[StoreRecord], mode: UpsertMode) -> Action:
        """
        Pick the action for a lookup result.

        Args:
            existing: The matching entry, if any
            mode: Upsert mode

        Returns:
            The action to take
        """
        if existing is None:
            if self.sync and mode != UpsertMode.CREATE:
                return Action.SKIPPED
            return Action.CREATED
        if not self.sync and mode == UpsertMode.SKIP:
            return Action.SKIPPED
        return Action.UPDATED

    def reconcile(self, key: str, payload: Dict[str, Any], mode: UpsertMode,
                  create_payload: Optional[Dict[str, Any]] = None) -> Action:
        """
        Look up, decide and (unless dry-running) write one entry.

        Args:
            key: Natural key value
            payload: Fields to write on update (and on create when no
                create_payload is given)
            mode: Upsert mode
            create_payload: Full payload for creating a missing entry

        Returns:
            The action taken (or that would be taken in a dry run)

        Raises:
            RemoteError: If a request fails or the existing entry has no id
        """
        existing = self.find_existing(key)
        action = self.decide(existing, mode)

        if action == Action.SKIPPED:
            return action

        if action == Action.UPDATED:
            entry_id = existing.entry_id
            if entry_id is None or entry_id == "":
                raise RemoteError(f"Cannot update '{key}': missing id/documentId.")
            if not self.dry_run:
                self.client.update(self.endpoint, entry_id, payload)
            return action

        if not self.dry_run:
            self.client.create(self.endpoint, create_payload if create_payload is not None else payload)
        return action

    def update_entry(self, record: StoreRecord, payload: Dict[str, Any], label: str = "") -> Action:
        """
        Update an already-fetched entry directly (in-place migrations).

        Raises:
            RemoteError: If the entry has no id or the request fails
        """
        entry_id = record.entry_id
        if entry_id is None or entry_id == "":
            raise RemoteError(f"Cannot update '{label}': missing id/documentId.")
        if not self.dry_run:
            self.client.update(self.endpoint, entry_id, payload)
        else:
            logging.debug(f"Dry run: would update {self.endpoint}/{entry_id}")
        return Action.UPDATED
