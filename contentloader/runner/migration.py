"""
In-place content block migration.

Instead of reading an input file, the migration pages through a collection in
the store and rewrites each entry's legacy ``content`` text as structured
``contentBlocks``. Entries that already have blocks are left alone unless
only_when_empty is turned off.
"""

import logging
from typing import Dict, Optional

from ..blocks import blocks_to_payload, convert_text_to_blocks
from ..errors import LoaderError, RemoteError
from ..models import Action, BatchOutcome, EntryPatch, RowResult, RunOptions, StoreRecord
from ..normalize.payloads import apply_publish_marker
from ..normalize.text import normalize_route_path
from ..reconcile import Reconciler
from ..schemas import TargetSchema
from ..store import StoreClient

SKIP_MESSAGES = {
    "no_content": "no legacy content",
    "has_blocks": "contentBlocks already exist",
    "no_blocks": "conversion produced no blocks",
}


class MigrationRunner:
    """
    Converts legacy text to content blocks for every entry of a collection.
    """

    blocks_field = "contentBlocks"
    legacy_field = "content"

    def __init__(self, client: StoreClient, schema: TargetSchema, options: RunOptions,
                 reconciler: Optional[Reconciler] = None):
        """
        Initialize the migration runner.

        Args:
            client: Store client
            schema: Collection to migrate ('pages', 'blog' or 'news')
            options: Validated run options (page_size, key_filter, only_when_empty, ...)
            reconciler: Optional reconciler (defaults to one for the schema)
        """
        self.client = client
        self.schema = schema
        self.options = options
        self.reconciler = reconciler or Reconciler(
            client, schema.endpoint, schema.key_field, dry_run=options.dry_run
        )

    def filters(self) -> Dict[str, str]:
        """Key filter for a targeted run, normalized like input keys."""
        value = self.options.key_filter.strip()
        if not value:
            return {}
        if self.schema.key_field == "routePath":
            value = normalize_route_path(value)
        return {self.schema.key_field: value}

    def label_for(self, record: StoreRecord) -> str:
        return str(record.get(self.schema.key_field) or record.entry_id or "")

    def process_record(self, record: StoreRecord) -> RowResult:
        """
        Migrate one fetched entry.

        Returns:
            The entry's result; exceptions never escape
        """
        label = self.label_for(record)
        try:
            if record.entry_id is None or record.entry_id == "":
                raise RemoteError(f"{label}: missing id/documentId")

            content = str(record.get(self.legacy_field) or "")
            existing_blocks = record.get(self.blocks_field)
            existing_blocks = existing_blocks if isinstance(existing_blocks, list) else []

            if not content.strip():
                return RowResult.ok(Action.SKIPPED, label, skip_reason="no_content")

            if self.options.only_when_empty and existing_blocks:
                return RowResult.ok(Action.SKIPPED, label, skip_reason="has_blocks",
                                    detail=f" ({len(existing_blocks)})")

            blocks = convert_text_to_blocks(content, self.schema.block_namespace)
            if not blocks:
                return RowResult.ok(Action.SKIPPED, label, skip_reason="no_blocks")

            patch = EntryPatch(content_blocks=blocks_to_payload(blocks))
            if self.options.clear_legacy_content:
                patch.content = ""
            apply_publish_marker(patch, self.options)

            action = self.reconciler.update_entry(record, patch.to_payload(), label)
            return RowResult.ok(action, label, detail=f" ({len(blocks)} blocks)")

        except LoaderError as e:
            return RowResult.fail(e, label)
        except Exception as e:
            logging.debug("Unexpected error while migrating entry", exc_info=True)
            return RowResult.fail(LoaderError(str(e)), label)

    @staticmethod
    def describe(result: RowResult) -> str:
        if result.error is not None:
            return f"[fail] {result.key}: {result.error}"
        if result.action == Action.UPDATED:
            return f"[update] {result.key}{result.detail}"
        return f"[skip] {result.key}: {SKIP_MESSAGES.get(result.skip_reason, 'skipped')}{result.detail}"

    def run(self, outcome: Optional[BatchOutcome] = None) -> BatchOutcome:
        """
        Page through the collection and migrate every entry.

        Returns:
            The accumulated outcome
        """
        outcome = outcome if outcome is not None else BatchOutcome()
        filters = self.filters()

        logging.info(
            f"Migrating existing {self.schema.label} content -> contentBlocks "
            f"(dryRun={self.options.dry_run}, onlyWhenEmptyBlocks={self.options.only_when_empty}, "
            f"forcePublish={self.options.force_publish}, clearLegacyContent={self.options.clear_legacy_content}"
            f"{', filter=' + list(filters.values())[0] if filters else ''})"
        )

        records = list(self.client.iter_all(
            self.schema.endpoint,
            page_size=self.options.page_size,
            filters=filters,
            populate=[self.blocks_field],
        ))
        if not records:
            logging.info(f"No matching {self.schema.label} found.")

        for record in records:
            result = self.process_record(record)
            message = self.describe(result)
            if result.failed:
                logging.error(message)
            else:
                logging.info(message)
            outcome.record(result, message)

        return outcome
