"""
File-driven batch runners.

A runner walks the input rows in order and turns each one into a RowResult:
validate, reject duplicate keys, build the payload, reconcile against the
store. Errors raised while processing a row are captured in that row's result
and never reach the next row, so one bad record cannot abort the batch.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Set

from ..blocks import blocks_to_payload, convert_text_to_blocks
from ..errors import LoaderError, ValidationError
from ..models import (
    Action,
    BatchOutcome,
    EntryPatch,
    PagePayload,
    Row,
    RowResult,
    RunOptions,
    StorePayload,
)
from ..normalize.payloads import (
    apply_publish_marker,
    build_article_payload,
    build_page_payload,
    build_redirect_payload,
    natural_key_for,
)
from ..normalize.text import parse_tags
from ..reconcile import Reconciler, UpsertMode
from ..schemas import TargetSchema
from ..store import StoreClient, TagResolver


@dataclass
class PreparedRow:
    """
    A validated row, ready to reconcile.
    """
    key: str
    payload: Optional[StorePayload] = None
    create_payload: Optional[StorePayload] = None
    tag_names: List[str] = field(default_factory=list)
    skip_reason: Optional[str] = None
    detail: str = ""


class BatchRunner(ABC):
    """
    Base class for runners that process rows from an input file.
    """

    sync = False
    verb = "Importing"

    def __init__(self, client: StoreClient, schema: TargetSchema, options: RunOptions,
                 reconciler: Optional[Reconciler] = None):
        """
        Initialize the runner.

        Args:
            client: Store client
            schema: Target collection
            options: Validated run options
            reconciler: Optional reconciler (defaults to one for the schema)
        """
        self.client = client
        self.schema = schema
        self.options = options
        self.mode = UpsertMode(options.upsert_mode)
        self.reconciler = reconciler or Reconciler(
            client, schema.endpoint, schema.key_field, dry_run=options.dry_run, sync=self.sync
        )

    @abstractmethod
    def prepare(self, row: Row) -> PreparedRow:
        """
        Validate a row and build its payload.

        Raises:
            ValidationError: If required fields are missing or malformed
        """
        pass

    def before_write(self, prepared: PreparedRow) -> None:
        """Hook for side effects that must only run for non-duplicate rows."""

    def process_row(self, row: Row, seen_keys: Set[str]) -> RowResult:
        """
        Process one row from pending to its terminal state.

        Args:
            row: The input row
            seen_keys: Keys already claimed by earlier rows of this batch

        Returns:
            The row's result; exceptions never escape
        """
        key = ""
        try:
            prepared = self.prepare(row)
            key = prepared.key

            if key in seen_keys:
                raise ValidationError(
                    f"[line {row.line}] Duplicate {self.schema.key_field} in input: '{key}'.",
                    line=row.line,
                )
            seen_keys.add(key)

            if prepared.skip_reason:
                return RowResult.ok(Action.SKIPPED, key, row.line, skip_reason=prepared.skip_reason)

            self.before_write(prepared)

            create_payload = prepared.create_payload.to_payload() if prepared.create_payload else None
            action = self.reconciler.reconcile(key, prepared.payload.to_payload(), self.mode, create_payload)

            skip_reason = None
            if action == Action.SKIPPED:
                skip_reason = "missing" if self.sync else "exists"
            return RowResult.ok(action, key, row.line, skip_reason=skip_reason, detail=prepared.detail)

        except LoaderError as e:
            return RowResult.fail(e, key, row.line)
        except Exception as e:
            logging.debug("Unexpected error while processing row", exc_info=True)
            return RowResult.fail(LoaderError(str(e)), key, row.line)

    def describe(self, result: RowResult) -> str:
        """Format the log line for a row result."""
        if result.error is not None:
            if isinstance(result.error, ValidationError):
                return str(result.error)
            return f"[line {result.line}] Failed '{result.key}': {result.error}"
        if result.action == Action.CREATED:
            return f"[create] {result.key}{result.detail}"
        if result.action == Action.UPDATED:
            return f"[update] {result.key}{result.detail}"
        reasons = {
            "exists": "already exists",
            "missing": "does not exist",
            "no_content": "has no content to migrate",
        }
        return f"[skip] {result.key} {reasons.get(result.skip_reason, '')}".rstrip()

    def run(self, rows: List[Row], outcome: Optional[BatchOutcome] = None) -> BatchOutcome:
        """
        Process all rows in order.

        Args:
            rows: Input rows
            outcome: Accumulator to add to (a fresh one by default)

        Returns:
            The accumulated outcome
        """
        outcome = outcome if outcome is not None else BatchOutcome()
        seen_keys: Set[str] = set()

        logging.info(
            f"{self.verb} {len(rows)} {self.schema.label} "
            f"(mode={self.mode.value}, dryRun={self.options.dry_run}, forcePublish={self.options.force_publish})"
        )

        for row in rows:
            result = self.process_row(row, seen_keys)
            message = self.describe(result)
            if result.failed:
                logging.error(message)
            else:
                logging.info(message)
            outcome.record(result, message)

        return outcome


class PageImportRunner(BatchRunner):
    """Seed import of pages keyed by routePath."""

    def prepare(self, row: Row) -> PreparedRow:
        payload = build_page_payload(row, self.options)
        return PreparedRow(key=payload.route_path, payload=payload)


class ArticleImportRunner(BatchRunner):
    """Seed import of blog posts or news articles keyed by slug, with tag resolution."""

    def __init__(self, client: StoreClient, schema: TargetSchema, options: RunOptions,
                 reconciler: Optional[Reconciler] = None, tag_resolver: Optional[TagResolver] = None):
        super().__init__(client, schema, options, reconciler)
        self.tag_resolver = tag_resolver or TagResolver(client, options)

    def prepare(self, row: Row) -> PreparedRow:
        payload = build_article_payload(row, self.schema, [], self.options)
        return PreparedRow(key=payload.slug, payload=payload, tag_names=parse_tags(row.raw("tags")))

    def before_write(self, prepared: PreparedRow) -> None:
        tag_ids = self.tag_resolver.ensure_tag_ids(prepared.tag_names)
        if tag_ids:
            prepared.payload.tags = tag_ids


class RedirectImportRunner(BatchRunner):
    """Seed import of redirects keyed by fromPath."""

    def prepare(self, row: Row) -> PreparedRow:
        payload = build_redirect_payload(row, self.options)
        return PreparedRow(key=payload.from_path, payload=payload, detail=f" -> {payload.to_url}")


class PageSyncRunner(BatchRunner):
    """
    Base for runs that patch existing pages from a seed file.

    Existing pages are updated; missing pages are created only in 'create' mode.
    """

    sync = True
    verb = "Syncing"

    def route_path(self, row: Row) -> str:
        route_path = natural_key_for(row, self.schema)
        if not route_path:
            raise ValidationError(f"[line {row.line}] Missing routePath.", line=row.line)
        return route_path

    def create_payload(self, row: Row, route_path: str) -> PagePayload:
        payload = PagePayload(
            route_path=route_path,
            page_name=row.text("pageName") or route_path,
            content=str(row.raw("content") or ""),
            is_active=True,
        )
        apply_publish_marker(payload, self.options)
        return payload


class ContentSyncRunner(PageSyncRunner):
    """Copy each row's legacy ``content`` onto the matching page."""

    def prepare(self, row: Row) -> PreparedRow:
        route_path = self.route_path(row)
        patch = EntryPatch(content=str(row.raw("content") or ""))
        apply_publish_marker(patch, self.options)
        return PreparedRow(key=route_path, payload=patch, create_payload=self.create_payload(row, route_path))


class BlockSyncRunner(PageSyncRunner):
    """Convert each row's ``content`` into page content blocks."""

    def prepare(self, row: Row) -> PreparedRow:
        route_path = self.route_path(row)
        content = str(row.raw("content") or "")
        if not content.strip():
            return PreparedRow(key=route_path, skip_reason="no_content")

        blocks = blocks_to_payload(convert_text_to_blocks(content, self.schema.block_namespace))

        patch = EntryPatch(content_blocks=blocks)
        if self.options.clear_legacy_content:
            patch.content = ""
        apply_publish_marker(patch, self.options)

        create = self.create_payload(row, route_path)
        create.content_blocks = blocks

        return PreparedRow(key=route_path, payload=patch, create_payload=create,
                           detail=f" ({len(blocks)} blocks)")

