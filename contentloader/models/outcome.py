"""
Batch outcome models.

A RowResult is what processing one row produces: either an action that was
taken (or would have been, in a dry run) or the error that stopped the row.
BatchOutcome accumulates RowResults for a whole run.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import LoaderError


class Action(str, Enum):
    """Terminal state of a row that did not fail."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


class RowResult(BaseModel):
    """
    Outcome of one row: exactly one of ``action`` or ``error`` is set.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    key: str = ""
    line: Optional[int] = None
    action: Optional[Action] = None
    error: Optional[LoaderError] = None
    skip_reason: Optional[str] = None
    detail: str = ""

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def ok(cls, action: Action, key: str, line: Optional[int] = None,
           skip_reason: Optional[str] = None, detail: str = "") -> "RowResult":
        return cls(key=key, line=line, action=action, skip_reason=skip_reason, detail=detail)

    @classmethod
    def fail(cls, error: LoaderError, key: str = "", line: Optional[int] = None) -> "RowResult":
        return cls(key=key, line=line, error=error)


class BatchOutcome(BaseModel):
    """
    Counters and diagnostics for one run.
    """

    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    scanned: int = 0

    skip_reasons: Dict[str, int] = Field(
        default_factory=dict,
        description="Sub-counts of skipped rows by reason (e.g. 'no_content')"
    )

    messages: List[str] = Field(
        default_factory=list,
        description="Per-row diagnostic lines in processing order"
    )

    def record(self, result: RowResult, message: str = "") -> None:
        """
        Fold one row's result into the counters.

        Args:
            result: The row's result
            message: Diagnostic line to keep for the report
        """
        self.scanned += 1
        if result.error is not None:
            self.failed += 1
        elif result.action == Action.CREATED:
            self.created += 1
        elif result.action == Action.UPDATED:
            self.updated += 1
        else:
            self.skipped += 1
            if result.skip_reason:
                self.skip_reasons[result.skip_reason] = self.skip_reasons.get(result.skip_reason, 0) + 1
        if message:
            self.messages.append(message)

    @property
    def total(self) -> int:
        return self.created + self.updated + self.skipped + self.failed
