"""
Console summary for a finished run.
"""

from typing import List, Optional

from .models import BatchOutcome

SKIP_REASON_LABELS = {
    "exists": "Skipped (already exists)",
    "missing": "Skipped (does not exist)",
    "no_content": "Skipped (no legacy content)",
    "has_blocks": "Skipped (already has blocks)",
    "no_blocks": "Skipped (no blocks produced)",
}


def format_summary(outcome: BatchOutcome, scanned_label: Optional[str] = None) -> List[str]:
    """
    Build the summary lines for a run.

    Args:
        outcome: The finished run's outcome
        scanned_label: When set, also report how many entries were scanned

    Returns:
        Lines to print, starting with "Done."
    """
    lines = ["Done."]
    if scanned_label:
        lines.append(f"{scanned_label} scanned: {outcome.scanned}")
    lines.extend([
        f"Created: {outcome.created}",
        f"Updated: {outcome.updated}",
        f"Skipped: {outcome.skipped}",
    ])
    for reason, count in sorted(outcome.skip_reasons.items()):
        lines.append(f"  {SKIP_REASON_LABELS.get(reason, f'Skipped ({reason})')}: {count}")
    lines.append(f"Failed: {outcome.failed}")
    return lines


def print_summary(outcome: BatchOutcome, scanned_label: Optional[str] = None, notes: Optional[List[str]] = None):
    """Print the run summary to stdout, followed by any notes."""
    print()
    for line in format_summary(outcome, scanned_label):
        print(line)
    for note in notes or []:
        print(note)
