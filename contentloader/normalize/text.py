"""
Field-level normalization helpers.

These functions are shared by all payload builders: trimming and coercion of
booleans, paths, slugs, dates, tag lists, entity ids and embedded JSON.
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, List, Optional, Union

from ..errors import ValidationError

TRUE_VALUES = {"true", "1", "yes", "y"}
FALSE_VALUES = {"false", "0", "no", "n"}

DATE_FORMATS = [
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
]

STATUS_CODES = {
    "301": "Redirect-301",
    "302": "Redirecct-302",
    "redirect-301": "Redirect-301",
    "redirecct-302": "Redirecct-302",
    "redirect-302": "Redirecct-302",
}
DEFAULT_STATUS_CODE = "Redirect-301"


def parse_boolean(value: Any, default: bool = True) -> bool:
    """
    Parse a boolean from a small fixed vocabulary.

    Args:
        value: Raw value (string, bool, number or None)
        default: Returned for empty or unrecognized values

    Returns:
        The parsed boolean
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    return default


def normalize_route_path(value: Any) -> str:
    """
    Normalize a page route: one leading slash, no trailing slashes.

    An empty value maps to the root route "/".
    """
    trimmed = str(value if value is not None else "").strip()
    if not trimmed or trimmed == "/":
        return "/"
    with_leading = trimmed if trimmed.startswith("/") else f"/{trimmed}"
    return with_leading.rstrip("/") or "/"


def normalize_from_path(value: Any) -> str:
    """Normalize a redirect source path; empty stays empty so the row fails validation."""
    trimmed = str(value if value is not None else "").strip()
    if not trimmed:
        return ""
    return trimmed if trimmed.startswith("/") else f"/{trimmed}"


def slugify(value: Any) -> str:
    """
    Derive a URL slug containing only ``[a-z0-9-]``.

    Examples:
        slugify("Hello, World!")      # "hello-world"
        slugify("  --Taxi  Ranks-- ")  # "taxi-ranks"
    """
    text = str(value if value is not None else "").strip().lower()
    text = re.sub(r"[^a-z0-9\s-]", "", text)
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"-+", "-", text)
    return text.strip("-")


def normalize_date(value: Any) -> str:
    """
    Convert a date-like value to ``YYYY-MM-DD``.

    Returns:
        The ISO date, or an empty string when the value cannot be parsed
    """
    raw = str(value if value is not None else "").strip()
    if not raw:
        return ""

    parsed: Optional[datetime] = None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        for fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(raw, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return ""
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def parse_tags(value: Any) -> List[str]:
    """
    Accept tags as a list or as a comma/pipe separated string.

    Returns:
        Trimmed, non-empty tag names in input order
    """
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    raw = str(value if value is not None else "").strip()
    if not raw:
        return []
    return [item.strip() for item in re.split(r"[|,]", raw) if item.strip()]


def parse_entity_id(value: Any) -> Optional[Union[int, str]]:
    """Numeric strings become ints, other non-empty values stay strings, empty is None."""
    if value is None:
        return None
    raw = str(value).strip()
    if not raw:
        return None
    return int(raw) if raw.isdigit() else raw


def parse_json_field(value: Any, line: Optional[int] = None, field: str = "schemaJson") -> Any:
    """
    Parse an embedded JSON field.

    Objects and arrays (from JSON input) pass through unchanged; strings
    (from CSV input) are decoded.

    Returns:
        The decoded value, or None when the field is empty

    Raises:
        ValidationError: If the string is not valid JSON
    """
    if value is None or value == "":
        return None
    if isinstance(value, (dict, list)):
        return value
    trimmed = str(value).strip()
    if not trimmed:
        return None
    try:
        return json.loads(trimmed)
    except json.JSONDecodeError:
        raise ValidationError(f"[line {line}] Invalid {field} JSON.", line=line)


def to_status_code(value: Any) -> str:
    """Map a redirect status (301, 302, redirect-301, ...) to the store's enum value."""
    if value is None or value == "":
        return DEFAULT_STATUS_CODE
    return STATUS_CODES.get(str(value).strip().lower(), DEFAULT_STATUS_CODE)
