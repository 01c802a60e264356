"""
SEO metadata and summary derivation.

The store enforces a 120-155 character meta description and a 60 character
meta title, so descriptions are padded or truncated here before writing.
Summaries are derived from the body when an entry has none.
"""

import re
from typing import Any

META_DESCRIPTION_MIN = 120
META_DESCRIPTION_MAX = 155
META_TITLE_MAX = 60
SUMMARY_MAX = 170
ELLIPSIS = "…"

DESCRIPTION_PADDING = (
    "Read the full article on Commute ZA for practical commuter insights "
    "and route-planning guidance across South Africa."
)

BLOCK_TAG_RE = re.compile(r"</?(p|div|br|h[1-6]|li|ul|ol|blockquote)[^>]*>", re.IGNORECASE)
ANY_TAG_RE = re.compile(r"<[^>]+>")


def collapse_whitespace(value: Any) -> str:
    return re.sub(r"\s+", " ", str(value if value is not None else "")).strip()


def truncate(value: Any, max_length: int) -> str:
    """
    Collapse whitespace and cut to ``max_length`` characters, ending in an ellipsis.
    """
    text = collapse_whitespace(value)
    if len(text) <= max_length:
        return text
    return text[:max_length - 1].rstrip() + ELLIPSIS


def build_meta_description(value: Any, fallback: Any = "") -> str:
    """
    Build a meta description within the store's length bounds.

    The explicit value is extended with the fallback text while shorter than
    the minimum, then with the canned padding until the minimum is reached,
    and finally truncated to the maximum with a trailing ellipsis.

    Args:
        value: Explicit meta description (may be empty)
        fallback: Summary or body text to extend a short description with

    Returns:
        The description
    """
    text = collapse_whitespace(value)
    fallback_text = collapse_whitespace(fallback)

    if len(text) < META_DESCRIPTION_MIN and fallback_text:
        text = collapse_whitespace(f"{text} {fallback_text}" if text else fallback_text)

    while len(text) < META_DESCRIPTION_MIN:
        text = collapse_whitespace(f"{text} {DESCRIPTION_PADDING}" if text else DESCRIPTION_PADDING)

    if len(text) > META_DESCRIPTION_MAX:
        text = text[:META_DESCRIPTION_MAX - 1].rstrip() + ELLIPSIS

    return text


def build_meta_title(value: Any, title: Any = "") -> str:
    """Meta title defaults to the entry title and is truncated to the maximum."""
    text = collapse_whitespace(value) or collapse_whitespace(title)
    return truncate(text, META_TITLE_MAX)


def strip_markup(value: Any) -> str:
    """Turn block-level tags into line breaks and drop all other tags."""
    text = BLOCK_TAG_RE.sub("\n", str(value if value is not None else ""))
    text = ANY_TAG_RE.sub("", text)
    text = re.sub(r"\s+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def first_paragraph(value: Any) -> str:
    source = str(value if value is not None else "").strip()
    if not source:
        return ""
    for paragraph in re.split(r"\n\s*\n", strip_markup(source)):
        if paragraph.strip():
            return paragraph.strip()
    return ""


def derive_summary(body: Any) -> str:
    """
    Derive a summary from the first paragraph of the body.

    Returns:
        At most 170 characters, or an empty string for an empty body
    """
    return truncate(first_paragraph(body), SUMMARY_MAX)
