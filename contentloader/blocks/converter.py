"""
Plain-text to content block conversion.

Legacy entries keep their body in one freeform text field. This module splits
that text on blank lines and classifies each paragraph as a heading, an
ordered or unordered list, or a rich-text paragraph. Only a narrow Markdown
subset is recognized; anything else is kept verbatim as rich text.

Conversion is a pure function of the input text, so re-running a migration
produces byte-identical blocks.
"""

import re
from typing import Any, Dict, List

from ..models import ContentBlock, ListBlock, RichText, SectionHeading

PARAGRAPH_BREAK_RE = re.compile(r"\n{2,}")
HEADING_RE = re.compile(r"^(#{1,4})\s+(.+)$", re.DOTALL)
BULLET_RE = re.compile(r"^[-*]\s+")
NUMBERED_RE = re.compile(r"^\d+\.\s+")

HEADING_LEVELS = {1: "h1", 2: "h2", 3: "h3", 4: "h4"}


def split_text_blocks(text: str) -> List[str]:
    """
    Split text into trimmed, non-empty paragraphs.

    Windows and old Mac line endings are normalized first so a paragraph
    break is always two or more consecutive newlines.
    """
    source = str(text if text is not None else "").replace("\r\n", "\n").replace("\r", "\n")
    return [block.strip() for block in PARAGRAPH_BREAK_RE.split(source) if block.strip()]


def list_items(lines: List[str]) -> List[str]:
    """Strip bullet or number markers from list lines, dropping empty items."""
    items = []
    for line in lines:
        item = NUMBERED_RE.sub("", BULLET_RE.sub("", line.strip()), count=1).strip()
        if item:
            items.append(item)
    return items


def classify_block(block: str, namespace: str = "page") -> List[ContentBlock]:
    """
    Classify one paragraph.

    Args:
        block: A trimmed, non-empty paragraph
        namespace: Component namespace for the produced block

    Returns:
        Zero or one block (lists without usable items produce nothing)
    """
    heading = HEADING_RE.match(block)
    if heading:
        level = HEADING_LEVELS.get(len(heading.group(1)), "h4")
        return [SectionHeading.in_namespace(namespace, text=heading.group(2).strip(), level=level)]

    lines = [line.strip() for line in block.split("\n") if line.strip()]
    is_unordered = bool(lines) and all(BULLET_RE.match(line) for line in lines)
    is_ordered = bool(lines) and all(NUMBERED_RE.match(line) for line in lines)

    if is_unordered or is_ordered:
        items = list_items(lines)
        if not items:
            return []
        return [ListBlock.in_namespace(
            namespace,
            list_style="ordered" if is_ordered else "unordered",
            items_text="\n".join(f"- {item}" for item in items),
        )]

    return [RichText.in_namespace(namespace, body=block)]


def convert_text_to_blocks(text: str, namespace: str = "page") -> List[ContentBlock]:
    """
    Convert freeform text into an ordered list of content blocks.

    Args:
        text: The legacy text field
        namespace: Component namespace ('page' or 'article')

    Returns:
        Blocks in paragraph order

    Examples:
        convert_text_to_blocks("# Title\\n\\nSome body text.\\n\\n- a\\n- b")
        # -> [SectionHeading(h1, "Title"), RichText("Some body text."), ListBlock(unordered, "- a\\n- b")]
    """
    blocks: List[ContentBlock] = []
    for paragraph in split_text_blocks(text):
        blocks.extend(classify_block(paragraph, namespace))
    return blocks


def blocks_to_payload(blocks: List[ContentBlock]) -> List[Dict[str, Any]]:
    """Serialize blocks to the store's dynamic-zone shape."""
    return [block.to_payload() for block in blocks]
