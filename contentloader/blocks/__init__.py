"""Plain-text to structured content block conversion."""

from .converter import convert_text_to_blocks, blocks_to_payload, split_text_blocks

__all__ = ["convert_text_to_blocks", "blocks_to_payload", "split_text_blocks"]
