"""Record normalization: field helpers, SEO derivation and payload builders."""

from .text import (
    parse_boolean,
    normalize_route_path,
    normalize_from_path,
    slugify,
    normalize_date,
    parse_tags,
    parse_entity_id,
    parse_json_field,
    to_status_code,
)
from .seo import build_meta_description, build_meta_title, derive_summary, truncate

__all__ = [
    "parse_boolean",
    "normalize_route_path",
    "normalize_from_path",
    "slugify",
    "normalize_date",
    "parse_tags",
    "parse_entity_id",
    "parse_json_field",
    "to_status_code",
    "build_meta_description",
    "build_meta_title",
    "derive_summary",
    "truncate",
]
