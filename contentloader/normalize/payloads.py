"""
Payload builders: map one input Row to the canonical payload of a target schema.

Each builder validates the row's required fields, normalizes every value and
sets optional fields only when the row (or the run options) provides them.
"""

from datetime import date, datetime, timezone
from typing import List, Optional, Union

from ..errors import ValidationError
from ..models import (
    ArticlePayload,
    PagePayload,
    RedirectPayload,
    Row,
    RunOptions,
    SeoEntry,
    StorePayload,
)
from ..schemas import TargetSchema
from .seo import build_meta_description, build_meta_title, derive_summary, strip_markup
from .text import (
    normalize_date,
    normalize_from_path,
    normalize_route_path,
    parse_boolean,
    parse_entity_id,
    parse_json_field,
    slugify,
    to_status_code,
)


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def apply_publish_marker(payload: StorePayload, options: RunOptions, unpublish: bool = False) -> None:
    """
    Stamp or clear ``publishedAt`` on a payload.

    Force-publish always wins; otherwise an unpublish request clears the
    marker. With neither, the field is left unset and the store keeps its
    current publication state.

    Args:
        payload: Payload to modify in place
        options: Run options carrying force_publish / force_unpublish
        unpublish: Per-row unpublish request
    """
    if options.force_publish:
        payload.published_at = utc_timestamp()
    elif options.force_unpublish or unpublish:
        payload.published_at = None


def natural_key_for(row: Row, schema: TargetSchema) -> str:
    """
    Compute the natural key of a row for the given schema.

    Returns:
        The normalized key, or an empty string when it cannot be derived
    """
    if schema.key_field == "routePath":
        if not row.text("routePath"):
            return ""
        return normalize_route_path(row.raw("routePath"))
    if schema.key_field == "fromPath":
        return normalize_from_path(row.raw("fromPath"))
    return row.text("slug") or slugify(row.text("title"))


def _build_seo(row: Row) -> Optional[SeoEntry]:
    meta_title = row.text("metaTitle")
    meta_description = row.text("metaDescription")
    canonical_url = row.text("canonicalUrl")
    noindex = parse_boolean(row.raw("noindex"), False)
    structured_data = parse_json_field(row.raw("schemaJson"), row.line)

    if not (meta_title or meta_description or canonical_url or structured_data or noindex):
        return None

    seo = SeoEntry(noindex=noindex)
    if meta_title:
        seo.meta_title = meta_title
    if meta_description:
        seo.meta_description = meta_description
    if canonical_url:
        seo.canonical_url = canonical_url
    if structured_data:
        seo.structured_data = structured_data
    return seo


def build_page_payload(row: Row, options: RunOptions) -> PagePayload:
    """
    Build a page payload.

    The page content is passed through verbatim so layout copy keeps its
    formatting.

    Raises:
        ValidationError: If routePath or pageName is missing, or schemaJson is invalid
    """
    route_path = normalize_route_path(row.raw("routePath")) if row.text("routePath") else ""
    page_name = row.text("pageName")

    if not route_path or not page_name:
        raise ValidationError(
            f"[line {row.line}] Missing required fields. routePath='{route_path}', pageName='{page_name}'",
            line=row.line,
        )

    payload = PagePayload(
        route_path=route_path,
        page_name=page_name,
        content=str(row.raw("content") or ""),
        is_active=parse_boolean(row.raw("isActive"), True),
    )

    seo = _build_seo(row)
    if seo is not None:
        payload.seo = seo

    apply_publish_marker(payload, options, unpublish=parse_boolean(row.raw("unpublish"), False))
    return payload


def build_article_payload(row: Row, schema: TargetSchema, tag_ids: List[Union[int, str]],
                          options: RunOptions, today: Optional[date] = None) -> ArticlePayload:
    """
    Build a blog post or news article payload.

    Args:
        row: Input row
        schema: The 'blog' or 'news' schema
        tag_ids: Resolved tag ids to attach
        options: Run options
        today: Date used when a news article has no publish date

    Raises:
        ValidationError: If title or slug is missing, or schemaJson is invalid
    """
    title = row.text("title")
    slug = natural_key_for(row, schema)
    if not title or not slug:
        raise ValidationError(
            f"[line {row.line}] Missing required fields. title='{title}', slug='{slug}'",
            line=row.line,
        )

    content = str(row.raw("content", "body") or "")
    summary_value = row.text(schema.summary_field or "summary", "excerpt", "summary", "description")
    if not summary_value:
        summary_value = derive_summary(content)

    explicit_description = row.text("metaDescription") or summary_value
    fallback = next(
        (text for text in (summary_value, strip_markup(content), title) if text and text != explicit_description),
        "",
    )
    meta_description = build_meta_description(explicit_description, fallback)

    seo = SeoEntry(
        meta_title=build_meta_title(row.text("metaTitle"), title),
        meta_description=meta_description,
        noindex=parse_boolean(row.raw("noindex"), False),
    )
    canonical_url = row.text("canonicalUrl")
    if canonical_url:
        seo.canonical_url = canonical_url
    structured_data = parse_json_field(row.raw("schemaJson"), row.line)
    if structured_data:
        seo.structured_data = structured_data

    payload = ArticlePayload(title=title, slug=slug, content=content, seo=[seo])

    if summary_value:
        setattr(payload, schema.summary_field or "summary", summary_value)
    if tag_ids:
        payload.tags = list(tag_ids)

    publish_date = normalize_date(row.raw("publishDate", "date"))
    if not publish_date and schema.name == "news":
        publish_date = (today or datetime.now(timezone.utc).date()).isoformat()
    if publish_date:
        payload.publish_date = publish_date

    cover_image = parse_entity_id(row.raw("coverImageId"))
    if cover_image is None:
        cover_image = parse_entity_id(options.default_cover_image_id)
    if cover_image is not None:
        payload.cover_image = cover_image

    apply_publish_marker(payload, options)
    return payload


def build_redirect_payload(row: Row, options: RunOptions) -> RedirectPayload:
    """
    Build a redirect payload.

    Raises:
        ValidationError: If fromPath or toUrl is missing
    """
    from_path = normalize_from_path(row.raw("fromPath"))
    to_url = row.text("toUrl")
    if not from_path or not to_url:
        raise ValidationError(
            f"[line {row.line}] Missing required fields. fromPath='{from_path}', toUrl='{to_url}'",
            line=row.line,
        )

    payload = RedirectPayload(
        from_path=from_path,
        to_url=to_url,
        status_code=to_status_code(row.raw("statusCode")),
        is_active=parse_boolean(row.raw("isActive"), True),
        notes=row.text("notes") or None,
    )
    apply_publish_marker(payload, options)
    return payload
