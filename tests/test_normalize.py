"""
Unit tests for record normalization.

Covers the field helpers, SEO derivation and the per-schema payload builders.
"""

import re
import unittest
from datetime import date

from contentloader.errors import ValidationError
from contentloader.models import Row, RunOptions
from contentloader.normalize import (
    build_meta_description,
    build_meta_title,
    derive_summary,
    normalize_date,
    normalize_from_path,
    normalize_route_path,
    parse_boolean,
    parse_entity_id,
    parse_json_field,
    parse_tags,
    slugify,
    to_status_code,
)
from contentloader.normalize.payloads import (
    build_article_payload,
    build_page_payload,
    build_redirect_payload,
)
from contentloader.normalize.seo import DESCRIPTION_PADDING
from contentloader.schemas import schema_registry

SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def options(**overrides) -> RunOptions:
    return RunOptions(operation="import", token="t", **overrides)


class TestFieldHelpers(unittest.TestCase):
    """Test the scalar normalization helpers."""

    def test_parse_boolean_vocabulary(self):
        for value in ("true", "1", "Yes", " y ", True):
            self.assertTrue(parse_boolean(value, False))
        for value in ("false", "0", "NO", "n", False):
            self.assertFalse(parse_boolean(value, True))
        self.assertTrue(parse_boolean("maybe", True))
        self.assertFalse(parse_boolean("", False))
        self.assertTrue(parse_boolean(None))

    def test_route_paths(self):
        self.assertEqual(normalize_route_path("about/"), "/about")
        self.assertEqual(normalize_route_path("  /a/b// "), "/a/b")
        self.assertEqual(normalize_route_path("/"), "/")
        self.assertEqual(normalize_route_path(""), "/")
        self.assertEqual(normalize_route_path("///"), "/")
        self.assertEqual(normalize_route_path("/About"), "/About")

    def test_redirect_from_paths(self):
        self.assertEqual(normalize_from_path("old-page"), "/old-page")
        self.assertEqual(normalize_from_path(" /old/ "), "/old/")
        self.assertEqual(normalize_from_path(""), "")

    def test_slugify(self):
        self.assertEqual(slugify("Hello, World!"), "hello-world")
        self.assertEqual(slugify("  Multiple   spaces -- and---dashes "), "multiple-spaces-and-dashes")
        self.assertEqual(slugify("--Taxi Ranks--"), "taxi-ranks")
        self.assertEqual(slugify("!!!"), "")

    def test_slugs_only_contain_safe_characters(self):
        titles = [
            "Gautrain: New Routes (2024)",
            "  Café & Bistro -- Opening!! ",
            "What's new_in_transport?",
            "Ünïcode Tïtle",
            "A -- B -- C",
            "12 Tips for Commuters",
        ]
        for title in titles:
            slug = slugify(title)
            self.assertRegex(slug, SLUG_RE, msg=title)

    def test_normalize_date(self):
        self.assertEqual(normalize_date("2024-03-05"), "2024-03-05")
        self.assertEqual(normalize_date("2024-03-05T23:30:00+02:00"), "2024-03-05")
        self.assertEqual(normalize_date("2024-03-05T23:30:00-02:00"), "2024-03-06")
        self.assertEqual(normalize_date("March 5, 2024"), "2024-03-05")
        self.assertEqual(normalize_date("not a date"), "")
        self.assertEqual(normalize_date(None), "")

    def test_parse_tags(self):
        self.assertEqual(parse_tags("Transit, News|Safety,,"), ["Transit", "News", "Safety"])
        self.assertEqual(parse_tags(["Transit", " ", " News "]), ["Transit", "News"])
        self.assertEqual(parse_tags(""), [])
        self.assertEqual(parse_tags(None), [])

    def test_parse_entity_id(self):
        self.assertEqual(parse_entity_id("42"), 42)
        self.assertEqual(parse_entity_id(7), 7)
        self.assertEqual(parse_entity_id("abc-1"), "abc-1")
        self.assertIsNone(parse_entity_id("  "))
        self.assertIsNone(parse_entity_id(None))

    def test_parse_json_field(self):
        self.assertEqual(parse_json_field('{"@type": "WebPage"}'), {"@type": "WebPage"})
        self.assertEqual(parse_json_field({"a": 1}), {"a": 1})
        self.assertIsNone(parse_json_field("   "))
        with self.assertRaises(ValidationError) as ctx:
            parse_json_field("{broken", line=7)
        self.assertEqual(ctx.exception.line, 7)
        self.assertIn("[line 7]", str(ctx.exception))

    def test_status_codes(self):
        self.assertEqual(to_status_code("302"), "Redirecct-302")
        self.assertEqual(to_status_code("Redirect-302"), "Redirecct-302")
        self.assertEqual(to_status_code("301"), "Redirect-301")
        self.assertEqual(to_status_code(""), "Redirect-301")
        self.assertEqual(to_status_code("418"), "Redirect-301")


class TestSeo(unittest.TestCase):
    """Test meta description, meta title and summary derivation."""

    def test_short_description_is_padded(self):
        result = build_meta_description("Short.", "")
        self.assertEqual(result, f"Short. {DESCRIPTION_PADDING}")
        self.assertGreaterEqual(len(result), 120)
        self.assertLessEqual(len(result), 155)

    def test_fallback_is_appended_before_padding(self):
        fallback = "Taxi ranks across the city are getting shelters, lighting and new signage this winter."
        result = build_meta_description("Big news.", fallback)
        self.assertTrue(result.startswith(f"Big news. {fallback}"))
        self.assertGreaterEqual(len(result), 120)

    def test_empty_description_keeps_padding_until_minimum(self):
        result = build_meta_description("", "")
        self.assertGreaterEqual(len(result), 120)
        self.assertEqual(len(result), 155)
        self.assertTrue(result.endswith("…"))

    def test_long_description_is_truncated(self):
        result = build_meta_description("word " * 60, "")
        self.assertEqual(len(result), 155)
        self.assertTrue(result.endswith("…"))
        self.assertNotIn("  ", result)

    def test_description_within_bounds_is_unchanged(self):
        text = "x" * 130
        self.assertEqual(build_meta_description(text, "ignored fallback"), text)

    def test_meta_title_defaults_and_truncates(self):
        self.assertEqual(build_meta_title("", "Home"), "Home")
        long_title = "Commuters" * 10
        result = build_meta_title("", long_title)
        self.assertEqual(len(result), 60)
        self.assertTrue(result.endswith("…"))

    def test_summary_from_first_paragraph(self):
        body = "<p>First <strong>para</strong>.</p><p>Second paragraph.</p>"
        self.assertEqual(derive_summary(body), "First para.")
        self.assertEqual(derive_summary("Plain first.\n\nPlain second."), "Plain first.")
        self.assertEqual(derive_summary(""), "")

    def test_summary_is_truncated(self):
        summary = derive_summary("word " * 100)
        self.assertEqual(len(summary), 170)
        self.assertTrue(summary.endswith("…"))


class TestPayloadBuilders(unittest.TestCase):
    """Test mapping rows to canonical payloads."""

    def test_minimal_page(self):
        row = Row(fields={"routePath": "/", "pageName": "Home", "content": ""}, line=1)
        payload = build_page_payload(row, options()).to_payload()
        self.assertEqual(payload, {"routePath": "/", "pageName": "Home", "content": "", "isActive": True})

    def test_page_seo_only_when_present(self):
        row = Row(fields={
            "routePath": "about/",
            "pageName": " About ",
            "metaTitle": "About us",
            "noindex": "yes",
            "schemaJson": '{"@type": "AboutPage"}',
            "isActive": "no",
        }, line=3)
        payload = build_page_payload(row, options()).to_payload()
        self.assertEqual(payload["routePath"], "/about")
        self.assertEqual(payload["pageName"], "About")
        self.assertFalse(payload["isActive"])
        self.assertEqual(payload["seo"], {
            "metaTitle": "About us",
            "noindex": True,
            "schemaJson": {"@type": "AboutPage"},
        })

    def test_page_content_is_kept_verbatim(self):
        content = "  # Title\n\n  indented copy  "
        row = Row(fields={"routePath": "/x", "pageName": "X", "content": content}, line=1)
        self.assertEqual(build_page_payload(row, options()).content, content)

    def test_page_missing_route_path(self):
        row = Row(fields={"routePath": "", "pageName": "Orphan"}, line=4)
        with self.assertRaises(ValidationError) as ctx:
            build_page_payload(row, options())
        self.assertEqual(ctx.exception.line, 4)

    def test_page_invalid_schema_json(self):
        row = Row(fields={"routePath": "/", "pageName": "Home", "schemaJson": "{oops"}, line=9)
        with self.assertRaises(ValidationError) as ctx:
            build_page_payload(row, options())
        self.assertIn("[line 9]", str(ctx.exception))

    def test_publish_markers(self):
        row = Row(fields={"routePath": "/", "pageName": "Home"}, line=1)

        published = build_page_payload(row, options(force_publish=True)).to_payload()
        self.assertRegex(published["publishedAt"], r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")

        unpublished = build_page_payload(row, options(force_unpublish=True)).to_payload()
        self.assertIn("publishedAt", unpublished)
        self.assertIsNone(unpublished["publishedAt"])

        both = build_page_payload(row, options(force_publish=True, force_unpublish=True)).to_payload()
        self.assertIsNotNone(both["publishedAt"])

        row_unpublish = Row(fields={"routePath": "/", "pageName": "Home", "unpublish": "true"}, line=1)
        self.assertIsNone(build_page_payload(row_unpublish, options()).to_payload()["publishedAt"])

        self.assertNotIn("publishedAt", build_page_payload(row, options()).to_payload())

    def test_news_article(self):
        row = Row(fields={
            "title": "Taxi Ranks in Joburg!",
            "content": "<p>New shelters are going up at the main taxi ranks.</p><p>More soon.</p>",
            "coverImageId": "",
        }, line=2)
        schema = schema_registry.get_schema("news")
        payload = build_article_payload(row, schema, [3, 4], options(default_cover_image_id="12"),
                                        today=date(2024, 6, 1)).to_payload()

        self.assertEqual(payload["slug"], "taxi-ranks-in-joburg")
        self.assertEqual(payload["summary"], "New shelters are going up at the main taxi ranks.")
        self.assertNotIn("excerpt", payload)
        self.assertEqual(payload["publishDate"], "2024-06-01")
        self.assertEqual(payload["coverImage"], 12)
        self.assertEqual(payload["tags"], [3, 4])
        self.assertEqual(len(payload["seo"]), 1)
        seo = payload["seo"][0]
        self.assertEqual(seo["metaTitle"], "Taxi Ranks in Joburg!")
        self.assertGreaterEqual(len(seo["metaDescription"]), 120)
        self.assertLessEqual(len(seo["metaDescription"]), 155)
        self.assertFalse(seo["noindex"])

    def test_blog_article_uses_excerpt_and_explicit_slug(self):
        row = Row(fields={
            "title": "Weekend routes",
            "slug": "weekend-routes-2024",
            "excerpt": "Where to catch a ride on Sundays.",
            "publishDate": "2024-02-10",
            "tags": "a|b",
        }, line=1)
        schema = schema_registry.get_schema("blog")
        payload = build_article_payload(row, schema, [], options()).to_payload()
        self.assertEqual(payload["slug"], "weekend-routes-2024")
        self.assertEqual(payload["excerpt"], "Where to catch a ride on Sundays.")
        self.assertNotIn("summary", payload)
        self.assertNotIn("tags", payload)
        self.assertNotIn("coverImage", payload)
        self.assertEqual(payload["publishDate"], "2024-02-10")

    def test_article_requires_title(self):
        row = Row(fields={"slug": "no-title"}, line=5)
        with self.assertRaises(ValidationError):
            build_article_payload(row, schema_registry.get_schema("blog"), [], options())

    def test_redirect(self):
        row = Row(fields={"fromPath": "old", "toUrl": " /new ", "statusCode": "302", "notes": " "}, line=2)
        payload = build_redirect_payload(row, options()).to_payload()
        self.assertEqual(payload, {
            "fromPath": "/old",
            "toUrl": "/new",
            "statusCode": "Redirecct-302",
            "isActive": True,
            "notes": None,
        })

    def test_redirect_requires_target(self):
        row = Row(fields={"fromPath": "/old", "toUrl": ""}, line=2)
        with self.assertRaises(ValidationError):
            build_redirect_payload(row, options())


if __name__ == "__main__":
    unittest.main()
