"""
Unit tests for configuration handling.

Tests config.yaml loading, environment and command line precedence, run
option validation and the target schema registry.
"""

import os
import tempfile
import unittest
from pathlib import Path

from contentloader.config import ConfigManager
from contentloader.errors import ConfigurationError
from contentloader.schemas import SchemaRegistry, TargetSchema


class TestConfigManager(unittest.TestCase):
    """Test configuration management functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = Path(self.temp_dir) / "test_config.yaml"

    def tearDown(self):
        """Clean up test fixtures."""
        if self.config_path.exists():
            self.config_path.unlink()
        os.rmdir(self.temp_dir)

    def write_config(self, text: str):
        with open(self.config_path, 'w') as f:
            f.write(text)

    def test_config_creation_with_defaults(self):
        """Test config manager falls back to defaults when file missing."""
        config = ConfigManager(str(self.config_path), environ={})

        self.assertEqual(config.store_url, "http://localhost:1337")
        self.assertEqual(config.get("store.page_size"), 100)
        self.assertIsNone(config.log_filename)
        self.assertEqual(config.get("nonexistent.key", "default"), "default")

    def test_config_loading_from_file(self):
        """Test loading configuration from YAML file."""
        self.write_config("""
store:
  url: "http://cms.example:1337/"
  token: "from-file"

modes:
  import: "skip"

run:
  dry_run: true
""")
        config = ConfigManager(str(self.config_path), environ={})
        options = config.run_options("import")

        self.assertEqual(options.base_url, "http://cms.example:1337")
        self.assertEqual(options.token, "from-file")
        self.assertEqual(options.upsert_mode, "skip")
        self.assertTrue(options.dry_run)
        self.assertEqual(config.get("store.timeout"), 30.0)

    def test_invalid_yaml(self):
        """Test that unreadable config files are configuration errors."""
        self.write_config("store: [unclosed")
        with self.assertRaises(ConfigurationError):
            ConfigManager(str(self.config_path), environ={})

        self.write_config("- just\n- a list\n")
        with self.assertRaises(ConfigurationError):
            ConfigManager(str(self.config_path), environ={})

    def test_environment_overrides_file(self):
        """Test that environment variables win over config.yaml."""
        self.write_config("store:\n  url: 'http://file'\n  token: 'file-token'\n")
        environ = {
            "STRAPI_URL": "http://env.test/",
            "STRAPI_TOKEN": "env-token",
            "DRY_RUN": "yes",
            "FORCE_PUBLISH": "0",
            "PAGE_SIZE": "25",
            "SLUG": "my-post",
            "DEFAULT_COVER_IMAGE_ID": "7",
        }
        options = ConfigManager(str(self.config_path), environ=environ).run_options("migrate")

        self.assertEqual(options.base_url, "http://env.test")
        self.assertEqual(options.token, "env-token")
        self.assertTrue(options.dry_run)
        self.assertFalse(options.force_publish)
        self.assertEqual(options.page_size, 25)
        self.assertEqual(options.key_filter, "my-post")
        self.assertEqual(options.default_cover_image_id, "7")

    def test_upsert_mode_precedence(self):
        """Test command-specific mode variables and command line overrides."""
        environ = {"STRAPI_TOKEN": "t", "UPSERT_MODE": "update", "PAGE_UPSERT_MODE": "SKIP"}
        config = ConfigManager(str(self.config_path), environ=environ)

        self.assertEqual(config.run_options("import", "PAGE_UPSERT_MODE").upsert_mode, "skip")
        self.assertEqual(config.run_options("import", "REDIRECT_UPSERT_MODE").upsert_mode, "update")
        self.assertEqual(
            config.run_options("import", "PAGE_UPSERT_MODE", {"upsert_mode": "update"}).upsert_mode,
            "update",
        )
        self.assertEqual(
            config.run_options("import", "PAGE_UPSERT_MODE", {"upsert_mode": None}).upsert_mode,
            "skip",
        )

    def test_sync_defaults_to_skip(self):
        """Test the default mode of sync runs."""
        config = ConfigManager(str(self.config_path), environ={"STRAPI_TOKEN": "t"})
        self.assertEqual(config.run_options("sync").upsert_mode, "skip")

    def test_force_unpublish_applies_to_imports_only(self):
        """Test that a leftover FORCE_UNPUBLISH does not reach sync or migrate runs."""
        environ = {"STRAPI_TOKEN": "t", "FORCE_UNPUBLISH": "true"}
        config = ConfigManager(str(self.config_path), environ=environ)

        self.assertTrue(config.run_options("import").force_unpublish)
        self.assertFalse(config.run_options("sync").force_unpublish)
        self.assertFalse(config.run_options("migrate").force_unpublish)

    def test_missing_token(self):
        """Test that a missing token is reported before any request."""
        config = ConfigManager(str(self.config_path), environ={})
        with self.assertRaises(ConfigurationError) as ctx:
            config.run_options("import")
        self.assertIn("Missing STRAPI_TOKEN", str(ctx.exception))

    def test_invalid_options(self):
        """Test validation of page size and upsert modes."""
        for environ in (
            {"STRAPI_TOKEN": "t", "PAGE_SIZE": "abc"},
            {"STRAPI_TOKEN": "t", "PAGE_SIZE": "0"},
            {"STRAPI_TOKEN": "t", "PAGE_SIZE": "101"},
        ):
            with self.assertRaises(ConfigurationError) as ctx:
                ConfigManager(str(self.config_path), environ=environ).run_options("migrate")
            self.assertEqual(str(ctx.exception), "PAGE_SIZE must be a number between 1 and 100.")

        config = ConfigManager(str(self.config_path), environ={"STRAPI_TOKEN": "t", "UPSERT_MODE": "create"})
        with self.assertRaises(ConfigurationError):
            config.run_options("import")
        with self.assertRaises(ConfigurationError):
            ConfigManager(str(self.config_path), environ={"STRAPI_TOKEN": "t", "UPSERT_MODE": "update"}) \
                .run_options("sync")


class TestSchemaRegistry(unittest.TestCase):
    """Test target schema registry functionality."""

    def setUp(self):
        """Set up test registry."""
        self.registry = SchemaRegistry()

    def test_default_schemas_registered(self):
        """Test that the default collections are registered."""
        schemas = self.registry.list_schemas()

        for name in ("pages", "blog", "news", "redirects", "tags"):
            self.assertIn(name, schemas)

    def test_schema_retrieval(self):
        """Test retrieving schema definitions."""
        news = self.registry.get_schema("news")

        self.assertIsNotNone(news)
        if news:
            self.assertEqual(news.endpoint, "/api/news-articles")
            self.assertEqual(news.key_field, "slug")
            self.assertEqual(news.block_namespace, "article")
            self.assertEqual(news.summary_field, "summary")
        self.assertIsNone(self.registry.get_schema("events"))

    def test_custom_schema_registration(self):
        """Test registering a custom collection."""
        self.registry.register_schema(TargetSchema(
            name="events",
            label="events",
            endpoint="/api/events",
            key_field="slug",
        ))

        retrieved = self.registry.get_schema("events")
        self.assertIsNotNone(retrieved)
        if retrieved:
            self.assertEqual(retrieved.block_namespace, "page")
            self.assertEqual(retrieved.upsert_env, "UPSERT_MODE")


if __name__ == "__main__":
    unittest.main()
