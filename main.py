#!/usr/bin/env python3
"""
contentloader - Bulk content loader for a headless CMS

Main entry point. Parses the command line, resolves configuration, reads the
input file and hands the rows to the matching batch runner. Per-row failures
are reported in the summary and still exit with status 0; configuration and
input errors exit with status 1 before any row is processed.
"""

import logging
import sys
import argparse
from typing import Any, Dict, List, Optional

import httpx

from contentloader.config import ConfigManager, get_config
from contentloader.errors import ConfigurationError, LoaderError
from contentloader.importers import load_rows
from contentloader.models import BatchOutcome
from contentloader.report import print_summary
from contentloader.runner import (
    ArticleImportRunner,
    BlockSyncRunner,
    ContentSyncRunner,
    MigrationRunner,
    PageImportRunner,
    RedirectImportRunner,
)
from contentloader.schemas import schema_registry
from contentloader.store import StoreClient

# command -> (operation, runner class)
FILE_COMMANDS = {
    "pages": ("import", PageImportRunner),
    "articles": ("import", ArticleImportRunner),
    "redirects": ("import", RedirectImportRunner),
    "sync-content": ("sync", ContentSyncRunner),
    "sync-blocks": ("sync", BlockSyncRunner),
}

SYNC_UPSERT_ENV = {
    "sync-content": "PAGE_CONTENT_UPSERT_MODE",
    "sync-blocks": "PAGE_BLOCKS_UPSERT_MODE",
}

DEFAULT_SEED_FILE = "./scripts/pages.seed.json"


def setup_logging(config: ConfigManager):
    """Configure logging for the application."""
    level = getattr(logging, str(config.get("logging.level", "INFO")).upper(), logging.INFO)
    format_str = config.get("logging.format", "%(asctime)s - %(levelname)s - %(message)s")
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    log_file = config.log_filename
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=format_str, handlers=handlers, force=True)


def schema_name_for(args: argparse.Namespace) -> str:
    """Map a parsed command to the name of its target schema."""
    if args.command == "articles":
        return args.article_type
    if args.command == "migrate":
        return args.collection
    if args.command == "redirects":
        return "redirects"
    return "pages"


def option_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect the options given explicitly on the command line."""
    overrides: Dict[str, Any] = {
        "upsert_mode": getattr(args, "mode", None),
        "page_size": getattr(args, "page_size", None),
        "default_cover_image_id": getattr(args, "default_cover_image_id", None),
        "key_filter": getattr(args, "key", None),
    }
    for flag in ("dry_run", "force_publish", "force_unpublish", "clear_legacy_content"):
        if getattr(args, flag, False):
            overrides[flag] = True
    if getattr(args, "overwrite_blocks", False):
        overrides["only_when_empty"] = False
    return overrides


def run_command(args: argparse.Namespace, config: ConfigManager,
                transport: Optional[httpx.BaseTransport] = None) -> BatchOutcome:
    """
    Execute one parsed command.

    Args:
        args: Parsed command line
        config: Configuration manager
        transport: Optional httpx transport for the store client

    Returns:
        The outcome of the run

    Raises:
        ConfigurationError: If options are missing or invalid
        ParseError: If the input file cannot be read or parsed
    """
    schema = schema_registry.get_schema(schema_name_for(args))
    if schema is None:
        raise ConfigurationError(f"Unknown collection for command '{args.command}'")

    if args.command == "migrate":
        options = config.run_options("migrate", overrides=option_overrides(args))
        with StoreClient(options.base_url, options.token, options.timeout, transport) as client:
            outcome = MigrationRunner(client, schema, options).run()
        print_summary(outcome, scanned_label="Entries")
        return outcome

    operation, runner_class = FILE_COMMANDS[args.command]
    upsert_env = SYNC_UPSERT_ENV.get(args.command, schema.upsert_env)
    options = config.run_options(operation, upsert_env, option_overrides(args))

    rows = load_rows(args.input)
    if not rows:
        print("No rows found in input file.")
        return BatchOutcome()

    with StoreClient(options.base_url, options.token, options.timeout, transport) as client:
        outcome = runner_class(client, schema, options).run(rows)

    notes = []
    if operation == "import" and not options.force_publish:
        notes.append("Entries were created/updated as drafts unless previously published.")
    if args.command == "articles" and not options.default_cover_image_id:
        notes.append("Note: If your content-type requires coverImage, set DEFAULT_COVER_IMAGE_ID or coverImageId per row.")
    print_summary(outcome, notes=notes)
    return outcome


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="contentloader - bulk content loader for a headless CMS",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py pages ./scripts/pages.seed.json                 # Import pages
  python main.py articles news ./scripts/news.seed.csv --dry-run # Preview a news import
  python main.py redirects ./redirects.csv --mode skip           # Only add new redirects
  python main.py sync-blocks ./scripts/pages.seed.json --mode create
  python main.py migrate blog --overwrite-blocks                 # Rebuild blog content blocks
        """
    )
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml (default: config.yaml)")
    parser.add_argument("--version", action="version", version="contentloader 0.1.0")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--dry-run", action="store_true", help="Decide and report, but do not write")
    common.add_argument("--force-publish", action="store_true", help="Publish every written entry")

    subparsers = parser.add_subparsers(dest="command", required=True)

    pages = subparsers.add_parser("pages", parents=[common], help="Import pages keyed by routePath")
    pages.add_argument("input", help="Input .json or .csv file")
    pages.add_argument("--mode", choices=["update", "skip"], help="What to do with existing pages")
    pages.add_argument("--force-unpublish", action="store_true", help="Revert written pages to draft")

    articles = subparsers.add_parser("articles", parents=[common], help="Import blog posts or news articles")
    articles.add_argument("article_type", choices=["blog", "news"])
    articles.add_argument("input", help="Input .json or .csv file")
    articles.add_argument("--mode", choices=["update", "skip"], help="What to do with existing articles")
    articles.add_argument("--default-cover-image-id", help="Cover image id for rows without coverImageId")

    redirects = subparsers.add_parser("redirects", parents=[common], help="Import redirects keyed by fromPath")
    redirects.add_argument("input", help="Input .json or .csv file")
    redirects.add_argument("--mode", choices=["update", "skip"], help="What to do with existing redirects")

    for name, help_text in (("sync-content", "Copy legacy page content from a seed file"),
                            ("sync-blocks", "Convert seed page content into content blocks")):
        sync = subparsers.add_parser(name, parents=[common], help=help_text)
        sync.add_argument("input", nargs="?", default=DEFAULT_SEED_FILE, help="Input .json or .csv file")
        sync.add_argument("--mode", choices=["skip", "create"], help="What to do with missing pages")
        if name == "sync-blocks":
            sync.add_argument("--clear-legacy-content", action="store_true", help="Blank the legacy content field")

    migrate = subparsers.add_parser("migrate", parents=[common], help="Convert stored content to blocks in place")
    migrate.add_argument("collection", choices=["pages", "blog", "news"])
    migrate.add_argument("key", nargs="?", help="Only migrate the entry with this routePath or slug")
    migrate.add_argument("--page-size", type=int, help="Entries per page (1-100)")
    migrate.add_argument("--overwrite-blocks", action="store_true",
                         help="Regenerate blocks even when an entry already has some")
    migrate.add_argument("--clear-legacy-content", action="store_true", help="Blank the legacy content field")

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = get_config() if args.config == "config.yaml" else ConfigManager(args.config)
        setup_logging(config)
        run_command(args, config)

    except KeyboardInterrupt:
        logging.info("Run interrupted by user")
        print("\nRun interrupted.")
        sys.exit(130)

    except LoaderError as e:
        logging.error(f"{args.command} failed: {e}")
        print(f"\n{args.command} failed: {e}")
        sys.exit(1)

    except Exception as e:
        logging.error(f"{args.command} failed: {e}", exc_info=True)
        print(f"\n{args.command} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
