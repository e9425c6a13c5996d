import argparse
import logging
import sys
from typing import Optional

from searchstore.dependencies import get_settings
from searchstore.exceptions import StoreError
from searchstore.services import store_builder
from searchstore.services.store_codec import load_store
from searchstore.settings import Settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="searchstore",
        description="Generate the client-side search store for the blog.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build lunr-store.js from the blog sources.")
    build.add_argument("--source", help="Site source directory (SOURCE_DIR).")
    build.add_argument("--output", help="Output file (OUTPUT_PATH).")
    build.add_argument("--site-url", help="Absolute site url (SITE_URL).")

    check = sub.add_parser("check", help="Load and validate an existing store file.")
    check.add_argument("path", help="Path to a lunr-store.js or JSON file.")
    return parser.parse_args(argv)


def _apply_overrides(current_settings: Settings, args: argparse.Namespace) -> Settings:
    update = {}
    if getattr(args, "source", None):
        update["SOURCE_DIR"] = args.source
    if getattr(args, "output", None):
        update["OUTPUT_PATH"] = args.output
    if getattr(args, "site_url", None):
        update["SITE_URL"] = args.site_url
    return current_settings.model_copy(update=update) if update else current_settings


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    current_settings = _apply_overrides(get_settings(), args)
    configure_logging(current_settings.LOG_LEVEL)

    try:
        if args.command == "build":
            store = store_builder.generate(current_settings)
            logger.info(
                f"Search store generated: {len(store)} records -> {current_settings.output_file}"
            )
        else:
            store = load_store(args.path)
            logger.info(f"{args.path}: {len(store)} valid records")
    except StoreError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
