"""Command-line entry point for the Yle search feed crawler."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Sequence

from .config import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    CrawlConfig,
    build_search_url,
    check_credentials,
    load_config,
)
from .crawler import crawl
from .feed import FeedSerializationError, render_feed, synthesize
from .models import CrawlResult
from .storage import StorageError, upload_feed, write_feed_file
from .utils import object_name_for_query

logger = logging.getLogger("yle_feed.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Render Yle search results via Playwright and publish them as an RSS feed."
        ),
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        type=Path,
        help="JSON configuration file (default: config.json)",
    )
    parser.add_argument("--query", help="Override search_query from the config")
    parser.add_argument("--service", help="Override search_service from the config")
    parser.add_argument(
        "--type", dest="result_type", help="Override result_type from the config"
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Override output_file_path from the config",
    )
    parser.add_argument(
        "--delay",
        type=float,
        help="Seconds to wait between result pages",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds allowed for rendering a single page",
    )
    parser.add_argument(
        "--no-upload",
        action="store_true",
        help="Skip the Cloud Storage upload even if useGCS is set",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window while crawling",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> CrawlConfig:
    """Load the config file and apply command-line overrides."""
    config = load_config(args.config)
    overrides = {}
    if args.query:
        overrides["search_query"] = args.query
    if args.service is not None:
        overrides["search_service"] = args.service
    if args.result_type is not None:
        overrides["result_type"] = args.result_type
    if args.output:
        overrides["output_path"] = args.output.expanduser()
    if args.delay is not None:
        overrides["page_delay"] = args.delay
    if args.timeout is not None:
        overrides["navigation_timeout"] = args.timeout
    if args.no_upload:
        overrides["use_gcs"] = False
    if args.headed:
        overrides["headless"] = False
    return dataclasses.replace(config, **overrides)


async def _crawl_until_interrupted(config: CrawlConfig) -> CrawlResult:
    """Crawl, stopping after the current page on SIGINT/SIGTERM."""
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, stop_event.set)
        except (NotImplementedError, RuntimeError):
            logger.debug("Signal handlers unavailable; crawl is not interruptible")
            break
    return await crawl(config, stop_event=stop_event)


def run(config: CrawlConfig) -> CrawlResult:
    """Crawl, write the feed file and upload it when configured."""
    logger.info("GCS is set to %s", config.use_gcs)
    overall_start = time.perf_counter()
    result = asyncio.run(_crawl_until_interrupted(config))
    logger.info(
        "Crawl stopped (%s) after %d page(s) in %.2fs",
        result.outcome.value,
        result.pages_fetched,
        time.perf_counter() - overall_start,
    )

    document = synthesize(
        result.records, build_search_url(config, 1), config.search_query
    )
    data = render_feed(document)
    output_path = write_feed_file(config.output_path, data)

    if config.use_gcs:
        object_name = object_name_for_query(config.search_query)
        logger.info(
            "Writing to bucket: %s with name %s.", config.gcs_bucket, object_name
        )
        upload_feed(output_path, config.gcs_bucket, object_name)
    else:
        logger.info(
            "GCS option is OFF. Not uploading to GCS. Local file is at %s",
            output_path,
        )
    return result


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    try:
        config = resolve_config(args)
        check_credentials(config)
    except ConfigError as exc:
        logger.error("Failed to load config: %s", exc)
        sys.exit(1)

    try:
        run(config)
    except (FeedSerializationError, StorageError) as exc:
        logger.error("Fatal: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
