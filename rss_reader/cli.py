"""Command-line entry point for RSS Reader."""

import argparse
import sys
from datetime import UTC, datetime

from .config import Config
from .fetch import FeedFetcher, FetchError
from .logging_config import create_execution_logger, setup_structured_logging
from .parse import FeedDecodeError, FeedDecoder
from .render import FeedRenderer

USAGE = "Usage: rss-reader <feed-url>"
EXAMPLE = "Example: rss-reader https://feeds.bbci.co.uk/news/rss.xml"

FETCH_HINTS = (
    "Check if the URL is correct and accessible",
    "Verify you have internet connectivity",
    "Try the URL in a web browser first",
)
PARSE_HINTS = (
    "Ensure the URL points to a valid RSS/XML feed",
    "Some websites require specific user agents or headers",
)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the rss-reader command.

    Returns:
        Parser accepting a feed URL and an optional --log-level
    """
    parser = argparse.ArgumentParser(
        prog="rss-reader",
        description="Fetch an RSS feed and print a summary of its items.",
    )
    parser.add_argument("url", nargs="?", help="URL of the RSS feed")
    parser.add_argument(
        "--log-level",
        choices=Config.LOG_LEVELS,
        type=str.upper,
        help="Log level for the JSON logs written to stderr (default: $LOG_LEVEL or WARNING)",
    )
    return parser


def _print_failure(summary: str, hints: tuple[str, ...]) -> None:
    print(summary)
    for hint in hints:
        print(f"• {hint}")


def main(argv: list[str] | None = None) -> int:
    """Fetch, decode and print one feed.

    Args:
        argv: Command-line arguments, defaults to sys.argv[1:]

    Returns:
        Process exit status
    """
    # Only the first positional argument is used, anything after it is ignored
    args, _ = build_parser().parse_known_args(argv)

    if not args.url:
        print(USAGE)
        print(EXAMPLE)
        return 1

    config = Config()
    setup_structured_logging(args.log_level or config.get_log_level())

    execution_id = f"cli_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    main_logger = create_execution_logger("main", execution_id)
    main_logger.log_execution_start(feed_url=args.url)

    try:
        fetch_config = config.get_fetch_config()
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        main_logger.log_execution_end(success=False, error=str(e))
        return 1

    print(f"Fetching RSS feed from: {args.url}")
    print()

    fetcher = FeedFetcher(fetch_config, execution_id=execution_id)
    try:
        result = fetcher.fetch(args.url)
    except FetchError as e:
        _print_failure(
            f"Failed to fetch feed: {e} (attempts: {e.attempts})", FETCH_HINTS
        )
        main_logger.log_execution_end(success=False, feed_url=args.url, error=e.kind)
        return 1

    try:
        document = FeedDecoder(execution_id=execution_id).decode(
            result.content, feed_url=args.url
        )
    except FeedDecodeError as e:
        _print_failure(f"Failed to parse feed: {e}", PARSE_HINTS)
        main_logger.log_execution_end(success=False, feed_url=args.url, error=str(e))
        return 1

    report = FeedRenderer(execution_id=execution_id).write(document, sys.stdout)

    metrics = {
        "attempts": result.attempts,
        "bytes": len(result.content),
        "truncated": result.truncated,
        "items_total": report.total,
        "items_processed": report.processed,
        "items_skipped": report.skipped,
        "date_warnings": report.date_warnings,
    }
    main_logger.log_metrics(metrics)

    print()
    print("Feed processed successfully")
    main_logger.log_execution_end(success=True, feed_url=args.url)
    return 0


if __name__ == "__main__":
    sys.exit(main())
