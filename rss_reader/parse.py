"""Feed decoding module for RSS Reader."""

import feedparser

from .logging_config import create_execution_logger
from .models import Entry, FeedDocument


class FeedDecodeError(ValueError):
    """Raised when a downloaded body is not a usable feed document."""


def _text(value) -> str | None:
    """Return stripped text, treating empty values as missing."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class FeedDecoder:
    """Turns raw feed bytes into a FeedDocument."""

    def __init__(self, execution_id: str | None = None):
        """Initialize FeedDecoder.

        Args:
            execution_id: Execution ID for logging context
        """
        self.logger = create_execution_logger("decoder", execution_id)

    def decode(self, content: bytes, feed_url: str = "") -> FeedDocument:
        """Decode a feed document.

        Args:
            content: Raw body returned by the fetcher
            feed_url: Source URL, used for logging only

        Returns:
            FeedDocument with the channel title and entries in document order

        Raises:
            FeedDecodeError: If the body is empty or not a recognizable feed
        """
        if not content or not content.strip():
            raise FeedDecodeError("failed to parse XML content: document is empty")

        self.logger.debug("Parsing feed content", feed_url=feed_url)
        parsed = feedparser.parse(content)

        channel = parsed.get("feed", {})
        raw_entries = parsed.get("entries", [])
        title = _text(channel.get("title"))

        if parsed.get("bozo"):
            problem = parsed.get("bozo_exception")
            if title is None and not raw_entries:
                raise FeedDecodeError(
                    "failed to parse XML content "
                    f"(check if URL returns valid RSS/XML): {problem}"
                )
            self.logger.warning(
                f"Feed parsing warning: {problem}",
                feed_url=feed_url,
                error=str(problem),
            )
        elif not parsed.get("version") and title is None and not raw_entries:
            raise FeedDecodeError(
                "failed to parse XML content: document is not an RSS or Atom feed"
            )

        entries = tuple(self.normalize_entry(raw_entry) for raw_entry in raw_entries)

        self.logger.info(
            f"Decoded feed with {len(entries)} entries",
            feed_url=feed_url,
        )
        return FeedDocument(title=title, entries=entries)

    def normalize_entry(self, raw_entry) -> Entry:
        """Map a feedparser entry onto an Entry.

        Args:
            raw_entry: Entry mapping produced by feedparser

        Returns:
            Entry with missing or blank fields set to None
        """
        published = _text(raw_entry.get("published")) or _text(raw_entry.get("updated"))

        # feedparser copies a permalink <guid> into link when <link> is missing
        link = _text(raw_entry.get("link"))
        if raw_entry.get("guidislink") and link == _text(raw_entry.get("id")):
            link = None

        return Entry(
            title=_text(raw_entry.get("title")),
            link=link,
            comments=_text(raw_entry.get("comments")),
            published=published,
        )


def decode_feed(content: bytes, execution_id: str | None = None) -> FeedDocument:
    """Decode feed bytes with a one-off FeedDecoder."""
    return FeedDecoder(execution_id=execution_id).decode(content)
