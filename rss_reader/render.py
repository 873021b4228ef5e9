"""Report rendering for RSS Reader."""

import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TextIO

from bs4 import BeautifulSoup

from .logging_config import create_execution_logger
from .models import Entry, FeedDocument
from .timestamps import TimestampParseError, format_timestamp, normalize

SEPARATOR = "------------------"
NO_FEED_TITLE = "Warning: Feed has no title"
NO_ITEMS = "No items found in this RSS feed"
NO_ENTRY_TITLE = "(No title)"
NO_ENTRY_LINK = "(No link available)"


@dataclass
class RenderedReport:
    """Lines of a rendered feed plus per-entry counters."""

    lines: list[str] = field(default_factory=list)
    total: int = 0
    processed: int = 0
    skipped: int = 0
    date_warnings: int = 0


def clean_text(text: str) -> str:
    """Strip markup from a title and collapse whitespace."""
    if "<" in text and ">" in text:
        soup = BeautifulSoup(text, "html.parser")
        for script in soup(["script", "style"]):
            script.decompose()
        text = soup.get_text(separator=" ")
    return " ".join(text.split())


class FeedRenderer:
    """Formats a FeedDocument as a human-readable report."""

    def __init__(
        self,
        normalizer: Callable[[str], datetime] = normalize,
        execution_id: str | None = None,
    ):
        """Initialize FeedRenderer.

        Args:
            normalizer: Publication date parser, defaults to timestamps.normalize
            execution_id: Execution ID for logging context
        """
        self.normalizer = normalizer
        self.logger = create_execution_logger("renderer", execution_id)

    def render(self, doc: FeedDocument) -> list[str]:
        """Render a feed into display lines."""
        return self.render_report(doc).lines

    def render_report(self, doc: FeedDocument) -> RenderedReport:
        """Render a feed and count what happened to each entry.

        Args:
            doc: Decoded feed

        Returns:
            RenderedReport with the display lines and entry counters
        """
        report = RenderedReport(total=len(doc.entries))
        lines = report.lines

        title = clean_text(doc.title) if doc.title else ""
        if title:
            lines.extend([title, ""])
        else:
            lines.append(NO_FEED_TITLE)

        if not doc.entries:
            lines.append(NO_ITEMS)
            return report

        for index, entry in enumerate(doc.entries, start=1):
            if not entry.is_reportable:
                lines.append(f"Skipping item {index}: missing both title and link")
                self.logger.info(
                    f"Skipping item {index}: missing both title and link",
                    entry_index=index,
                )
                report.skipped += 1
                continue

            lines.extend(self._render_entry(index, entry, report))
            report.processed += 1

        if report.skipped:
            lines.append("")
            lines.append(
                f"Processed {report.processed}/{report.total} items successfully"
            )

        return report

    def write(self, doc: FeedDocument, stream: TextIO | None = None) -> RenderedReport:
        """Render a feed straight to a stream (stdout by default)."""
        stream = stream or sys.stdout
        report = self.render_report(doc)
        for line in report.lines:
            stream.write(line + "\n")
        return report

    def _render_entry(self, index: int, entry: Entry, report: RenderedReport) -> list[str]:
        title = clean_text(entry.title) if entry.title else ""
        block = [SEPARATOR, title or NO_ENTRY_TITLE, "", entry.link or NO_ENTRY_LINK]

        if entry.comments:
            block.append(f"Comments: {entry.comments}")

        if entry.published:
            try:
                moment = self.normalizer(entry.published)
            except TimestampParseError as e:
                report.date_warnings += 1
                self.logger.warning(
                    f"Could not parse date for item {index}",
                    entry_index=index,
                    raw_date=e.raw,
                )
                block.append(f"Could not parse date '{entry.published}': {e}")
            else:
                self.logger.debug(
                    f"Parsed date for item {index}",
                    entry_index=index,
                    raw_date=entry.published,
                )
                block.append(format_timestamp(moment))

        return block
