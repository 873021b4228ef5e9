"""Data models for RSS Reader."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Entry:
    """Represents a single feed item."""

    title: str | None = None
    link: str | None = None
    comments: str | None = None
    published: str | None = None  # Raw publication date, normalized at render time

    @property
    def is_reportable(self) -> bool:
        """An entry needs at least a title or a link to be shown."""
        return bool(self.title or self.link)


@dataclass(frozen=True)
class FeedDocument:
    """Represents a decoded feed."""

    title: str | None
    entries: tuple[Entry, ...] = ()


@dataclass(frozen=True)
class FetchResult:
    """Represents a successfully downloaded feed body."""

    url: str
    content: bytes
    content_type: str
    status_code: int
    attempts: int
    truncated: bool = False
