"""Feed download module for RSS Reader."""

import socket
import threading
import time

import requests

from .config import FetchConfig
from .logging_config import create_execution_logger
from .models import FetchResult

CHUNK_SIZE = 64 * 1024
ACCEPTED_CONTENT_TYPES = ("xml", "rss")


class FetchError(Exception):
    """Base class for classified feed download failures."""

    kind = "fetch"
    retryable = False

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.attempts = 0


class RequestBuildError(FetchError):
    """The URL could not be turned into a request."""

    kind = "request"


class NetworkError(FetchError):
    """Connection, DNS or timeout failure before a response arrived."""

    kind = "network"
    retryable = True


class ServerError(FetchError):
    """The server answered with a 5xx status."""

    kind = "server"
    retryable = True


class ClientError(FetchError):
    """The server answered with a non-2xx status that retrying will not fix."""

    kind = "client"


class ContentTypeError(FetchError):
    """The declared content type does not look like a feed."""

    kind = "content_type"


class BodyReadError(FetchError):
    """The response body stream failed part way through."""

    kind = "body_read"
    retryable = True


def is_feed_content_type(content_type: str) -> bool:
    """Loose check: accept anything mentioning xml or rss."""
    lowered = (content_type or "").lower()
    return any(marker in lowered for marker in ACCEPTED_CONTENT_TYPES)


class FeedFetcher:
    """Downloads feed documents with timeout, retry and validation policy."""

    def __init__(
        self,
        config: FetchConfig | None = None,
        execution_id: str | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize FeedFetcher with configuration.

        Args:
            config: Fetch policy, defaults to FetchConfig()
            execution_id: Execution ID for logging context
            session: HTTP session to use, a new one is created if omitted
        """
        self.config = config or FetchConfig()
        self.logger = create_execution_logger("fetcher", execution_id)
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.config.user_agent})

        self.logger.info(
            "FeedFetcher initialized",
            max_attempts=self.config.max_attempts,
        )

    def fetch(self, feed_url: str) -> FetchResult:
        """Download a feed, retrying transient failures.

        Args:
            feed_url: URL of the RSS feed

        Returns:
            FetchResult holding the complete (possibly size-bounded) body

        Raises:
            FetchError: The last classified failure, with ``attempts`` set
        """
        max_attempts = self.config.max_attempts
        last_error: FetchError | None = None

        for attempt in range(1, max_attempts + 1):
            try:
                return self._attempt(feed_url, attempt)
            except FetchError as e:
                e.attempts = attempt
                last_error = e
                if not e.retryable:
                    break
                if attempt < max_attempts:
                    self.handle_backoff(feed_url, attempt, e)

        self.logger.error(
            f"Failed to fetch feed {feed_url}: {last_error}",
            feed_url=feed_url,
            attempt=last_error.attempts,
            max_attempts=max_attempts,
            error=last_error.kind,
        )
        raise last_error

    def handle_backoff(self, feed_url: str, attempt: int, error: FetchError) -> None:
        """Sleep before the next attempt using linear backoff.

        Args:
            feed_url: URL being fetched
            attempt: Number of the attempt that just failed
            error: The failure that triggered the retry
        """
        backoff_time = attempt * self.config.backoff_seconds
        self.logger.warning(
            f"Attempt {attempt} failed ({error}), waiting {backoff_time} seconds before retry",
            feed_url=feed_url,
            attempt=attempt,
            max_attempts=self.config.max_attempts,
            error=error.kind,
        )
        time.sleep(backoff_time)

    def _attempt(self, feed_url: str, attempt: int) -> FetchResult:
        """Perform one isolated request; the response is closed on every path."""
        max_attempts = self.config.max_attempts
        deadline = time.monotonic() + self.config.timeout

        self.logger.debug(
            "Downloading feed content",
            feed_url=feed_url,
            attempt=attempt,
            max_attempts=max_attempts,
        )

        try:
            response = self.session.get(
                feed_url, timeout=self.config.timeout, stream=True
            )
        except (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
        ) as e:
            raise RequestBuildError(
                f"failed to create request for {feed_url}: {e}", feed_url
            ) from e
        except requests.RequestException as e:
            raise NetworkError(
                f"network error on attempt {attempt}/{max_attempts}: {e}", feed_url
            ) from e

        with response:
            status_code = response.status_code
            if not 200 <= status_code < 300:
                message = (
                    f"server returned {status_code} {response.reason or ''}".rstrip()
                    + f" for {feed_url}"
                )
                if status_code >= 500:
                    raise ServerError(message, feed_url, status_code)
                raise ClientError(message, feed_url, status_code)

            content_type = response.headers.get("Content-Type", "")
            if not is_feed_content_type(content_type):
                raise ContentTypeError(
                    f"unexpected content type '{content_type}' "
                    f"(expected XML/RSS) from {feed_url}",
                    feed_url,
                    status_code,
                )

            content, truncated = self._read_body(response, feed_url, attempt, deadline)

        if truncated:
            self.logger.warning(
                f"Feed body exceeded {self.config.max_bytes} bytes and was truncated",
                feed_url=feed_url,
                attempt=attempt,
            )

        self.logger.info(
            "Feed downloaded successfully",
            feed_url=feed_url,
            attempt=attempt,
            status_code=status_code,
            content_type=content_type,
        )
        return FetchResult(
            url=feed_url,
            content=content,
            content_type=content_type,
            status_code=status_code,
            attempts=attempt,
            truncated=truncated,
        )

    def _read_body(
        self,
        response: requests.Response,
        feed_url: str,
        attempt: int,
        deadline: float,
    ) -> tuple[bytes, bool]:
        """Read at most max_bytes from the response stream before the deadline.

        A watchdog timer shuts the connection down when the attempt deadline
        passes, which unblocks a read stuck on a slowly dripping server.

        Returns:
            The body and whether it was cut at the size limit
        """
        max_bytes = self.config.max_bytes
        max_attempts = self.config.max_attempts
        body = bytearray()
        truncated = False

        expired = threading.Event()
        watchdog = threading.Timer(
            max(deadline - time.monotonic(), 0.0),
            self._expire_attempt,
            args=(response, expired),
        )
        watchdog.daemon = True
        watchdog.start()

        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if expired.is_set():
                    break
                remaining = max_bytes - len(body)
                if len(chunk) > remaining:
                    body.extend(chunk[:remaining])
                    truncated = True
                    break
                body.extend(chunk)
        except (requests.RequestException, OSError) as e:
            if not expired.is_set():
                raise BodyReadError(
                    f"failed to read response body on attempt {attempt}/{max_attempts}: {e}",
                    feed_url,
                    response.status_code,
                ) from e
        finally:
            watchdog.cancel()

        # A shutdown can end the stream without an error, so the event decides
        if expired.is_set():
            raise BodyReadError(
                f"failed to read response body on attempt "
                f"{attempt}/{max_attempts}: timed out after "
                f"{self.config.timeout} seconds",
                feed_url,
                response.status_code,
            )

        return bytes(body), truncated

    def _expire_attempt(self, response: requests.Response, expired: threading.Event) -> None:
        """Watchdog callback: mark the attempt expired and shut its socket down."""
        expired.set()
        raw = getattr(response, "raw", None)
        connection = getattr(raw, "connection", None) or getattr(raw, "_connection", None)
        sock = getattr(connection, "sock", None)
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            # Socket already closed by the reading side
            self.logger.debug(f"Socket shutdown after deadline failed: {e}", error=str(e))
