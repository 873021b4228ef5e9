"""Configuration management for RSS Reader."""

import os
from dataclasses import dataclass

DEFAULT_USER_AGENT = "RSS-Reader/1.0"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class FetchConfig:
    """Configuration for downloading a feed."""

    timeout: float = 10.0
    max_attempts: int = 3
    max_bytes: int = DEFAULT_MAX_BYTES
    backoff_seconds: float = 1.0
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.max_bytes < 1:
            raise ValueError(f"max_bytes must be positive, got {self.max_bytes}")
        if self.backoff_seconds < 0:
            raise ValueError(
                f"backoff_seconds cannot be negative, got {self.backoff_seconds}"
            )
        if not self.user_agent or not self.user_agent.strip():
            raise ValueError("user_agent cannot be empty")


class Config:
    """Main configuration manager."""

    LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.timeout = os.getenv("RSS_READER_TIMEOUT", "10")
        self.max_attempts = os.getenv("RSS_READER_MAX_ATTEMPTS", "3")
        self.max_bytes = os.getenv("RSS_READER_MAX_BYTES", str(DEFAULT_MAX_BYTES))
        self.backoff_seconds = os.getenv("RSS_READER_BACKOFF", "1")
        self.user_agent = os.getenv("RSS_READER_USER_AGENT", DEFAULT_USER_AGENT)
        self.log_level = os.getenv("LOG_LEVEL", "WARNING").upper()

    def get_fetch_config(self) -> FetchConfig:
        """Get fetch configuration.

        Raises:
            ValueError: If a variable is not a number or is out of range
        """
        try:
            timeout = float(self.timeout)
            max_attempts = int(self.max_attempts)
            max_bytes = int(self.max_bytes)
            backoff_seconds = float(self.backoff_seconds)
        except ValueError as e:
            raise ValueError(f"Invalid numeric setting in environment: {e}") from e

        return FetchConfig(
            timeout=timeout,
            max_attempts=max_attempts,
            max_bytes=max_bytes,
            backoff_seconds=backoff_seconds,
            user_agent=self.user_agent,
        )

    def get_log_level(self) -> str:
        """Get the logging level, falling back to WARNING for unknown names."""
        if self.log_level in self.LOG_LEVELS:
            return self.log_level
        return "WARNING"
