from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from dotenv import load_dotenv

COMMENTS_ROUTE = "/wp/v2/comments"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class RuntimeSettings:
    """Runtime settings loaded from environment with fail-fast validation."""

    source_api: str = ""
    source_is_wpcom: bool = False
    request_timeout_seconds: int = 30
    user_agent: str = "wp-comments"

    @classmethod
    def from_env(cls) -> "RuntimeSettings":
        return cls(
            source_api=os.getenv("WP_COMMENTS_SOURCE_API", ""),
            source_is_wpcom=_get_env_bool("WP_COMMENTS_SOURCE_IS_WPCOM", default=False),
            request_timeout_seconds=_get_env_int("WP_COMMENTS_REQUEST_TIMEOUT", default=30, minimum=1, maximum=600),
            user_agent=os.getenv("WP_COMMENTS_USER_AGENT", "wp-comments"),
        ).normalized()

    @property
    def supports_comment_writes(self) -> bool:
        return not self.source_is_wpcom

    @property
    def comments_endpoint(self) -> str:
        if not self.source_api:
            raise ValueError("WP_COMMENTS_SOURCE_API must be set to submit comments")
        return self.source_api + COMMENTS_ROUTE

    def normalized(self) -> "RuntimeSettings":
        """Validate and normalize all fields. Raises ValueError on invalid configuration."""
        source_api = self.source_api.strip().rstrip("/")
        if source_api:
            parts = urlsplit(source_api)
            if parts.scheme not in {"http", "https"} or not parts.netloc:
                raise ValueError(f"WP_COMMENTS_SOURCE_API must be an http(s) URL, got: {self.source_api!r}")

        if not 1 <= self.request_timeout_seconds <= 600:
            raise ValueError(
                f"WP_COMMENTS_REQUEST_TIMEOUT must be within [1, 600], got: {self.request_timeout_seconds}"
            )

        user_agent = self.user_agent.strip()
        if not user_agent:
            raise ValueError("WP_COMMENTS_USER_AGENT must be non-empty")

        return RuntimeSettings(
            source_api=source_api,
            source_is_wpcom=self.source_is_wpcom,
            request_timeout_seconds=self.request_timeout_seconds,
            user_agent=user_agent,
        )


def load_env_file(repo_root: Path | None = None) -> bool:
    """Load a ``.env`` file from ``repo_root`` (or cwd) without overriding the environment.

    Returns:
        True if a file was found and loaded.
    """
    root = repo_root if repo_root is not None else Path.cwd()
    env_path = root / ".env"
    if not env_path.is_file():
        return False
    return load_dotenv(env_path, override=False)


def _get_env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (true/false, 1/0, yes/no, on/off), got: {raw!r}")


def _get_env_int(name: str, default: int, minimum: int, maximum: int = 10_000_000) -> int:
    """Parse a bounded integer from an environment variable. Raises ValueError when out of range."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        parsed = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got: {raw!r}") from exc
    if parsed < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got: {parsed}")
    if parsed > maximum:
        raise ValueError(f"{name} must be <= {maximum}, got: {parsed}")
    return parsed
