"""Classification of comment-creation responses.

The comments endpoint overloads its status codes: a ``200`` means the comment
was rejected, a ``302`` means it was accepted, and the redirect target carries
both the new comment id and its moderation state. Everything here is pure so
the rules can be exercised without a transport.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Union
from urllib.parse import parse_qs, urlsplit

import httpx

NETWORK_ERROR_MESSAGE = "Network error"
INVALID_POST_MESSAGE = "The post ID is invalid"
INVALID_AUTHOR_MESSAGE = "Author or email are empty, or email has an invalid format"
DUPLICATE_MESSAGE = "The comment was already submitted"
MALFORMED_ACCEPTANCE_MESSAGE = "Malformed acceptance response"

_COMMENT_FRAGMENT_RE = re.compile(r"#comment-(\d+)")


class MalformedLocationError(ValueError):
    """Raised when an acceptance redirect does not name the created comment."""


@dataclass(frozen=True)
class NetworkError:
    """No response was received."""

    reason: str = NETWORK_ERROR_MESSAGE


@dataclass(frozen=True)
class Rejected:
    reason: str
    status: int


@dataclass(frozen=True)
class Accepted:
    comment_id: int
    on_hold: bool


@dataclass(frozen=True)
class MalformedAcceptance:
    """A 302 whose ``Location`` could not be parsed into a comment id."""

    location: str | None
    detail: str


SubmissionOutcome = Union[NetworkError, Rejected, Accepted, MalformedAcceptance]


def unexpected_status_message(status: int) -> str:
    return f"Unexpected error: {status}"


def parse_comment_id(location: str | None) -> int:
    """Extract the comment id from a ``#comment-<digits>`` redirect fragment.

    Raises:
        MalformedLocationError: If the location is missing or has no such fragment.
    """
    if not location:
        raise MalformedLocationError("Acceptance response has no Location header")
    fragment = urlsplit(location).fragment
    match = _COMMENT_FRAGMENT_RE.search(f"#{fragment}") if fragment else None
    if match is None:
        raise MalformedLocationError(f"Location has no #comment-<id> fragment: {location!r}")
    return int(match.group(1))


def is_on_hold(location: str) -> bool:
    """Return True when the redirect marks the comment as awaiting moderation."""
    query = parse_qs(urlsplit(location).query, keep_blank_values=True)
    return "unapproved" in query


def classify_response(status: int, headers: Mapping[str, str], body: str) -> SubmissionOutcome:
    """Map a comment-creation response onto a submission outcome."""
    if status == 200:
        # The endpoint answers 200 with an empty body when the post id is unknown.
        return Rejected(reason=INVALID_AUTHOR_MESSAGE if body else INVALID_POST_MESSAGE, status=status)

    if status == 409:
        return Rejected(reason=DUPLICATE_MESSAGE, status=status)

    if status == 302:
        location = httpx.Headers(headers).get("location")
        try:
            comment_id = parse_comment_id(location)
        except MalformedLocationError as exc:
            return MalformedAcceptance(location=location, detail=str(exc))
        return Accepted(comment_id=comment_id, on_hold=is_on_hold(location))

    return Rejected(reason=unexpected_status_message(status), status=status)
