from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict

ArticleId = Union[int, str]


class FormState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    ERROR = "error"
    ON_HOLD = "on_hold"
    APPROVED = "approved"


class GuardRejection(str, Enum):
    """Reasons a submission is refused before any state is touched."""

    UNSUPPORTED_SOURCE = "unsupported_source"
    SUBMISSION_PENDING = "submission_pending"

    @property
    def message(self) -> str:
        return _GUARD_MESSAGES[self]


_GUARD_MESSAGES = {
    GuardRejection.UNSUPPORTED_SOURCE: "Sending comments to a WordPress.com site is not supported yet.",
    GuardRejection.SUBMISSION_PENDING: (
        "You cannot submit a comment to the same post if another is already pending."
    ),
}


class CommentFields(BaseModel):
    """User-editable comment payload.

    Only ``content`` has a default. The remote endpoint performs all content
    validation, so values are kept exactly as entered.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    content: str = ""
    author: int | None = None
    author_name: str | None = None
    author_email: str | None = None
    author_url: str | None = None
    parent: int | None = None


@dataclass
class SubmissionStatus:
    """Outcome of the most recent submission attempt for one article."""

    timestamp: datetime
    fields: CommentFields
    is_pending: bool = True
    is_error: bool = False
    error_message: str = ""
    is_on_hold: bool = False
    is_approved: bool = False
    id: int | None = None

    @classmethod
    def pending(cls, fields: CommentFields, *, timestamp: datetime) -> "SubmissionStatus":
        return cls(timestamp=timestamp, fields=fields.model_copy())

    def fail(self, message: str) -> None:
        self.is_pending = False
        self.is_error = True
        self.error_message = message

    def accept(self, comment_id: int, *, on_hold: bool) -> None:
        self.is_pending = False
        self.is_on_hold = on_hold
        self.is_approved = not on_hold
        self.id = comment_id

    @property
    def is_terminal(self) -> bool:
        return not self.is_pending

    def as_dict(self) -> dict[str, Any]:
        """Flatten the record for display: status flags followed by the submitted fields."""
        payload: dict[str, Any] = {
            "is_pending": self.is_pending,
            "is_error": self.is_error,
            "error_message": self.error_message,
            "is_on_hold": self.is_on_hold,
            "is_approved": self.is_approved,
            "timestamp": self.timestamp,
        }
        if self.id is not None:
            payload["id"] = self.id
        payload.update(self.fields.model_dump(exclude_none=True))
        return payload


@dataclass
class Form:
    fields: CommentFields = field(default_factory=CommentFields)
    submitted: SubmissionStatus | None = None

    @property
    def state(self) -> FormState:
        status = self.submitted
        if status is None:
            return FormState.IDLE
        if status.is_pending:
            return FormState.PENDING
        if status.is_error:
            return FormState.ERROR
        if status.is_on_hold:
            return FormState.ON_HOLD
        return FormState.APPROVED

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"fields": self.fields.model_dump(exclude_none=True)}
        if self.submitted is not None:
            payload["submitted"] = self.submitted.as_dict()
        return payload
