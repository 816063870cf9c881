from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlencode

from .models import ArticleId, CommentFields, GuardRejection, SubmissionStatus
from .outcomes import (
    MALFORMED_ACCEPTANCE_MESSAGE,
    Accepted,
    MalformedAcceptance,
    NetworkError,
    Rejected,
    SubmissionOutcome,
    classify_response,
)
from .settings import COMMENTS_ROUTE, RuntimeSettings
from .store import FormStore
from .transport import Transport, TransportFailure

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Wire order of the comment creation arguments; ``post`` is the article id.
_BODY_FIELDS = ("content", "author", "author_name", "author_email", "author_url", "parent")


def build_request_body(article_id: ArticleId, fields: CommentFields) -> str:
    """Encode the comment creation body, skipping every empty value."""
    params: list[tuple[str, str]] = []
    for name in _BODY_FIELDS:
        _append_param(params, name, getattr(fields, name))
    _append_param(params, "post", article_id)
    return urlencode(params)


def _append_param(params: list[tuple[str, str]], name: str, value: Any) -> None:
    if value is None:
        return
    text = str(value)
    if text:
        params.append((name, text))


class SubmissionEngine:
    """Runs comment submissions against the ``/wp/v2/comments`` endpoint.

    Each call to ``submit`` drives one article's form through
    Pending into a terminal state (error, on hold or approved). A second
    submission for an article is refused while the first is still pending.
    """

    def __init__(
        self,
        store: FormStore,
        transport: Transport,
        *,
        api_base: str,
        supports_writes: bool = True,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.transport = transport
        self.api_base = api_base.rstrip("/")
        self.supports_writes = supports_writes
        self._clock = clock or (lambda: datetime.now(UTC))

    @classmethod
    def from_settings(cls, settings: RuntimeSettings, store: FormStore, transport: Transport) -> "SubmissionEngine":
        return cls(
            store,
            transport,
            api_base=settings.source_api,
            supports_writes=settings.supports_comment_writes,
        )

    @property
    def comments_endpoint(self) -> str:
        return self.api_base + COMMENTS_ROUTE

    def check_guards(self, article_id: ArticleId) -> GuardRejection | None:
        if not self.supports_writes:
            return GuardRejection.UNSUPPORTED_SOURCE
        form = self.store.get(article_id)
        if form is not None and form.submitted is not None and form.submitted.is_pending:
            return GuardRejection.SUBMISSION_PENDING
        return None

    async def submit(
        self,
        article_id: ArticleId,
        fields: Mapping[str, Any] | CommentFields | None = None,
    ) -> SubmissionStatus | None:
        """Submit the article's comment form, merging ``fields`` into it first.

        Returns the form's submission status once it reaches a terminal state,
        or None when a guard refused the submission. A refusal is logged as a
        warning and leaves the store untouched.

        Field values are only checked for type (ids must be integers); content
        is left to the remote endpoint. Any exception from the transport ends
        the attempt as a network error.

        Raises:
            pydantic.ValidationError: If ``fields`` cannot be merged into the form.
        """
        rejection = self.check_guards(article_id)
        if rejection is not None:
            logger.warning("%s (article %s)", rejection.message, article_id)
            return None

        self.store.update_fields(article_id, fields or {})
        form = self.store[article_id]
        snapshot = form.fields.model_copy()
        status = SubmissionStatus.pending(snapshot, timestamp=self._clock())
        form.submitted = status

        body = build_request_body(article_id, snapshot)
        logger.debug("Submitting comment for article %s to %s", article_id, self.comments_endpoint)
        try:
            response = await self.transport(
                self.comments_endpoint,
                method="POST",
                headers={"Content-Type": FORM_CONTENT_TYPE},
                body=body,
            )
        except TransportFailure as exc:
            logger.warning("Comment submission for article %s failed: %s", article_id, exc)
            outcome: SubmissionOutcome = NetworkError()
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Transport raised an unexpected error for article %s: %s", article_id, exc, exc_info=True
            )
            outcome = NetworkError()
        else:
            outcome = classify_response(response.status, response.headers, response.text)

        _apply_outcome(status, outcome, article_id)
        return status


def _apply_outcome(status: SubmissionStatus, outcome: SubmissionOutcome, article_id: ArticleId) -> None:
    if isinstance(outcome, Accepted):
        status.accept(outcome.comment_id, on_hold=outcome.on_hold)
        logger.info(
            "Comment %s for article %s accepted (%s)",
            outcome.comment_id,
            article_id,
            "on hold" if outcome.on_hold else "approved",
        )
        return

    if isinstance(outcome, MalformedAcceptance):
        logger.error(
            "Comment for article %s was accepted but the response is malformed: %s (Location: %r)",
            article_id,
            outcome.detail,
            outcome.location,
        )
        status.fail(MALFORMED_ACCEPTANCE_MESSAGE)
        return

    if isinstance(outcome, (NetworkError, Rejected)):
        status.fail(outcome.reason)
        logger.info("Comment for article %s not created: %s", article_id, outcome.reason)
        return

    raise TypeError(f"Unknown submission outcome: {outcome!r}")
