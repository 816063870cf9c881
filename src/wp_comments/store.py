from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from .models import ArticleId, CommentFields, Form

logger = logging.getLogger(__name__)


class FormStore:
    """In-memory mapping from article id to its comment form.

    Forms are created lazily by ``update_fields`` (or by the submission engine,
    which goes through ``update_fields``) and are kept for the lifetime of the
    store. Each article's form has a single writer at a time: the caller
    editing fields, or the engine while a submission for that article is in
    flight. There is no lock; callers share one event loop.
    """

    def __init__(self) -> None:
        self._forms: dict[ArticleId, Form] = {}

    def update_fields(
        self,
        article_id: ArticleId,
        fields: Mapping[str, Any] | CommentFields | None = None,
    ) -> None:
        """Shallow-merge ``fields`` into the form for ``article_id``.

        Only keys present in ``fields`` are overwritten. An empty or missing
        update creates the form when absent and otherwise leaves it as is.

        Raises:
            pydantic.ValidationError: If ``fields`` holds unknown keys or values
                of the wrong type. The stored form is left untouched.
        """
        update = _explicit_values(fields)
        form = self._forms.get(article_id)
        if form is None:
            form = self._forms[article_id] = Form()
            logger.debug("Created comment form for article %s", article_id)
        if update:
            form.fields = form.fields.model_copy(update=update)

    def get(self, article_id: ArticleId) -> Form | None:
        return self._forms.get(article_id)

    def __getitem__(self, article_id: ArticleId) -> Form:
        return self._forms[article_id]

    def __contains__(self, article_id: object) -> bool:
        return article_id in self._forms

    def __iter__(self) -> Iterator[ArticleId]:
        return iter(self._forms)

    def __len__(self) -> int:
        return len(self._forms)

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Return a plain-data copy of every form, keyed by stringified article id."""
        return {str(article_id): form.as_dict() for article_id, form in self._forms.items()}


def _explicit_values(fields: Mapping[str, Any] | CommentFields | None) -> dict[str, Any]:
    if not fields:
        return {}
    validated = fields if isinstance(fields, CommentFields) else CommentFields.model_validate(dict(fields))
    return {name: getattr(validated, name) for name in validated.model_fields_set}
