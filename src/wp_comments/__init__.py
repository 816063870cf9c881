from importlib.metadata import version

from .canonical import to_canonical_json
from .engine import SubmissionEngine, build_request_body
from .models import ArticleId, CommentFields, Form, FormState, GuardRejection, SubmissionStatus
from .outcomes import (
    Accepted,
    MalformedAcceptance,
    MalformedLocationError,
    NetworkError,
    Rejected,
    SubmissionOutcome,
    classify_response,
    is_on_hold,
    parse_comment_id,
)
from .settings import RuntimeSettings, load_env_file
from .store import FormStore
from .transport import HttpResponse, HttpxTransport, Transport, TransportFailure


def get_version() -> str:
    try:
        return version("wp-comments")
    except Exception:
        return "0.0.0"


__all__ = [
    "Accepted",
    "ArticleId",
    "CommentFields",
    "Form",
    "FormState",
    "FormStore",
    "GuardRejection",
    "HttpResponse",
    "HttpxTransport",
    "MalformedAcceptance",
    "MalformedLocationError",
    "NetworkError",
    "Rejected",
    "RuntimeSettings",
    "SubmissionEngine",
    "SubmissionOutcome",
    "SubmissionStatus",
    "Transport",
    "TransportFailure",
    "build_request_body",
    "classify_response",
    "get_version",
    "is_on_hold",
    "load_env_file",
    "parse_comment_id",
    "to_canonical_json",
]
