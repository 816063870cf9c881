"""Entry point for `python -m wp_comments` and the `wp-comments` CLI script."""

from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import replace
from typing import Any

from wp_comments.canonical import to_canonical_json
from wp_comments.engine import SubmissionEngine
from wp_comments.models import SubmissionStatus
from wp_comments.settings import RuntimeSettings, load_env_file
from wp_comments.store import FormStore
from wp_comments.transport import HttpxTransport

EXIT_ACCEPTED = 0
EXIT_FAILED = 1
EXIT_REFUSED = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Submit a comment to a WordPress REST API")
    parser.add_argument("--post-id", required=True, help="Id of the post the comment belongs to")
    parser.add_argument("--content", default=None, help="Comment text")
    parser.add_argument("--author", type=int, default=None, help="Numeric id of a registered author")
    parser.add_argument("--author-name", default=None)
    parser.add_argument("--author-email", default=None)
    parser.add_argument("--author-url", default=None)
    parser.add_argument("--parent", type=int, default=None, help="Id of the comment being replied to")
    parser.add_argument("--api", default=None, help="REST API root, overrides WP_COMMENTS_SOURCE_API")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def fields_from_args(args: argparse.Namespace) -> dict[str, Any]:
    candidates = {
        "content": args.content,
        "author": args.author,
        "author_name": args.author_name,
        "author_email": args.author_email,
        "author_url": args.author_url,
        "parent": args.parent,
    }
    return {name: value for name, value in candidates.items() if value is not None}


def post_id_from_arg(raw: str) -> int | str:
    return int(raw) if raw.isdigit() else raw


async def run_submission(settings: RuntimeSettings, post_id: int | str, fields: dict[str, Any]) -> SubmissionStatus | None:
    store = FormStore()
    async with HttpxTransport(timeout=settings.request_timeout_seconds, user_agent=settings.user_agent) as transport:
        engine = SubmissionEngine.from_settings(settings, store, transport)
        return await engine.submit(post_id, fields)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    load_env_file()
    try:
        settings = RuntimeSettings.from_env()
        if args.api is not None:
            settings = replace(settings, source_api=args.api).normalized()
        if not settings.source_api:
            raise ValueError("A REST API root is required (--api or WP_COMMENTS_SOURCE_API)")
    except ValueError as exc:
        logging.error("Invalid configuration: %s", exc)
        return EXIT_REFUSED

    status = asyncio.run(run_submission(settings, post_id_from_arg(args.post_id), fields_from_args(args)))
    if status is None:
        return EXIT_REFUSED

    print(to_canonical_json(status))
    return EXIT_FAILED if status.is_error else EXIT_ACCEPTED


if __name__ == "__main__":
    raise SystemExit(main())
