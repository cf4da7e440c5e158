"""Command-line front door for forkview.

Resolves the target repository, checks it has forks, then dispatches into the
interactive browser runtime.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn

from .errors import ForkviewError
from .github.client import DEFAULT_RETRIES, DEFAULT_TIMEOUT_SECONDS, GraphQLClient, resolve_token
from .github.gateway import ForkGateway, fetch_repository_metadata, head_ref_for
from .github.repository import current_repository, parse_repository
from .logs import configure_logging
from .models import DEFAULT_SORT_MODE, SortMode, coerce_sort_mode
from .runtime import config, run_browser
from .ui_theme import available_theme_names, resolve_theme

logger = logging.getLogger(__name__)

NO_FORKS_MESSAGE = "No forks found for this repository. Exiting."


def _non_negative_int(value: str) -> int:
    """argparse type for integer values >= 0."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _positive_float(value: str) -> float:
    """argparse type for strictly positive float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def _fail(error: BaseException) -> NoReturn:
    print(f"Error: {error}")
    raise SystemExit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="forkview",
        description="Browse a GitHub repository's forks in the terminal.",
    )
    parser.add_argument(
        "repo",
        nargs="?",
        default=None,
        help="Repository as OWNER/REPO or HOST/OWNER/REPO. Defaults to the current git checkout.",
    )
    parser.add_argument(
        "--sort",
        type=str.upper,
        choices=[mode.value for mode in SortMode],
        default=None,
        help="Initial sort field (descending). Defaults to the last used sort or UPDATED_AT.",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--retries",
        type=_non_negative_int,
        default=None,
        help=f"Retries for transient network failures (default: {DEFAULT_RETRIES}).",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help=f"Per-request timeout in seconds (default: {DEFAULT_TIMEOUT_SECONDS:g}).",
    )
    parser.add_argument("--log-file", default=None, help="Write debug logs to this file.")
    return parser


def resolve_sort_mode(cli_value: str | None) -> SortMode:
    """CLI flag wins, then the persisted preference, then ``UPDATED_AT``."""
    if cli_value:
        return coerce_sort_mode(cli_value)
    return config.load_sort_mode() or DEFAULT_SORT_MODE


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, resolve the repository, and launch the browser.

    Exits 1 on startup and remote failures and 0 when the repository has no
    forks, in which case the interactive loop never starts. An interrupt at
    any point quits like ``q``.
    """
    args = build_parser().parse_args(argv)
    try:
        _run(args)
    except KeyboardInterrupt:
        logger.info("interrupted")


def _run(args: argparse.Namespace) -> None:
    try:
        configure_logging(Path(args.log_file) if args.log_file else None)
    except OSError as exc:
        _fail(ForkviewError(f"cannot open log file: {exc}"))

    try:
        repository = parse_repository(args.repo) if args.repo else current_repository()
    except ForkviewError as exc:
        _fail(exc)
    logger.info("target repository %s/%s", repository.host, repository.full_name)

    retries = args.retries if args.retries is not None else config.load_retries()
    timeout = args.timeout if args.timeout is not None else config.load_timeout()
    try:
        client = GraphQLClient(
            resolve_token(repository.host),
            repository.host,
            timeout=DEFAULT_TIMEOUT_SECONDS if timeout is None else timeout,
            retries=DEFAULT_RETRIES if retries is None else retries,
        )
    except ForkviewError as exc:
        _fail(exc)

    try:
        try:
            metadata = fetch_repository_metadata(client, repository)
        except ForkviewError as exc:
            logger.exception("repository metadata query failed")
            _fail(exc)

        if metadata.fork_count == 0:
            print(NO_FORKS_MESSAGE)
            raise SystemExit(0)

        if not sys.stdin.isatty():
            _fail(ForkviewError("forkview needs an interactive terminal"))

        gateway = ForkGateway(client, repository, head_ref_for(repository, metadata.default_branch))
        no_color = args.no_color or bool(os.environ.get("NO_COLOR"))
        theme = resolve_theme(args.theme or config.load_theme_name(), no_color=no_color)
        try:
            run_browser(gateway, resolve_sort_mode(args.sort), theme, total_count=metadata.fork_count)
        except ForkviewError as exc:
            logger.exception("fork browser terminated")
            _fail(exc)
    finally:
        client.close()


if __name__ == "__main__":
    main()
