"""Command-line interface for BMail.

This module provides the main entry point for the CLI application. Each
invocation starts a fresh session from the configured fixture; nothing is
persisted between runs.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import structlog

from bmail import __version__
from bmail.config import Settings, get_settings
from bmail.exceptions import BmailError, ConfigurationError
from bmail.models import View
from bmail.session import MailboxSession

logger = structlog.get_logger()


def _add_fixture_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--fixture",
        type=Path,
        default=None,
        help="Path to a JSON seed file (default: settings fixture_path or the sample mailbox)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bmail", description="BMail in-memory mailbox")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List the messages of a view")
    list_parser.add_argument(
        "--view",
        default=View.INBOX.value,
        choices=[v.value for v in View],
        help="Folder or starred view to list (default: inbox)",
    )
    list_parser.add_argument(
        "--search",
        default="",
        help="Case-insensitive text matched against subject, sender and body",
    )
    _add_fixture_argument(list_parser)

    folders_parser = subparsers.add_parser("folders", help="Show total and unread counts per view")
    _add_fixture_argument(folders_parser)

    show_parser = subparsers.add_parser("show", help="Open a message and print its body")
    show_parser.add_argument("id", type=int, help="Message or draft id")
    show_parser.add_argument(
        "--view",
        default=None,
        choices=[v.value for v in View],
        help="View to open the message from (default: search every view)",
    )
    _add_fixture_argument(show_parser)

    return parser


def _session(settings: Settings, args: argparse.Namespace) -> MailboxSession:
    if args.fixture is not None:
        settings = settings.model_copy(update={"fixture_path": args.fixture})
    return MailboxSession.from_settings(settings)


def _cmd_list(settings: Settings, args: argparse.Namespace) -> int:
    session = _session(settings, args)
    session.select_view(args.view)
    session.set_search(args.search)

    for item in session.visible():
        unread = "READ" if item.is_read else "UNREAD"
        star = "*" if item.is_starred else "-"
        print(f"{item.id}\t{unread}\t{star}\t{session.time_label(item)}\t{item.sender}\t{item.subject}")

    return 0


def _cmd_folders(settings: Settings, args: argparse.Namespace) -> int:
    session = _session(settings, args)

    for summary in session.folders():
        print(f"{summary.display_name}: {summary.total} ({summary.unread} unread)")

    return 0


def _cmd_show(settings: Settings, args: argparse.Namespace) -> int:
    session = _session(settings, args)
    views = [View(args.view)] if args.view else list(View)

    for view in views:
        session.select_view(view)
        item = session.open_message(args.id)
        if item is not None:
            break
    else:
        print(f"No message with id {args.id}", file=sys.stderr)
        return 1

    print(f"From: {item.sender}")
    print(f"To: {item.recipient}")
    print(f"Date: {item.timestamp.isoformat(sep=' ', timespec='minutes')}")
    print(f"Subject: {item.subject}")
    if item.has_attachment:
        print("Attachment: yes")
    print()
    for line in item.body_lines:
        print(line)

    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the BMail CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    try:
        settings = get_settings()
    except ConfigurationError as e:
        # Logging is not configured yet; report straight to stderr.
        print(f"bmail: {e}", file=sys.stderr)
        return 1

    # Configure logging
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level_number),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )

    logger.debug("bmail_started", version=__version__, debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    commands = {
        "list": _cmd_list,
        "folders": _cmd_folders,
        "show": _cmd_show,
    }
    command = commands.get(parsed.command)
    if command is None:
        logger.error("unknown_command", command=parsed.command)
        return 2

    try:
        return command(settings, parsed)
    except BmailError as e:
        logger.error("command_failed", command=parsed.command, error=str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
