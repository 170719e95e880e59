"""Pure derivation of what the mailbox shows.

Nothing here holds state or mutates its inputs; every function is
recomputed from the store's current collections on demand. Time-relative
helpers take the reference instant as an argument and never read the
system clock.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from bmail.models import DraftMessage, Folder, MailItem, Message, View


class TimeBucket(str, Enum):
    """How a timestamp is labelled in the compact list."""

    CLOCK = "clock"  # under 24 hours old
    WEEKDAY = "weekday"  # under 7 days old
    DATE = "date"


@dataclass(frozen=True)
class FolderSummary:
    """Live counts for one sidebar entry."""

    view: View
    display_name: str
    total: int
    unread: int


def _membership(view: View) -> Callable[[Message], bool]:
    if view is View.STARRED:
        return lambda m: m.is_starred
    folder = Folder(view.value)
    return lambda m: m.folder == folder


def _as_view(view: View | str) -> View | None:
    try:
        return View(view)
    except ValueError:
        return None


def select_folder(
    view: View | str,
    messages: Iterable[Message],
    drafts: Iterable[DraftMessage],
) -> list[MailItem]:
    """Map a view to its candidate items.

    Drafts come from the drafts collection; starred spans every folder,
    trash included. Unknown view names give an empty list.
    """
    resolved = _as_view(view)
    if resolved is None:
        return []
    if resolved is View.DRAFTS:
        return list(drafts)
    predicate = _membership(resolved)
    return [m for m in messages if predicate(m)]


def apply_search(items: Iterable[MailItem], query: str) -> list[MailItem]:
    """Keep items whose subject, sender or body contains ``query``.

    Matching is a case-insensitive raw substring test. An empty query
    keeps everything.
    """
    if not query:
        return list(items)
    needle = query.lower()
    return [
        item
        for item in items
        if needle in item.subject.lower()
        or needle in item.sender.lower()
        or needle in item.body.lower()
    ]


def sort_by_recency(items: Iterable[MailItem]) -> list[MailItem]:
    """Newest first. Items sharing a timestamp keep their relative order."""
    return sorted(items, key=lambda item: item.timestamp, reverse=True)


def visible_messages(
    messages: Sequence[Message],
    drafts: Sequence[DraftMessage],
    view: View | str,
    query: str = "",
) -> list[MailItem]:
    """The ordered list a folder shows for the current search."""
    return sort_by_recency(apply_search(select_folder(view, messages, drafts), query))


def bucket_time(timestamp: datetime, now: datetime) -> TimeBucket:
    """Classify ``timestamp`` by its age relative to ``now``.

    Ages are floored to whole hours and days; timestamps later than
    ``now`` fall in the clock bucket.
    """
    age = (now - timestamp).total_seconds()
    if math.floor(age / 3600) < 24:
        return TimeBucket.CLOCK
    if math.floor(age / 86400) < 7:
        return TimeBucket.WEEKDAY
    return TimeBucket.DATE


def format_timestamp(timestamp: datetime, now: datetime) -> str:
    """Compact label for the message list.

    Examples:
        - same day -> "10:30 AM"
        - this week -> "Wed"
        - older -> "Mar 4"
    """
    bucket = bucket_time(timestamp, now)
    if bucket is TimeBucket.CLOCK:
        return timestamp.strftime("%I:%M %p")
    if bucket is TimeBucket.WEEKDAY:
        return timestamp.strftime("%a")
    return f"{timestamp:%b} {timestamp.day}"


def folder_counts(
    messages: Sequence[Message],
    drafts: Sequence[DraftMessage],
) -> list[FolderSummary]:
    """Total and unread counts for every sidebar entry, in sidebar order."""
    summaries = []
    for view in View:
        items = select_folder(view, messages, drafts)
        summaries.append(
            FolderSummary(
                view=view,
                display_name=view.display_name,
                total=len(items),
                unread=sum(1 for item in items if not item.is_read),
            )
        )
    return summaries
