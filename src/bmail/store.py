"""In-memory message store.

The store owns the two canonical collections (delivered messages and
drafts) and is the only place they are mutated. Operations never raise:
bad input is reported through a ``ComposeResult`` and unknown ids are
silent no-ops.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from itertools import count

import structlog

from bmail.exceptions import FixtureError
from bmail.models import ComposeInput, DraftMessage, Folder, MailItem, Message, UserIdentity

logger = structlog.get_logger()

NO_SUBJECT = "(No Subject)"

# Messages in these folders are authored by the user and always read.
_ALWAYS_READ = frozenset({Folder.SENT, Folder.DRAFTS})


@dataclass(frozen=True)
class ComposeResult:
    """Outcome of a send or save operation."""

    accepted: bool
    item: MailItem | None = None
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.accepted


def _rejected(reason: str) -> ComposeResult:
    logger.info("compose_rejected", reason=reason)
    return ComposeResult(accepted=False, reason=reason)


def _check_sendable(compose: ComposeInput) -> str | None:
    if not compose.to:
        return "missing_recipient"
    if not compose.subject:
        return "missing_subject"
    return None


class MessageStore:
    """Canonical state for delivered messages and drafts."""

    def __init__(
        self,
        messages: Iterable[Message] = (),
        drafts: Iterable[DraftMessage] = (),
    ) -> None:
        """Create a store from seed collections.

        Args:
            messages: Delivered messages to start with.
            drafts: Drafts to start with.

        Raises:
            FixtureError: If an id repeats within either collection.
        """
        self._messages: list[Message] = [m.model_copy() for m in messages]
        self._drafts: list[DraftMessage] = [d.model_copy() for d in drafts]

        for name, items in (("messages", self._messages), ("drafts", self._drafts)):
            ids = [item.id for item in items]
            if len(ids) != len(set(ids)):
                raise FixtureError(f"duplicate ids in seeded {name}")

        seeded_ids = [item.id for item in self._messages] + [item.id for item in self._drafts]
        self._ids = count(max(seeded_ids, default=0) + 1)
        self._lock = threading.RLock()

        logger.debug(
            "message_store_initialized",
            message_count=len(self._messages),
            draft_count=len(self._drafts),
        )

    # Everything handed out is a copy; state changes only through the
    # operations below.

    @property
    def messages(self) -> tuple[Message, ...]:
        """Snapshot of delivered messages in insertion order."""
        return tuple(m.model_copy() for m in self._messages)

    @property
    def drafts(self) -> tuple[DraftMessage, ...]:
        """Snapshot of drafts in insertion order."""
        return tuple(d.model_copy() for d in self._drafts)

    def get_message(self, message_id: int) -> Message | None:
        message = self._find_message(message_id)
        return message.model_copy() if message is not None else None

    def get_draft(self, draft_id: int) -> DraftMessage | None:
        draft = self._find_draft(draft_id)
        return draft.model_copy() if draft is not None else None

    def mark_read(self, message_id: int) -> None:
        """Mark a delivered message as read.

        Sent mail is always read, so it is left untouched. Unknown ids and
        already-read messages are no-ops.
        """
        with self._lock:
            message = self._find_message(message_id)
            if message is None or message.is_read or message.folder in _ALWAYS_READ:
                logger.debug("mark_read_skipped", message_id=message_id)
                return
            message.is_read = True
            logger.info("message_marked_read", message_id=message_id)

    def toggle_star(self, message_id: int) -> None:
        """Flip the star on a delivered message. Unknown ids are no-ops."""
        with self._lock:
            message = self._find_message(message_id)
            if message is None:
                logger.debug("toggle_star_skipped", message_id=message_id)
                return
            message.is_starred = not message.is_starred
            logger.info("message_star_toggled", message_id=message_id, is_starred=message.is_starred)

    def soft_delete(self, message_id: int) -> None:
        """Move a delivered message to trash. Nothing is ever erased."""
        with self._lock:
            message = self._find_message(message_id)
            if message is None:
                logger.debug("soft_delete_skipped", message_id=message_id)
                return
            previous = message.folder
            message.folder = Folder.TRASH
            logger.info("message_deleted", message_id=message_id, previous_folder=previous.value)

    def send(self, compose: ComposeInput, sender: UserIdentity, now: datetime) -> ComposeResult:
        """Create a sent message from the compose form.

        Args:
            compose: Form contents; ``to`` and ``subject`` must be non-empty.
            sender: Identity the message is sent from.
            now: Logical time stamped on the new message.

        Returns:
            ComposeResult: Accepted with the new message, or rejected with a
            reason and no state change.
        """
        reason = _check_sendable(compose)
        if reason:
            return _rejected(reason)

        with self._lock:
            message = self._append_sent(compose, sender, now)
        return ComposeResult(accepted=True, item=message.model_copy())

    def save_draft(self, compose: ComposeInput, sender: UserIdentity, now: datetime) -> ComposeResult:
        """Store the compose form as a new draft.

        At least one field must be non-empty; a missing subject is replaced
        with ``(No Subject)``.
        """
        if compose.is_blank:
            return _rejected("empty_draft")

        with self._lock:
            draft = DraftMessage(
                id=next(self._ids),
                sender=sender.email,
                recipient=compose.to,
                subject=compose.subject or NO_SUBJECT,
                body=compose.body,
                timestamp=now,
            )
            self._drafts.append(draft)
        logger.info("draft_saved", draft_id=draft.id)
        return ComposeResult(accepted=True, item=draft.model_copy())

    def update_draft(self, draft_id: int, compose: ComposeInput, now: datetime) -> ComposeResult:
        """Re-save an existing draft in place."""
        if compose.is_blank:
            return _rejected("empty_draft")

        with self._lock:
            draft = self._find_draft(draft_id)
            if draft is None:
                return _rejected("unknown_draft")
            draft.recipient = compose.to
            draft.subject = compose.subject or NO_SUBJECT
            draft.body = compose.body
            draft.timestamp = now
        logger.info("draft_updated", draft_id=draft_id)
        return ComposeResult(accepted=True, item=draft.model_copy())

    def send_draft(
        self,
        draft_id: int,
        compose: ComposeInput,
        sender: UserIdentity,
        now: datetime,
    ) -> ComposeResult:
        """Send an edited draft and remove it from the drafts collection.

        The sent message gets a fresh id; the draft's id is retired.
        """
        reason = _check_sendable(compose)
        if reason:
            return _rejected(reason)

        with self._lock:
            draft = self._find_draft(draft_id)
            if draft is None:
                return _rejected("unknown_draft")
            message = self._append_sent(compose, sender, now)
            self._drafts.remove(draft)
        logger.info("draft_promoted", draft_id=draft_id, message_id=message.id)
        return ComposeResult(accepted=True, item=message.model_copy())

    def _find_message(self, message_id: int) -> Message | None:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    def _find_draft(self, draft_id: int) -> DraftMessage | None:
        for draft in self._drafts:
            if draft.id == draft_id:
                return draft
        return None

    def _append_sent(self, compose: ComposeInput, sender: UserIdentity, now: datetime) -> Message:
        message = Message(
            id=next(self._ids),
            sender=sender.email,
            recipient=compose.to,
            subject=compose.subject,
            body=compose.body,
            timestamp=now,
            is_read=True,
            is_starred=False,
            folder=Folder.SENT,
        )
        self._messages.append(message)
        logger.info("message_sent", message_id=message.id, recipient=message.recipient)
        return message
