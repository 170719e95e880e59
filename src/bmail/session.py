"""Mailbox session.

A session is the single owner of a ``MessageStore`` together with the
selector state a UI needs: the active view, the search query, the opened
item and the compose buffer. UI code calls these methods in response to
user actions and re-reads ``visible()`` and ``folders()`` afterwards.
"""

from __future__ import annotations

from datetime import datetime

import structlog

from bmail.config import Settings
from bmail.fixtures import Fixture, default_fixture, load_fixture
from bmail.models import ComposeInput, MailItem, Message, UserIdentity, View, to_logical_time
from bmail.store import ComposeResult, MessageStore
from bmail.views import FolderSummary, folder_counts, format_timestamp, visible_messages

logger = structlog.get_logger()


class MailboxSession:
    """One user's interaction with an in-memory mailbox."""

    def __init__(self, store: MessageStore, user: UserIdentity, now: datetime) -> None:
        """Initialize the session.

        Args:
            store: The mailbox contents, owned by this session from now on.
            user: Signed-in identity; composed mail is sent from its address.
            now: Logical time used for new mail and relative time labels.
        """
        self.store = store
        self.user = user
        self.now = to_logical_time(now)

        self.current_view: View | str = View.INBOX
        self.search_query = ""
        self.selected: MailItem | None = None

        # Compose state; None means the compose form is closed.
        self.compose: ComposeInput | None = None
        self.editing_draft_id: int | None = None

    @classmethod
    def from_fixture(cls, fixture: Fixture, now: datetime) -> MailboxSession:
        store = MessageStore(fixture.messages, fixture.drafts)
        return cls(store, fixture.user, now)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> MailboxSession:
        """Build a session from configuration.

        Args:
            settings: Application settings. If None, uses default settings.

        Raises:
            FixtureError: If the configured fixture cannot be loaded.
        """
        from bmail.config import get_settings

        settings = settings or get_settings()
        fixture = load_fixture(settings.fixture_path) if settings.fixture_path else default_fixture()
        fixture = fixture.model_copy(update={"user": settings.resolve_identity(fixture.user)})
        logger.info("mailbox_session_started", user=fixture.user.email, now=settings.frozen_time.isoformat())
        return cls.from_fixture(fixture, settings.frozen_time)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def visible(self) -> list[MailItem]:
        """Items of the current view matching the search, newest first."""
        return visible_messages(self.store.messages, self.store.drafts, self.current_view, self.search_query)

    def folders(self) -> list[FolderSummary]:
        return folder_counts(self.store.messages, self.store.drafts)

    def time_label(self, item: MailItem) -> str:
        return format_timestamp(item.timestamp, self.now)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def select_view(self, view: View | str) -> None:
        self.current_view = view
        self.selected = None

    def set_search(self, query: str) -> None:
        self.search_query = query

    def set_time(self, now: datetime) -> None:
        self.now = to_logical_time(now)

    def open_message(self, item_id: int) -> MailItem | None:
        """Open an item of the current view and mark delivered mail read.

        Returns:
            The opened item, or None if the id is not in the current view.
        """
        for item in self.visible():
            if item.id == item_id:
                break
        else:
            return None

        if isinstance(item, Message):
            self.store.mark_read(item.id)
            item = self.store.get_message(item.id)
        self.selected = item
        return item

    def close_message(self) -> None:
        self.selected = None

    # ------------------------------------------------------------------
    # Message actions
    # ------------------------------------------------------------------

    def toggle_star(self, message_id: int) -> None:
        self.store.toggle_star(message_id)
        if isinstance(self.selected, Message) and self.selected.id == message_id:
            self.selected = self.store.get_message(message_id)

    def delete(self, message_id: int) -> None:
        self.store.soft_delete(message_id)
        if self.selected is not None and self.selected.id == message_id:
            self.selected = None

    # ------------------------------------------------------------------
    # Compose
    # ------------------------------------------------------------------

    def start_compose(self) -> None:
        self.compose = ComposeInput()
        self.editing_draft_id = None
        self.selected = None

    def edit_draft(self, draft_id: int) -> bool:
        """Load a saved draft into the compose form."""
        draft = self.store.get_draft(draft_id)
        if draft is None:
            return False
        self.compose = ComposeInput(to=draft.recipient, subject=draft.subject, body=draft.body)
        self.editing_draft_id = draft_id
        self.selected = None
        return True

    def update_compose(
        self,
        to: str | None = None,
        subject: str | None = None,
        body: str | None = None,
    ) -> None:
        """Edit fields of the open compose form; None leaves a field as is."""
        if self.compose is None:
            self.start_compose()
        changes = {k: v for k, v in {"to": to, "subject": subject, "body": body}.items() if v is not None}
        self.compose = self.compose.model_copy(update=changes)

    def send(self) -> ComposeResult:
        """Send the compose form. A rejection keeps the form open."""
        if self.compose is None:
            return ComposeResult(accepted=False, reason="compose_closed")

        if self.editing_draft_id is not None:
            result = self.store.send_draft(self.editing_draft_id, self.compose, self.user, self.now)
        else:
            result = self.store.send(self.compose, self.user, self.now)

        if result:
            self._close_compose()
        return result

    def save_draft(self) -> ComposeResult:
        """Save the compose form as a draft. A rejection keeps the form open."""
        if self.compose is None:
            return ComposeResult(accepted=False, reason="compose_closed")

        if self.editing_draft_id is not None:
            result = self.store.update_draft(self.editing_draft_id, self.compose, self.now)
        else:
            result = self.store.save_draft(self.compose, self.user, self.now)

        if result:
            self._close_compose()
        return result

    def discard_compose(self) -> None:
        """Close the compose form without saving; edits are dropped."""
        if self.compose is not None:
            logger.debug("compose_discarded", editing_draft_id=self.editing_draft_id)
        self._close_compose()

    def _close_compose(self) -> None:
        self.compose = None
        self.editing_draft_id = None
