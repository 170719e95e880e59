"""Unit tests for the in-memory message store."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from bmail.exceptions import FixtureError
from bmail.models import ComposeInput, DraftMessage, Folder, Message
from bmail.store import NO_SUBJECT, ComposeResult, MessageStore


def _snapshot(store: MessageStore) -> list[dict]:
    return [m.model_dump() for m in store.messages] + [d.model_dump() for d in store.drafts]


class TestConstruction:
    def test_seeded_collections_keep_order(self, store) -> None:
        assert [m.id for m in store.messages] == [1, 2, 3, 4, 5]
        assert [d.id for d in store.drafts] == [101]

    def test_duplicate_seed_ids_rejected(self, now) -> None:
        messages = [Message(id=1, timestamp=now), Message(id=1, timestamp=now)]

        with pytest.raises(FixtureError):
            MessageStore(messages)

    def test_empty_store(self) -> None:
        store = MessageStore()

        assert store.messages == ()
        assert store.drafts == ()


class TestMarkRead:
    def test_marks_unread_inbox_message(self, store) -> None:
        store.mark_read(1)

        assert store.get_message(1).is_read is True

    def test_is_idempotent(self, store) -> None:
        store.mark_read(1)
        before = _snapshot(store)

        store.mark_read(1)

        assert _snapshot(store) == before

    def test_leaves_sent_mail_alone(self, now) -> None:
        # Sent mail is considered always read, even if seeded otherwise.
        store = MessageStore([Message(id=9, timestamp=now, folder=Folder.SENT, is_read=False)])

        store.mark_read(9)

        assert store.get_message(9).is_read is False

    def test_unknown_id_is_noop(self, store) -> None:
        before = _snapshot(store)

        store.mark_read(999)

        assert _snapshot(store) == before

    def test_does_not_touch_identity(self, store) -> None:
        message = store.get_message(1)
        folder, timestamp = message.folder, message.timestamp

        store.mark_read(1)

        after = store.get_message(1)
        assert (after.id, after.folder, after.timestamp) == (1, folder, timestamp)


class TestToggleStar:
    def test_is_its_own_inverse(self, store) -> None:
        original = store.get_message(2).is_starred

        store.toggle_star(2)
        assert store.get_message(2).is_starred is not original

        store.toggle_star(2)
        assert store.get_message(2).is_starred is original

    def test_keeps_folder(self, store) -> None:
        store.toggle_star(4)

        assert store.get_message(4).folder == Folder.SENT

    def test_unknown_id_is_noop(self, store) -> None:
        before = _snapshot(store)

        store.toggle_star(999)

        assert _snapshot(store) == before


class TestSoftDelete:
    @pytest.mark.parametrize("message_id", [1, 4])
    def test_moves_to_trash(self, store, message_id) -> None:
        store.soft_delete(message_id)

        assert store.get_message(message_id).folder == Folder.TRASH
        assert len(store.messages) == 5

    def test_is_idempotent(self, store) -> None:
        store.soft_delete(1)
        before = _snapshot(store)

        store.soft_delete(1)

        assert _snapshot(store) == before

    def test_keeps_star(self, store) -> None:
        store.soft_delete(1)

        assert store.get_message(1).is_starred is True

    def test_drafts_are_not_deletable(self, store) -> None:
        store.soft_delete(101)

        assert [d.id for d in store.drafts] == [101]

    def test_unknown_id_is_noop(self, store) -> None:
        before = _snapshot(store)

        store.soft_delete(999)

        assert _snapshot(store) == before


class TestSend:
    def test_missing_recipient_rejected(self, store, me, now) -> None:
        result = store.send(ComposeInput(to="", subject="x"), me, now)

        assert not result
        assert result.reason == "missing_recipient"
        assert result.item is None
        assert len(store.messages) == 5

    def test_missing_subject_rejected(self, store, me, now) -> None:
        result = store.send(ComposeInput(to="a@b.com", subject=""), me, now)

        assert result.accepted is False
        assert result.reason == "missing_subject"
        assert len(store.messages) == 5

    def test_creates_one_sent_message(self, store, me, now) -> None:
        result = store.send(ComposeInput(to="a@b.com", subject="x", body="hello"), me, now)

        assert result
        assert len(store.messages) == 6
        message = store.messages[-1]
        assert message == result.item
        assert message.folder == Folder.SENT
        assert message.is_read is True
        assert message.is_starred is False
        assert message.sender == "me@matrices.ai"
        assert message.recipient == "a@b.com"
        assert message.timestamp == now

    def test_ids_are_fresh_and_unique(self, store, me, now, compose) -> None:
        first = store.send(compose, me, now).item
        second = store.send(compose, me, now).item

        seeded = {1, 2, 3, 4, 5, 101}
        assert first.id not in seeded
        assert second.id not in seeded
        assert first.id != second.id

    def test_does_not_touch_drafts(self, store, me, now, compose) -> None:
        store.send(compose, me, now)

        assert [d.id for d in store.drafts] == [101]


class TestSaveDraft:
    def test_blank_draft_rejected(self, store, me, now) -> None:
        result = store.save_draft(ComposeInput(), me, now)

        assert not result
        assert result.reason == "empty_draft"
        assert len(store.drafts) == 1

    def test_missing_subject_defaults_to_placeholder(self, store, me, now) -> None:
        result = store.save_draft(ComposeInput(body="hi"), me, now)

        assert result
        draft = store.drafts[-1]
        assert draft == result.item
        assert draft.subject == NO_SUBJECT == "(No Subject)"
        assert draft.body == "hi"
        assert draft.timestamp == now
        assert draft.is_read is True

    def test_does_not_touch_messages(self, store, me, now, compose) -> None:
        store.save_draft(compose, me, now)

        assert len(store.messages) == 5


class TestDraftLifecycle:
    def test_update_draft_in_place(self, store, now) -> None:
        result = store.update_draft(101, ComposeInput(to="boss@matrices.ai", body="Done."), now)

        assert result
        draft = store.get_draft(101)
        assert draft.recipient == "boss@matrices.ai"
        assert draft.subject == NO_SUBJECT
        assert draft.body == "Done."
        assert draft.timestamp == now
        assert len(store.drafts) == 1

    def test_update_unknown_draft_rejected(self, store, now, compose) -> None:
        result = store.update_draft(999, compose, now)

        assert result.reason == "unknown_draft"

    def test_update_with_blank_form_rejected(self, store, now) -> None:
        result = store.update_draft(101, ComposeInput(), now)

        assert result.reason == "empty_draft"
        assert store.get_draft(101).subject == "Weekly Status Report - Draft"

    def test_send_draft_promotes_and_removes(self, store, me, now) -> None:
        draft = store.get_draft(101)
        compose = ComposeInput(to=draft.recipient, subject=draft.subject, body=draft.body)

        result = store.send_draft(101, compose, me, now)

        assert result
        assert store.get_draft(101) is None
        sent = result.item
        assert isinstance(sent, Message)
        assert sent.id != 101
        assert sent.folder == Folder.SENT
        assert sent.subject == "Weekly Status Report - Draft"

    def test_rejected_send_draft_keeps_draft(self, store, me, now) -> None:
        result = store.send_draft(101, ComposeInput(subject="No recipient"), me, now)

        assert result.reason == "missing_recipient"
        assert store.get_draft(101) is not None
        assert len(store.messages) == 5

    def test_send_unknown_draft_rejected(self, store, me, now, compose) -> None:
        result = store.send_draft(999, compose, me, now)

        assert result.reason == "unknown_draft"
        assert len(store.messages) == 5


def test_compose_result_truthiness() -> None:
    assert ComposeResult(accepted=True)
    assert not ComposeResult(accepted=False, reason="empty_draft")


def test_new_ids_skip_past_seeded_drafts(me) -> None:
    store = MessageStore(drafts=[DraftMessage(id=500, timestamp=datetime(2030, 1, 1))])

    result = store.send(ComposeInput(to="a@b.com", subject="x"), me, datetime(2030, 1, 2))

    assert result.item.id > 500


class TestSnapshots:
    def test_returned_messages_do_not_alias_state(self, store) -> None:
        store.messages[0].is_read = True
        store.get_message(5).is_starred = False
        store.drafts[0].subject = "Changed"

        assert store.get_message(1).is_read is False
        assert store.get_message(5).is_starred is True
        assert store.get_draft(101).subject == "Weekly Status Report - Draft"

    def test_seed_objects_are_not_shared(self, now) -> None:
        seed = Message(id=1, timestamp=now)
        store = MessageStore([seed])

        store.mark_read(1)

        assert seed.is_read is False
        assert store.get_message(1).is_read is True

    def test_result_item_is_a_copy(self, store, me, now, compose) -> None:
        result = store.send(compose, me, now)
        result.item.is_starred = True

        assert store.get_message(result.item.id).is_starred is False

    def test_aware_now_is_stored_as_logical_time(self, store, me) -> None:
        result = store.send(
            ComposeInput(to="a@b.com", subject="x"),
            me,
            datetime(2030, 3, 14, 15, 14, tzinfo=timezone.utc),
        )

        assert result.item.timestamp == datetime(2030, 3, 14, 15, 14)
