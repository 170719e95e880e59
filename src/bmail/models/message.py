"""Delivered messages and drafts.

Delivered mail and drafts share a shape but are separate entity types:
a ``Message`` moves between inbox/sent/trash, while a ``DraftMessage`` is
edited and re-saved until it is sent, at which point the store promotes it
to a new ``Message`` in the sent folder.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Folder(str, Enum):
    """Coarse mail categories. Every item belongs to exactly one."""

    INBOX = "inbox"
    SENT = "sent"
    DRAFTS = "drafts"
    TRASH = "trash"


def to_logical_time(value: datetime) -> datetime:
    """Return ``value`` as naive logical time.

    Logical time has no zone. Aware values are converted to UTC and the
    zone is dropped, so aware and naive stamps can be compared.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class _MailItem(BaseModel):
    """Fields and helpers shared by messages and drafts."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: int = Field(frozen=True, description="Unique identifier within the owning collection")
    sender: str = Field(default="", alias="from", description="From address (free text)")
    recipient: str = Field(default="", alias="to", description="To address (free text)")
    subject: str = Field(default="", description="Subject line")
    body: str = Field(default="", description="Plain text body, may contain line breaks")
    has_attachment: bool = Field(default=False, description="Whether the mail carries an attachment")

    @field_validator("timestamp", check_fields=False)
    @classmethod
    def _naive_timestamp(cls, value: datetime) -> datetime:
        return to_logical_time(value)

    @property
    def preview(self) -> str:
        """First line of the body, as shown in the message list."""
        lines = self.body.splitlines()
        return lines[0] if lines else ""

    @property
    def body_lines(self) -> list[str]:
        """Body split on line breaks, as shown in the reading pane."""
        return self.body.splitlines()


class Message(_MailItem):
    """A delivered message living in the inbox, sent or trash folder."""

    timestamp: datetime = Field(frozen=True, description="When the message was created")
    is_read: bool = Field(default=False, description="Whether the message has been opened")
    is_starred: bool = Field(default=False, description="User star toggle, independent of folder")
    folder: Folder = Field(default=Folder.INBOX, description="Folder the message lives in")

    @field_validator("folder")
    @classmethod
    def _not_drafts(cls, value: Folder) -> Folder:
        # Drafts are their own entity type.
        if value is Folder.DRAFTS:
            raise ValueError("delivered messages cannot live in the drafts folder")
        return value

    def __str__(self) -> str:
        read_marker = " " if self.is_read else "*"
        star_marker = "!" if self.is_starred else " "
        return f"{read_marker}{star_marker} {self.sender}: {self.subject}"


class DraftMessage(_MailItem):
    """An unsent message. Always read, never starred, always in drafts."""

    timestamp: datetime = Field(description="When the draft was last saved")

    @property
    def folder(self) -> Folder:
        return Folder.DRAFTS

    @property
    def is_read(self) -> bool:
        return True

    @property
    def is_starred(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"   [draft] {self.recipient}: {self.subject}"


MailItem = Message | DraftMessage
