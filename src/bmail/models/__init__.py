"""Data models for BMail.

This module contains Pydantic models for the mailbox entities and the
inputs the user hands to the store.
"""

from enum import Enum

from pydantic import BaseModel, Field

from bmail.models.message import DraftMessage, Folder, MailItem, Message, to_logical_time


class View(str, Enum):
    """Sidebar entries, in display order.

    Every view but ``STARRED`` maps onto a folder; starred is a predicate
    over all delivered mail.
    """

    INBOX = "inbox"
    STARRED = "starred"
    SENT = "sent"
    DRAFTS = "drafts"
    TRASH = "trash"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class ComposeInput(BaseModel):
    """Contents of the compose form."""

    to: str = Field(default="", description="Recipient address")
    subject: str = Field(default="", description="Subject line")
    body: str = Field(default="", description="Message body")

    @property
    def is_blank(self) -> bool:
        """True when every field is empty."""
        return not (self.to or self.subject or self.body)


class UserIdentity(BaseModel):
    """The signed-in user, used as the sender of composed mail."""

    name: str = Field(description="Display name")
    email: str = Field(description="Email address")
    avatar: str = Field(default="", description="Initials shown as the avatar")


__all__ = [
    "ComposeInput",
    "DraftMessage",
    "Folder",
    "MailItem",
    "Message",
    "UserIdentity",
    "View",
    "to_logical_time",
]
