"""Seed data for a mailbox session.

A fixture supplies the signed-in user plus the initial messages and drafts.
It can come from the built-in sample mailbox or from a JSON document shaped
like::

    {
      "user": {"name": "...", "email": "...", "avatar": "AC"},
      "messages": [{"id": 1, "from": "...", "to": "...", "isRead": false, ...}],
      "drafts": [{"id": 101, "from": "...", "to": "...", ...}]
    }
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, ValidationError

from bmail.exceptions import FixtureError
from bmail.models import DraftMessage, Folder, Message, UserIdentity

logger = structlog.get_logger()


class Fixture(BaseModel):
    """Initial mailbox contents."""

    user: UserIdentity = Field(description="Signed-in user")
    messages: list[Message] = Field(default_factory=list, description="Delivered messages")
    drafts: list[DraftMessage] = Field(default_factory=list, description="Saved drafts")


def load_fixture(path: Path) -> Fixture:
    """Read and validate a JSON fixture.

    Args:
        path: Location of the JSON document.

    Returns:
        Fixture: The validated seed data.

    Raises:
        FixtureError: If the file cannot be read or does not validate.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FixtureError(f"Cannot read fixture {path}: {e}") from e

    try:
        fixture = Fixture.model_validate_json(raw)
    except ValidationError as e:
        raise FixtureError(f"Invalid fixture {path}: {e}") from e

    logger.info(
        "fixture_loaded",
        path=str(path),
        message_count=len(fixture.messages),
        draft_count=len(fixture.drafts),
    )
    return fixture


def default_fixture() -> Fixture:
    """The built-in sample mailbox."""
    me = UserIdentity(name="Alex Chen", email="me@matrices.ai", avatar="AC")

    messages = [
        Message(
            id=1,
            sender="john.doe@company.com",
            recipient=me.email,
            subject="Q1 Performance Review",
            body=(
                "Hi there,\n\n"
                "I wanted to discuss your performance in Q1. Overall, you've done excellent "
                "work on the project deliverables.\n\n"
                "Let's schedule a meeting to go over the details.\n\n"
                "Best regards,\nJohn"
            ),
            timestamp=datetime(2030, 3, 14, 10, 30),
            is_read=False,
            is_starred=True,
            folder=Folder.INBOX,
            has_attachment=True,
        ),
        Message(
            id=2,
            sender="sarah.wilson@matrices.ai",
            recipient=me.email,
            subject="Welcome to the team!",
            body=(
                "Welcome to Matrices! We're excited to have you join our engineering team.\n\n"
                "Your first day orientation is scheduled for Monday at 9 AM. Please bring "
                "your ID and any necessary documents.\n\n"
                "Looking forward to working with you!\n\n"
                "Sarah Wilson\nHR Manager"
            ),
            timestamp=datetime(2030, 3, 13, 16, 45),
            is_read=True,
            folder=Folder.INBOX,
        ),
        Message(
            id=3,
            sender="notifications@github.com",
            recipient=me.email,
            subject="[matrices-ai/bmail] New pull request #42",
            body=(
                "A new pull request has been opened:\n\n"
                "Feat: Add email search functionality\n\n"
                "This PR adds comprehensive search capabilities to the BMail application "
                "including:\n"
                "- Subject line search\n- Sender search\n- Full-text search\n"
                "- Date range filtering\n\n"
                "Please review when you have time."
            ),
            timestamp=datetime(2030, 3, 13, 14, 22),
            is_read=True,
            folder=Folder.INBOX,
        ),
        Message(
            id=4,
            sender=me.email,
            recipient="client@business.com",
            subject="Project Update - March 2030",
            body=(
                "Dear Client,\n\n"
                "I hope this email finds you well. I wanted to provide you with an update "
                "on our current project status.\n\n"
                "We have completed the initial development phase and are now moving into "
                "testing. The deliverables are on track for the end-of-month deadline.\n\n"
                "Please let me know if you have any questions.\n\n"
                "Best regards,\nYour Name"
            ),
            timestamp=datetime(2030, 3, 12, 11, 15),
            is_read=True,
            folder=Folder.SENT,
        ),
        Message(
            id=5,
            sender="team@matrices.ai",
            recipient=me.email,
            subject="Important: Security Update Required",
            body=(
                "Action Required: Please update your password\n\n"
                "We've detected some unusual activity on your account. As a precautionary "
                "measure, please update your password immediately.\n\n"
                "Click here to update your password: [Update Password]\n\n"
                "If you have any questions, please contact our security team.\n\n"
                "Matrices Security Team"
            ),
            timestamp=datetime(2030, 3, 11, 9, 0),
            is_read=False,
            is_starred=True,
            folder=Folder.INBOX,
        ),
    ]

    drafts = [
        DraftMessage(
            id=101,
            sender=me.email,
            recipient="manager@matrices.ai",
            subject="Weekly Status Report - Draft",
            body=(
                "Hi Manager,\n\n"
                "Here's my weekly status report:\n\n"
                "- Completed the email client replica\n"
                "- Fixed bugs in the search functionality\n"
                "- Started working on..."
            ),
            timestamp=datetime(2030, 3, 14, 12, 30),
        ),
    ]

    return Fixture(user=me, messages=messages, drafts=drafts)
