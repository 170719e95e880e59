"""BMail - an in-memory mailbox client.

This package provides the mailbox state model (messages and drafts), the
operations that mutate it, and the pure view engine that derives what a
folder shows for a given search query.
"""

__version__ = "0.1.0"
__author__ = "Trickl"

from bmail.config import Settings, get_settings
from bmail.session import MailboxSession
from bmail.store import MessageStore

__all__ = [
    "MailboxSession",
    "MessageStore",
    "Settings",
    "get_settings",
    "__version__",
    "__author__",
]
