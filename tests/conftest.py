"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest
import structlog

from bmail.fixtures import default_fixture
from bmail.models import ComposeInput, UserIdentity
from bmail.session import MailboxSession
from bmail.store import MessageStore

FROZEN_TIME = datetime(2030, 3, 14, 15, 14)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any structlog configuration a test (e.g. the CLI) applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def clear_settings_cache():
    """Make get_settings re-read the environment, before and after the test."""
    from bmail.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_settings():
    """Provide mock settings for testing."""
    from bmail.config import Settings

    return Settings(
        log_level="DEBUG",
        debug=True,
        frozen_time=FROZEN_TIME,
    )


@pytest.fixture
def now() -> datetime:
    """The logical time the sample mailbox is frozen at."""
    return FROZEN_TIME


@pytest.fixture
def me() -> UserIdentity:
    return UserIdentity(name="Alex Chen", email="me@matrices.ai", avatar="AC")


@pytest.fixture
def store() -> MessageStore:
    """A store seeded with the sample mailbox."""
    fixture = default_fixture()
    return MessageStore(fixture.messages, fixture.drafts)


@pytest.fixture
def session() -> MailboxSession:
    """A session over the sample mailbox at the frozen time."""
    return MailboxSession.from_fixture(default_fixture(), FROZEN_TIME)


@pytest.fixture
def compose() -> ComposeInput:
    return ComposeInput(to="a@b.com", subject="Lunch", body="Noon at the usual place?")
