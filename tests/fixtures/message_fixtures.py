"""Fixtures for messages."""

import pytest

from app.core.pair_key import build_pair_key
from app.models.message import Message


@pytest.fixture(scope="function")
def setup_message(db, setup_user, setup_other_user, setup_item):
    """An unread message from setup_user to setup_other_user about setup_item."""
    message = Message(
        sender_id=setup_user.id,
        recipient_id=setup_other_user.id,
        pair_key=build_pair_key(setup_user.id, setup_other_user.id),
        content="Is this still available?",
        item_id=setup_item.id,
        read=False,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message
