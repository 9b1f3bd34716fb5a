"""Tests for MessageService."""

from uuid import uuid4

import pytest

from app.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.models.message import Message
from app.services.message_service import MessageService, validate_content


def test_send_then_get_round_trip(db, setup_user, setup_other_user, setup_item):
    """send then get_message returns an unread message with the given fields."""
    svc = MessageService(db)
    sent = svc.send(
        setup_user.id, setup_other_user.id, "Is this still available?", setup_item.id
    )
    found = svc.get_message(sent.id)
    assert found.id == sent.id
    assert found.sender_id == setup_user.id
    assert found.recipient_id == setup_other_user.id
    assert found.content == "Is this still available?"
    assert found.item_id == setup_item.id
    assert found.read is False
    assert found.created_at is not None


def test_send_without_item(db, setup_user, setup_other_user):
    svc = MessageService(db)
    message = svc.send(setup_user.id, setup_other_user.id, "hello")
    assert message.item_id is None


def test_send_stores_canonical_pair_key(db, setup_user, setup_other_user):
    """Both directions of a pair share the same key."""
    svc = MessageService(db)
    a_to_b = svc.send(setup_user.id, setup_other_user.id, "hi")
    b_to_a = svc.send(setup_other_user.id, setup_user.id, "hey")
    assert a_to_b.pair_key == b_to_a.pair_key


def test_send_content_of_exactly_max_length(db, setup_user, setup_other_user):
    svc = MessageService(db)
    message = svc.send(setup_user.id, setup_other_user.id, "x" * 1000)
    assert len(message.content) == 1000


def test_send_content_over_max_length(db, setup_user, setup_other_user):
    svc = MessageService(db)
    with pytest.raises(ValidationError, match="1000"):
        svc.send(setup_user.id, setup_other_user.id, "x" * 1001)
    assert db.query(Message).count() == 0


def test_send_counts_surrounding_whitespace_toward_max_length(
    db, setup_user, setup_other_user
):
    svc = MessageService(db)
    with pytest.raises(ValidationError, match="1000"):
        svc.send(setup_user.id, setup_other_user.id, "x" * 1000 + " ")
    assert db.query(Message).count() == 0


def test_send_stores_padded_content_as_given(db, setup_user, setup_other_user):
    svc = MessageService(db)
    sent = svc.send(setup_user.id, setup_other_user.id, "  hi  ")
    db.expire_all()
    assert svc.get_message(sent.id).content == "  hi  "


@pytest.mark.parametrize("content", ["", "   ", "\n\t", None])
def test_send_empty_content(db, setup_user, setup_other_user, content):
    svc = MessageService(db)
    with pytest.raises(ValidationError, match="empty"):
        svc.send(setup_user.id, setup_other_user.id, content)


def test_send_to_self(db, setup_user):
    svc = MessageService(db)
    with pytest.raises(ValidationError, match="yourself"):
        svc.send(setup_user.id, setup_user.id, "note to self")


def test_send_to_unknown_recipient(db, setup_user):
    svc = MessageService(db)
    with pytest.raises(NotFoundError):
        svc.send(setup_user.id, uuid4(), "hello?")


def test_send_to_inactive_recipient(db, setup_user, setup_inactive_user):
    svc = MessageService(db)
    with pytest.raises(NotFoundError):
        svc.send(setup_user.id, setup_inactive_user.id, "hello?")


def test_send_about_unknown_item(db, setup_user, setup_other_user):
    svc = MessageService(db)
    with pytest.raises(NotFoundError, match="Item"):
        svc.send(setup_user.id, setup_other_user.id, "about this", uuid4())
    assert db.query(Message).count() == 0


def test_validate_content_keeps_text_unchanged():
    assert validate_content("  hi there \n") == "  hi there \n"


def test_get_message_not_found(db):
    svc = MessageService(db)
    with pytest.raises(NotFoundError):
        svc.get_message(12345)


def test_get_message_for_user_participants(db, setup_message, setup_user, setup_other_user):
    svc = MessageService(db)
    assert svc.get_message_for_user(setup_message.id, setup_user.id).id == setup_message.id
    assert (
        svc.get_message_for_user(setup_message.id, setup_other_user.id).id
        == setup_message.id
    )


def test_get_message_for_user_outsider(db, setup_message, setup_outsider):
    svc = MessageService(db)
    with pytest.raises(AuthorizationError):
        svc.get_message_for_user(setup_message.id, setup_outsider.id)


def test_delete_by_sender(db, setup_message, setup_user):
    svc = MessageService(db)
    message_id = setup_message.id
    svc.delete(message_id, setup_user.id)
    with pytest.raises(NotFoundError):
        svc.get_message(message_id)


def test_delete_by_recipient(db, setup_message, setup_other_user):
    svc = MessageService(db)
    message_id = setup_message.id
    svc.delete(message_id, setup_other_user.id)
    assert db.query(Message).filter(Message.id == message_id).first() is None


def test_delete_by_outsider_keeps_message(db, setup_message, setup_outsider):
    """A non-participant cannot delete; the message survives."""
    svc = MessageService(db)
    with pytest.raises(AuthorizationError):
        svc.delete(setup_message.id, setup_outsider.id)
    assert svc.get_message(setup_message.id).id == setup_message.id


def test_delete_missing_message(db, setup_user):
    svc = MessageService(db)
    with pytest.raises(NotFoundError):
        svc.delete(999, setup_user.id)


def test_delete_twice(db, setup_message, setup_user):
    svc = MessageService(db)
    message_id = setup_message.id
    svc.delete(message_id, setup_user.id)
    with pytest.raises(NotFoundError):
        svc.delete(message_id, setup_user.id)


def test_list_for_user_newest_first_with_total(
    db, setup_user, setup_other_user, setup_outsider
):
    svc = MessageService(db)
    first = svc.send(setup_user.id, setup_other_user.id, "one")
    second = svc.send(setup_other_user.id, setup_user.id, "two")
    third = svc.send(setup_user.id, setup_outsider.id, "three")
    svc.send(setup_other_user.id, setup_outsider.id, "not mine")

    items, total = svc.list_for_user(setup_user.id, page=1, limit=10)
    assert total == 3
    assert [m.id for m in items] == [third.id, second.id, first.id]


def test_list_for_user_pagination(db, setup_user, setup_other_user):
    svc = MessageService(db)
    sent = [svc.send(setup_user.id, setup_other_user.id, f"m{i}") for i in range(5)]

    page_one, total = svc.list_for_user(setup_user.id, page=1, limit=2)
    page_three, _ = svc.list_for_user(setup_user.id, page=3, limit=2)
    assert total == 5
    assert [m.id for m in page_one] == [sent[4].id, sent[3].id]
    assert [m.id for m in page_three] == [sent[0].id]


def test_list_unread(db, setup_user, setup_other_user):
    svc = MessageService(db)
    svc.send(setup_user.id, setup_other_user.id, "to other")
    received = svc.send(setup_other_user.id, setup_user.id, "to me")
    unread = svc.list_unread(setup_user.id)
    assert [m.id for m in unread] == [received.id]
