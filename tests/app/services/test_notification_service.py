"""Tests for NotificationService."""

from datetime import datetime, timedelta, timezone

from app.core.pair_key import build_pair_key
from app.models.message import Message
from app.models.mixins import utcnow
from app.services.message_service import MessageService
from app.services.notification_service import NotificationService, as_utc


def test_has_new_since_scenario(db, setup_user, setup_other_user):
    """Poll before the send sees nothing; the next poll with the same watermark does."""
    svc = NotificationService(db)
    t0 = utcnow() - timedelta(seconds=1)
    assert svc.has_new_since(setup_other_user.id, t0) is False

    MessageService(db).send(setup_user.id, setup_other_user.id, "new!")
    assert svc.has_new_since(setup_other_user.id, t0) is True


def test_has_new_since_ignores_outgoing(db, setup_user, setup_other_user):
    t0 = utcnow() - timedelta(seconds=1)
    MessageService(db).send(setup_user.id, setup_other_user.id, "outgoing")
    assert NotificationService(db).has_new_since(setup_user.id, t0) is False


def test_has_new_since_after_latest_message(db, setup_message, setup_other_user):
    later = utcnow() + timedelta(seconds=5)
    assert NotificationService(db).has_new_since(setup_other_user.id, later) is False


def test_has_new_since_accepts_naive_and_offset_timestamps(
    db, setup_message, setup_other_user
):
    svc = NotificationService(db)
    earlier_naive = utcnow().replace(tzinfo=None) - timedelta(minutes=1)
    earlier_offset = (utcnow() - timedelta(minutes=1)).astimezone(
        timezone(timedelta(hours=-5))
    )
    assert svc.has_new_since(setup_other_user.id, earlier_naive) is True
    assert svc.has_new_since(setup_other_user.id, earlier_offset) is True


def test_check_new_returns_messages_and_watermark(db, setup_user, setup_other_user):
    msg_svc = MessageService(db)
    svc = NotificationService(db)
    first = msg_svc.send(setup_user.id, setup_other_user.id, "one")

    everything = svc.check_new(setup_other_user.id)
    assert everything.has_new is True
    assert [m.id for m in everything.messages] == [first.id]

    nothing = svc.check_new(setup_other_user.id, everything.last_checked)
    assert nothing.has_new is False
    assert nothing.messages == []

    second = msg_svc.send(setup_user.id, setup_other_user.id, "two")
    fresh = svc.check_new(setup_other_user.id, everything.last_checked)
    assert [m.id for m in fresh.messages] == [second.id]
    assert fresh.last_checked >= everything.last_checked


def test_as_utc():
    naive = datetime(2026, 1, 1, 12, 0)
    assert as_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    shifted = datetime(2026, 1, 1, 7, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert as_utc(shifted).hour == 12


def test_check_new_watermark_follows_returned_messages(db, setup_user, setup_other_user):
    svc = NotificationService(db)
    assert svc.check_new(setup_other_user.id).last_checked is None

    first = MessageService(db).send(setup_user.id, setup_other_user.id, "one")
    polled = svc.check_new(setup_other_user.id)
    assert polled.last_checked == as_utc(first.created_at)


def test_check_new_keeps_late_committed_message(db, setup_user, setup_other_user):
    """A message stamped before a poll but committed after it shows up next time."""
    svc = NotificationService(db)
    since = utcnow() - timedelta(minutes=5)

    empty = svc.check_new(setup_other_user.id, since)
    assert empty.has_new is False
    assert empty.last_checked == as_utc(since)

    late = Message(
        sender_id=setup_user.id,
        recipient_id=setup_other_user.id,
        pair_key=build_pair_key(setup_user.id, setup_other_user.id),
        content="stamped before the poll",
        read=False,
        created_at=utcnow() - timedelta(minutes=1),
    )
    db.add(late)
    db.commit()

    following = svc.check_new(setup_other_user.id, empty.last_checked)
    assert [m.id for m in following.messages] == [late.id]
