import pytest

from expense_tracker.services.notification_store import NotificationStore


def test_new_notifications_are_unread_and_newest_first(db):
    store = NotificationStore(db)
    first = store.create(1, "First", "one", "Info")
    second = store.create(1, "Second", "two", "Success")
    store.create(2, "Elsewhere", "three", "Info")

    assert [n.id for n in store.list_for_owner(1)] == [second.id, first.id]
    assert store.unread_count(1) == 2
    assert store.unread_count(2) == 1


def test_mark_read_stamps_read_time(db):
    store = NotificationStore(db)
    notification = store.create(1, "Budget Alert: Overall", "msg", "Info")

    assert store.mark_read(notification.id) is True
    db.refresh(notification)
    assert notification.is_read is True
    assert notification.read_at is not None
    assert store.unread_count(1) == 0

    assert store.mark_read(12345) is False


def test_delete(db):
    store = NotificationStore(db)
    notification = store.create(1, "Title", "msg")

    assert store.delete(notification.id) is True
    assert store.get_by_id(notification.id) is None
    assert store.delete(notification.id) is False


def test_unknown_type_is_rejected(db):
    with pytest.raises(ValueError):
        NotificationStore(db).create(1, "Title", "msg", "Urgent")


def test_reading_twice_keeps_the_first_read_time(db):
    store = NotificationStore(db)
    notification = store.create(1, "Title", "msg")
    store.mark_read(notification.id)
    db.refresh(notification)
    first_read = notification.read_at

    assert store.mark_read(notification.id) is True
    db.refresh(notification)
    assert notification.read_at == first_read
