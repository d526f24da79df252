"""Tests for the notification center."""

from surgery_agenda.models import NotificationType
from surgery_agenda.services import NotificationCenter


def test_notifications_stack_in_order():
    center = NotificationCenter(ttl_seconds=5)
    first = center.success("saved")
    second = center.error("failed")

    assert [n.id for n in center.active()] == [first.id, second.id]
    assert center.latest() == second
    assert second.type is NotificationType.ERROR


def test_notifications_expire():
    center = NotificationCenter(ttl_seconds=5)
    notification = center.success("saved")

    assert center.active(now=notification.created_at + 4.9) == [notification]
    assert center.active(now=notification.created_at + 5) == []
    assert center.latest() is None


def test_dismiss():
    center = NotificationCenter()
    notification = center.success("saved")

    assert center.dismiss(notification.id) is True
    assert center.dismiss(notification.id) is False
    assert center.active() == []
