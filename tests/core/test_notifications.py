from __future__ import annotations

import pendulum

from smarthire.core import NotificationCenter


class FakeClock:
    def __init__(self) -> None:
        self.now = pendulum.datetime(2024, 5, 1, 9, 0, 0)

    def __call__(self) -> pendulum.DateTime:
        return self.now

    def tick(self, seconds: int) -> None:
        self.now = self.now.add(seconds=seconds)


def test_toast_expires_after_four_seconds():
    clock = FakeClock()
    center = NotificationCenter(clock=clock)

    toast = center.add_toast("Saved", "success")
    clock.tick(3)
    assert [item.id for item in center.toasts] == [toast.id]

    clock.tick(1)
    assert center.toasts == ()


def test_toast_ttl_is_configurable():
    clock = FakeClock()
    center = NotificationCenter(toast_ttl_seconds=10, clock=clock)

    center.add_toast("Working")
    clock.tick(5)

    assert len(center.toasts) == 1


def test_manual_dismiss_then_expiry_is_harmless():
    clock = FakeClock()
    center = NotificationCenter(clock=clock)
    toast = center.add_toast("Oops", "error")

    assert center.remove_toast(toast.id) is True
    clock.tick(5)

    assert center.expire() == []
    assert center.remove_toast(toast.id) is False


def test_expire_returns_dropped_toasts_in_order():
    clock = FakeClock()
    center = NotificationCenter(clock=clock)
    first = center.add_toast("one")
    clock.tick(2)
    second = center.add_toast("two")
    clock.tick(3)

    expired = center.expire()

    assert [item.id for item in expired] == [first.id]
    assert [item.id for item in center.toasts] == [second.id]


def test_notifications_are_newest_first_with_unread_count():
    clock = FakeClock()
    center = NotificationCenter(clock=clock)

    center.add_notification("Questions Generated", "Interview guide created for Jane", "success")
    clock.tick(1)
    center.add_notification("Offer Ready", "Offer letter generated successfully", "success")

    assert [item.title for item in center.notifications] == ["Offer Ready", "Questions Generated"]
    assert center.unread_count == 2
    assert center.notifications[0].timestamp.startswith("2024-05-01T09:00:01")

    center.mark_all_read()
    assert center.unread_count == 0
    assert all(item.read for item in center.notifications)

    center.add_notification("Salary Estimated", "Market range analysis completed")
    assert center.unread_count == 1
    assert center.notifications[0].severity == "info"
