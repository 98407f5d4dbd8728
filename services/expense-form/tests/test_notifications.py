import pytest

from expense_form.notifications import NotificationChannel, NotificationKind


def test_channel_starts_empty(clock) -> None:
    channel = NotificationChannel(clock=clock)

    assert channel.current is None


def test_success_notification_is_visible_until_it_expires(clock) -> None:
    channel = NotificationChannel(dismiss_after=2.2, clock=clock)

    shown = channel.success("Draft saved locally.")

    assert channel.current == shown
    assert shown.kind is NotificationKind.SUCCESS
    assert not shown.is_error

    clock.advance(2.0)
    assert channel.current is not None

    clock.advance(0.5)
    assert channel.current is None


def test_new_notification_replaces_current_and_restarts_timer(clock) -> None:
    channel = NotificationChannel(dismiss_after=2.2, clock=clock)
    channel.success("Draft saved locally.")
    clock.advance(2.0)

    replacement = channel.error("Please fill all required fields.")

    assert channel.current == replacement
    assert channel.current.is_error
    clock.advance(2.0)
    assert channel.current is not None
    assert channel.current.message == "Please fill all required fields."


def test_dismiss_removes_notification_early(clock) -> None:
    channel = NotificationChannel(clock=clock)
    channel.error("boom")

    channel.dismiss()

    assert channel.current is None


def test_show_accepts_kind_strings(clock) -> None:
    channel = NotificationChannel(clock=clock)

    notification = channel.show("error", "Could not save the draft.")

    assert notification.kind is NotificationKind.ERROR
    assert notification.expires_at == pytest.approx(notification.created_at + 2.2)


def test_unknown_kind_is_rejected(clock) -> None:
    channel = NotificationChannel(clock=clock)

    with pytest.raises(ValueError):
        channel.show("warning", "nope")


def test_dismiss_after_must_be_positive() -> None:
    with pytest.raises(ValueError):
        NotificationChannel(dismiss_after=0)
