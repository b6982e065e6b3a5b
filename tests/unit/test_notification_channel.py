# =============================================================================
# tests/unit/test_notification_channel.py
# Unit Tests for NotificationChannel
# =============================================================================

import threading

from vanbox_core.notifications import NotificationChannel, NotificationKind


class TestNotify:
    """Queueing messages"""

    def test_ids_are_unique(self, notifications):
        ids = {notifications.success(f"message {i}") for i in range(50)}
        assert len(ids) == 50

    def test_messages_stack_oldest_first(self, notifications):
        notifications.success("first")
        notifications.error("second")

        active = notifications.tick()
        assert [n.message for n in active] == ["first", "second"]
        assert [n.kind for n in active] == [NotificationKind.SUCCESS, NotificationKind.ERROR]

    def test_default_and_custom_duration(self, notifications):
        default_id = notifications.success("saved")
        long_id = notifications.error("failed", duration_ms=5000)

        assert notifications.get(default_id).duration_ms == NotificationChannel.DEFAULT_DURATION_MS
        assert notifications.get(long_id).duration_ms == 5000


class TestLifecycle:
    """Auto-expiry, manual dismissal and the exit transition"""

    def test_message_visible_until_duration_elapses(self, notifications, fake_clock):
        note_id = notifications.success("saved")

        fake_clock.advance(2999)
        [note] = notifications.tick()
        assert note.id == note_id
        assert not note.is_exiting

    def test_message_exits_then_disappears(self, notifications, fake_clock):
        notifications.success("saved")

        fake_clock.advance(3000)
        [note] = notifications.tick()
        assert note.is_exiting

        fake_clock.advance(150)
        assert len(notifications.tick()) == 1

        fake_clock.advance(200)
        assert notifications.tick() == []

    def test_late_tick_removes_expired_message_at_once(self, notifications, fake_clock):
        """Exit timing is anchored to expiry, not to when tick() happened to run"""
        notifications.success("saved")

        fake_clock.advance(3301)
        assert notifications.tick() == []

    def test_dismiss_starts_exit_immediately(self, notifications, fake_clock):
        note_id = notifications.error("failed", duration_ms=5000)

        assert notifications.dismiss(note_id)
        assert notifications.get(note_id).is_exiting

        fake_clock.advance(301)
        assert notifications.tick() == []

    def test_dismiss_is_idempotent(self, notifications, fake_clock):
        note_id = notifications.success("saved")

        assert notifications.dismiss(note_id)
        assert not notifications.dismiss(note_id)

        fake_clock.advance(301)
        notifications.tick()
        assert not notifications.dismiss(note_id)
        assert not notifications.dismiss("unknown")

    def test_expiry_is_per_message(self, notifications, fake_clock):
        notifications.success("short")
        fake_clock.advance(1000)
        notifications.error("long", duration_ms=5000)

        fake_clock.advance(2400)
        assert [n.message for n in notifications.tick()] == ["long"]

    def test_clear(self, notifications):
        notifications.success("a")
        notifications.error("b")

        notifications.clear()
        assert len(notifications) == 0

    def test_len_waits_for_writers(self, notifications):
        """Counting takes the same lock as every other accessor"""
        notifications.success("a")
        counts = []
        reader = threading.Thread(target=lambda: counts.append(len(notifications)))

        with notifications._lock:
            reader.start()
            reader.join(timeout=0.2)
            assert reader.is_alive()

        reader.join(timeout=2)
        assert counts == [1]
