# =============================================================================
# tests/integration/test_note_lifecycle.py
# Integration Tests for the note lifecycle (Save → History → Export → Delete)
# =============================================================================

import asyncio

import pytest

from vanbox_core.app_context import build_app_context
from vanbox_core.config import load_settings
from vanbox_core.notifications import NotificationChannel, NotificationKind


@pytest.mark.integration
class TestNoteLifecycleIntegration:
    """
    End-to-end flow through a demo-mode app context.

    Tests the flow:
    1. Save notes
    2. History reload (newest first)
    3. Markdown export (oldest first)
    4. Confirmed delete
    5. Sign-out clears everything
    """

    @pytest.fixture
    def channel(self, fake_clock):
        return NotificationChannel(clock=fake_clock)

    def test_full_lifecycle(self, channel, fake_clock):
        async def scenario():
            context = await build_app_context(load_settings({}), notifications=channel)
            controller = context.controller
            assert context.auth.is_authenticated

            for text in ("first thought", "second thought", "third thought"):
                assert await controller.save(text)

            assert [e.content for e in controller.entries] == [
                "third thought", "second thought", "first thought",
            ]

            export = await controller.export()
            assert export.data.entry_count == 3
            assert export.data.content.index("first thought") < export.data.content.index("third thought")

            assert controller.request_delete(controller.entries[0].id)
            assert await controller.confirm_delete()
            assert [e.content for e in controller.entries] == ["second thought", "first thought"]

            # A fresh reload agrees with the optimistic removal
            await controller.reload()
            assert len(controller.entries) == 2

            await context.auth.sign_out()
            assert controller.entries == []
            assert not (await controller.save("after sign-out"))

            await context.close()
            return context

        context = asyncio.run(scenario())

        assert context.store.count() == 2
        kinds = [n.kind for n in channel.active]
        assert NotificationKind.ERROR not in kinds

        fake_clock.advance(3301)
        assert channel.tick() == []

    def test_contexts_are_isolated(self):
        """Each browser session gets its own store and notifications"""
        async def scenario():
            first = await build_app_context(load_settings({}))
            second = await build_app_context(load_settings({}))
            await first.controller.save("only in first")
            await second.controller.reload()
            return first, second

        first, second = asyncio.run(scenario())

        assert second.controller.entries == []
        assert len(second.notifications) == 0
        assert len(first.notifications) == 1
