# =============================================================================
# tests/unit/test_runtime.py
# Unit Tests for the Streamlit/asyncio bridge
# =============================================================================

import asyncio
import threading
import time

import pytest

from vanbox_core.errors import EntryStoreError, OperationTimeoutError
from vanbox_core.ui.runtime import TIMED_OUT, run_async


@pytest.fixture
def background_loop():
    """An event loop running in its own thread, like the app's shared loop."""
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    yield loop
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=5)
    loop.close()


def wait_for(predicate, seconds: float = 2.0) -> bool:
    deadline = time.monotonic() + seconds
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class TestRunAsync:
    """Running coroutines from the script thread"""

    def test_returns_coroutine_result(self, background_loop):
        async def answer():
            return 42

        assert run_async(answer(), loop=background_loop) == 42

    def test_errors_propagate_unchanged(self, background_loop):
        async def broken():
            raise EntryStoreError("connection reset", operation="select")

        with pytest.raises(EntryStoreError, match="connection reset"):
            run_async(broken(), loop=background_loop)

    def test_slow_call_is_cancelled_and_raised_as_vanbox_error(self, background_loop):
        cancelled = threading.Event()

        async def slow():
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        with pytest.raises(OperationTimeoutError) as exc_info:
            run_async(slow(), timeout=0.1, loop=background_loop)

        assert exc_info.value.code == "TIMEOUT_001"
        assert exc_info.value.message == TIMED_OUT
        assert exc_info.value.details == {"timeout": 0.1}
        assert cancelled.wait(timeout=2)

    def test_timed_out_operation_releases_its_busy_state(self, background_loop, controller, store):
        async def stuck_reload():
            store.hold("select")
            return await controller.reload()

        with pytest.raises(OperationTimeoutError):
            run_async(stuck_reload(), timeout=0.1, loop=background_loop)

        assert wait_for(lambda: not controller.is_loading)
        assert controller.entries == []
