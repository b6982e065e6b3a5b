# =============================================================================
# vanbox_core/ui/runtime.py
# Bridge between Streamlit's script thread and the asyncio core
# =============================================================================
"""
Streamlit reruns each page script in its own thread; the core is asyncio.
One background event loop per process runs every coroutine, and the script
thread blocks on the result. The per-session AppContext lives in
``st.session_state`` so each browser session keeps its own Supabase client
and identity.
"""

from __future__ import annotations
import asyncio
import concurrent.futures
import threading
from typing import Any, Awaitable, Mapping, Optional, TypeVar

import streamlit as st

from vanbox_core.app_context import AppContext, build_app_context
from vanbox_core.auth import AuthSession
from vanbox_core.config import load_settings
from vanbox_core.errors import OperationTimeoutError, VanboxError
from vanbox_core.logging import get_logger, setup_logging

logger = get_logger(__name__)

T = TypeVar("T")

CONTEXT_KEY = "vanbox_context"
TIMED_OUT = "The server took too long to respond. Please try again."


@st.cache_resource
def get_event_loop() -> asyncio.AbstractEventLoop:
    """Start the shared background event loop (once per process)."""
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True, name="VanboxEventLoop")
    thread.start()
    logger.info("Background event loop started")
    return loop


def run_async(
    coro: Awaitable[T],
    timeout: Optional[float] = 30,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> T:
    """
    Run a coroutine on the background loop and wait for its result.

    A call still running after ``timeout`` seconds is cancelled and raised as
    OperationTimeoutError, so pages handle it like any other VanboxError.
    """
    future = asyncio.run_coroutine_threadsafe(coro, loop or get_event_loop())
    try:
        return future.result(timeout=timeout)
    except concurrent.futures.TimeoutError as e:
        future.cancel()
        logger.warning(f"Background call cancelled after {timeout}s")
        raise OperationTimeoutError(TIMED_OUT, timeout=timeout) from e


def _read_secrets() -> Mapping[str, Any]:
    try:
        return st.secrets.to_dict()
    except Exception as e:
        # No secrets.toml at all: run in demo mode
        logger.warning(f"Secrets unavailable, using defaults: {e}")
        return {}


def get_app_context() -> AppContext:
    """Return this browser session's context, building it on first use."""
    setup_logging()
    context = st.session_state.get(CONTEXT_KEY)
    if context is None:
        try:
            settings = load_settings(_read_secrets())
            context = run_async(build_app_context(settings))
        except VanboxError as e:
            # Bad settings or a backend that never answered
            logger.error(f"Cannot start Vanbox: {e}")
            st.error(f"Cannot start Vanbox: {e.message}", icon="🚫")
            st.stop()
        st.session_state[CONTEXT_KEY] = context
    return context


def get_auth_session() -> AuthSession:
    """The signed-in identity for this browser session; read it on every use."""
    return get_app_context().auth

