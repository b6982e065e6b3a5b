from .session import SESSION_DEFAULTS, clear_user_state, init_state

__all__ = ["SESSION_DEFAULTS", "clear_user_state", "init_state"]
