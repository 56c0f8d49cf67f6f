from .session_hooks import (
    PolicySession,
    bind_context,
    bound_context,
    clear_context,
    is_privileged,
    mark_privileged,
)

__all__ = [
    "PolicySession",
    "bind_context",
    "bound_context",
    "clear_context",
    "is_privileged",
    "mark_privileged",
]
