"""Request context management for tracing tool calls through the system.

Every MCP tool call gets a short request ID that is stored in a context
variable, so log lines emitted by the registry, the monitor service and the
Socket.IO client for the same call can be correlated.
"""

import secrets
import inspect
from contextvars import ContextVar
from typing import Optional, Callable, TypeVar
from functools import wraps

# Global context variable for request ID - thread-safe and async-safe
REQUEST_ID_CONTEXT: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

T = TypeVar("T")


def generate_request_id() -> str:
    """Generate a unique 6-digit hex request ID with req_ prefix.

    Returns:
        str: Request ID in format 'req_a1b2c3'

    Examples:
        >>> request_id = generate_request_id()
        >>> request_id.startswith('req_')
        True
        >>> len(request_id) == 9  # 'req_' + 6 hex chars
        True
    """
    return f"req_{secrets.token_hex(3)}"  # 3 bytes = 6 hex chars


def get_request_id() -> Optional[str]:
    """Get the current request ID from context, or None if unset."""
    return REQUEST_ID_CONTEXT.get()


def set_request_id(request_id: str) -> None:
    """Set the request ID in the current context."""
    REQUEST_ID_CONTEXT.set(request_id)


def format_request_id(request_id: Optional[str]) -> str:
    """Format request ID for logging and display.

    Examples:
        >>> format_request_id('req_a1b2c3')
        'req_a1b2c3'
        >>> format_request_id(None)
        'req_unknown'
    """
    return request_id or "req_unknown"


def ensure_request_id() -> str:
    """Ensure a request ID exists, generating one if necessary.

    Returns:
        str: Current or newly generated request ID
    """
    current_id = get_request_id()
    if current_id:
        return current_id

    new_id = generate_request_id()
    set_request_id(new_id)
    return new_id


def with_request_id(request_id: Optional[str] = None):
    """Decorator to run a coroutine function inside a request ID context.

    The explicit ``request_id`` wins, then the one already in context, and a
    fresh one is generated otherwise. The previous context value is restored
    when the coroutine finishes.

    Args:
        request_id: Optional specific request ID to use
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError("with_request_id only decorates coroutine functions")

        @wraps(func)
        async def async_wrapper(*args, **kwargs) -> T:
            current_id = request_id or get_request_id() or generate_request_id()

            token = REQUEST_ID_CONTEXT.set(current_id)
            try:
                return await func(*args, **kwargs)
            finally:
                REQUEST_ID_CONTEXT.reset(token)

        return async_wrapper

    return decorator
