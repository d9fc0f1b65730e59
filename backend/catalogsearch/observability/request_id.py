"""Request ID management for request correlation.

The id lives in a ContextVar so log lines emitted from the chat stream
generator and from threadpool-run endpoints carry the id of their request.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID (UUID v4)."""
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Get current request ID, or "no-request-id" outside a request."""
    return request_id_var.get() or "no-request-id"


def set_request_id(request_id: str) -> None:
    """Set request ID in current context."""
    request_id_var.set(request_id)
