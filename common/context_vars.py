# common/context_vars.py
from contextvars import ContextVar
from typing import Optional

# Unique to each async task (each request)
request_id_context_var: ContextVar[Optional[str]] = ContextVar(
    "request_id",
    default=None,
)

__all__ = ["request_id_context_var"]
