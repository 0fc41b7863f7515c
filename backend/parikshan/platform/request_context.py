"""Per-request values attached to every log line."""

from contextvars import ContextVar
from typing import Dict, Optional

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
# Supabase auth user id (token ``sub``) once the caller is authenticated
_auth_user_ctx: ContextVar[Optional[str]] = ContextVar("auth_user_id", default=None)


def set_request_id(request_id: str):
    return _request_id_ctx.set(request_id)


def get_request_id() -> Optional[str]:
    return _request_id_ctx.get()


def set_auth_user_id(user_id: Optional[str]):
    return _auth_user_ctx.set(user_id)


def get_auth_user_id() -> Optional[str]:
    return _auth_user_ctx.get()


def log_context() -> Dict[str, str]:
    context = {}
    request_id = get_request_id()
    if request_id:
        context["request_id"] = request_id
    user_id = get_auth_user_id()
    if user_id:
        context["user_id"] = user_id
    return context
