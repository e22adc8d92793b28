"""Carrying logging identifiers in immutable request contexts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

Context = Mapping[Any, Any]


class ContextKey(Enum):
    """Keys under which logging values are stored in a context."""

    CORRELATION_ID = "correlation_id"
    REQUEST_ID = "request_id"
    USER_ID = "user_id"
    SESSION_ID = "session_id"
    COMPONENT = "component"
    METHOD = "method"


class _RouterContextKey:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<router context key>"


_ROUTER_CONTEXT_KEY = _RouterContextKey()


@dataclass
class RouterContext:
    """Minimal view of a router's per-request context."""

    correlation_id: str = ""
    method: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


def _derive(ctx: Optional[Context], key: Any, value: Any) -> Context:
    values = dict(ctx) if ctx else {}
    values[key] = value
    return MappingProxyType(values)


def _string_value(ctx: Optional[Context], key: ContextKey) -> Optional[str]:
    if ctx is None:
        return None
    value = ctx.get(key)
    return value if isinstance(value, str) else None


def with_correlation_id(ctx: Optional[Context], correlation_id: str) -> Context:
    return _derive(ctx, ContextKey.CORRELATION_ID, correlation_id)


def with_request_id(ctx: Optional[Context], request_id: str) -> Context:
    return _derive(ctx, ContextKey.REQUEST_ID, request_id)


def with_user_id(ctx: Optional[Context], user_id: str) -> Context:
    return _derive(ctx, ContextKey.USER_ID, user_id)


def with_session_id(ctx: Optional[Context], session_id: str) -> Context:
    return _derive(ctx, ContextKey.SESSION_ID, session_id)


def with_component(ctx: Optional[Context], component: str) -> Context:
    return _derive(ctx, ContextKey.COMPONENT, component)


def with_method(ctx: Optional[Context], method: str) -> Context:
    return _derive(ctx, ContextKey.METHOD, method)


def with_router_context(ctx: Optional[Context], router_context: RouterContext) -> Context:
    return _derive(ctx, _ROUTER_CONTEXT_KEY, router_context)


def extract_router_context(ctx: Optional[Context]) -> Optional[RouterContext]:
    """Return the router context stored in ``ctx``, if any."""
    if ctx is None:
        return None
    value = ctx.get(_ROUTER_CONTEXT_KEY)
    return value if isinstance(value, RouterContext) else None


def extract_correlation_id(ctx: Optional[Context]) -> str:
    """Return the correlation ID, falling back to the router context."""
    if ctx is None:
        return ""
    correlation_id = _string_value(ctx, ContextKey.CORRELATION_ID)
    if correlation_id is not None:
        return correlation_id
    router = extract_router_context(ctx)
    if router is not None and router.correlation_id:
        return router.correlation_id
    return ""


def extract_request_id(ctx: Optional[Context]) -> str:
    return _string_value(ctx, ContextKey.REQUEST_ID) or ""


def extract_all_context_fields(ctx: Optional[Context]) -> Optional[dict[str, Any]]:
    """Collect every logging-relevant value from ``ctx`` into a field dict."""
    if ctx is None:
        return None

    result: dict[str, Any] = {}

    correlation_id = extract_correlation_id(ctx)
    if correlation_id:
        result["correlation_id"] = correlation_id

    request_id = extract_request_id(ctx)
    if request_id:
        result["request_id"] = request_id

    for key in (
        ContextKey.USER_ID,
        ContextKey.SESSION_ID,
        ContextKey.COMPONENT,
        ContextKey.METHOD,
    ):
        value = _string_value(ctx, key)
        if value:
            result[key.value] = value

    router = extract_router_context(ctx)
    if router is not None:
        if router.method and "method" not in result:
            result["method"] = router.method
        if router.correlation_id and "correlation_id" not in result:
            result["correlation_id"] = router.correlation_id
        for key, value in router.metadata.items():
            result.setdefault(key, value)

    return result