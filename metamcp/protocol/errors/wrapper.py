"""Wrapping, chain inspection, classification and aggregation of errors."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from metamcp.protocol.errors.mcp_error import ErrorCode, MCPError, get_category

_TEMPORARY_CODES = frozenset(
    {
        ErrorCode.TRANSPORT_TIMEOUT,
        ErrorCode.CONNECTION_LOST,
        ErrorCode.HANDSHAKE_TIMEOUT,
        ErrorCode.RATE_LIMIT,
        ErrorCode.RESOURCE_LIMIT,
        ErrorCode.SERVICE_UNAVAILABLE,
    }
)

_RETRYABLE_CODES = frozenset(
    {
        ErrorCode.TRANSPORT_TIMEOUT,
        ErrorCode.CONNECTION_LOST,
        ErrorCode.CONNECTION_FAILED,
        ErrorCode.HANDSHAKE_TIMEOUT,
        ErrorCode.RATE_LIMIT,
        ErrorCode.SERVICE_UNAVAILABLE,
    }
)

_FATAL_CODES = frozenset(
    {
        ErrorCode.VERSION_MISMATCH,
        ErrorCode.CAPABILITY_ERROR,
        ErrorCode.UNAUTHORIZED,
        ErrorCode.FORBIDDEN,
        ErrorCode.TOOL_NOT_FOUND,
        ErrorCode.RESOURCE_NOT_FOUND,
        ErrorCode.PROMPT_NOT_FOUND,
    }
)


def wrap_error(err: Optional[BaseException], code: int, message: str) -> Optional[MCPError]:
    """Wrap ``err`` in an MCPError; returns None when ``err`` is None."""
    if err is None:
        return None
    return MCPError(code, message, cause=err)


def wrap_errorf(
    err: Optional[BaseException], code: int, fmt: str, *args: Any
) -> Optional[MCPError]:
    """Wrap ``err`` with a ``%``-formatted message."""
    return wrap_error(err, code, fmt % args if args else fmt)


def wrap_with_context(
    err: Optional[BaseException],
    code: int,
    message: str,
    context: Optional[Mapping[str, Any]],
) -> Optional[MCPError]:
    wrapped = wrap_error(err, code, message)
    if wrapped is not None and context:
        wrapped.context.update(context)
    return wrapped


def chain_error(
    primary: Optional[BaseException],
    secondary: Optional[BaseException],
    code: int,
    message: str,
) -> Optional[MCPError]:
    """Wrap the primary error, recording the secondary one in the context."""
    if primary is None and secondary is None:
        return None
    wrapped = wrap_error(primary if primary is not None else secondary, code, message)
    if wrapped is not None and primary is not None and secondary is not None:
        wrapped.with_context("secondary_error", str(secondary))
    return wrapped


def unwrap_all(err: Optional[BaseException]) -> list[BaseException]:
    """Return ``err`` followed by each explicit cause in its chain."""
    chain: list[BaseException] = []
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        chain.append(err)
        err = err.__cause__
    return chain


def find_mcp_error(err: Optional[BaseException]) -> Optional[MCPError]:
    """Return the first MCPError in the chain of ``err``."""
    return next((e for e in unwrap_all(err) if isinstance(e, MCPError)), None)


def find_error_code(err: Optional[BaseException], code: int) -> bool:
    """Return True if any MCPError in the chain carries ``code``."""
    return any(isinstance(e, MCPError) and e.code == code for e in unwrap_all(err))


def _code_in(err: Optional[BaseException], codes: frozenset) -> bool:
    found = find_mcp_error(err)
    return found is not None and found.code in codes


def is_temporary(err: Optional[BaseException]) -> bool:
    return _code_in(err, _TEMPORARY_CODES)


def is_retryable(err: Optional[BaseException]) -> bool:
    return _code_in(err, _RETRYABLE_CODES)


def is_fatal(err: Optional[BaseException]) -> bool:
    return _code_in(err, _FATAL_CODES)


class AggregateError(Exception):
    """Several errors reported together; the first one is the cause."""

    def __init__(self, errors: Iterable[BaseException], code: int, message: str = "") -> None:
        self.errors = list(errors)
        self.message = message
        self.code = int(code)
        self.category = get_category(self.code)
        super().__init__(message)
        self.__cause__ = self.errors[0] if self.errors else None

    def __str__(self) -> str:
        if self.message:
            return f"{self.message} ({len(self.errors)} errors)"
        return f"Multiple errors occurred ({len(self.errors)} errors)"

    def to_mcp_error(self) -> Optional[MCPError]:
        """Convert to an MCPError caused by the first error."""
        if not self.errors:
            return None
        wrapped = wrap_error(self.errors[0], self.code, self.message)
        if wrapped is not None:
            if len(self.errors) > 1:
                wrapped.with_context("additional_errors", [str(e) for e in self.errors[1:]])
            wrapped.with_context("error_count", len(self.errors))
        return wrapped


def new_aggregate_error(
    errors: Iterable[Optional[BaseException]], code: int, message: str
) -> Optional[AggregateError]:
    """Aggregate the non-None errors; returns None if there are none."""
    valid = [e for e in errors if e is not None]
    if not valid:
        return None
    return AggregateError(valid, code, message)