"""Protocol-specific error codes and the MCPError exception type.

Codes live in the reserved JSON-RPC range -32000..-32099 and are grouped
into categories: protocol, transport, handler, security and system.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Optional


class ErrorCode(IntEnum):
    """Protocol error codes in the reserved JSON-RPC server range."""

    # Protocol-level errors (-32000 to -32019)
    PROTOCOL = -32000
    VERSION_MISMATCH = -32001
    CAPABILITY_ERROR = -32002
    INITIALIZE_ERROR = -32003
    HANDSHAKE_TIMEOUT = -32004
    INVALID_STATE = -32005

    # Transport-level errors (-32020 to -32039)
    TRANSPORT = -32020
    CONNECTION_LOST = -32021
    CONNECTION_FAILED = -32022
    TRANSPORT_TIMEOUT = -32023
    MESSAGE_TOO_LARGE = -32024
    ENCODING_ERROR = -32025

    # Handler-level errors (-32040 to -32059)
    HANDLER = -32040
    TOOL_NOT_FOUND = -32041
    TOOL_ERROR = -32042
    RESOURCE_NOT_FOUND = -32043
    RESOURCE_ERROR = -32044
    PROMPT_NOT_FOUND = -32045
    PROMPT_ERROR = -32046

    # Security and authorization errors (-32060 to -32079)
    SECURITY = -32060
    UNAUTHORIZED = -32061
    FORBIDDEN = -32062
    RATE_LIMIT = -32063
    QUOTA_EXCEEDED = -32064

    # System and resource errors (-32080 to -32099)
    SYSTEM = -32080
    RESOURCE_LIMIT = -32081
    MEMORY_LIMIT = -32082
    DISK_SPACE = -32083
    SERVICE_UNAVAILABLE = -32084


_ERROR_MESSAGES = {
    ErrorCode.PROTOCOL: "MCP protocol error",
    ErrorCode.VERSION_MISMATCH: "Protocol version mismatch",
    ErrorCode.CAPABILITY_ERROR: "Capability negotiation error",
    ErrorCode.INITIALIZE_ERROR: "Initialization sequence error",
    ErrorCode.HANDSHAKE_TIMEOUT: "Handshake timeout",
    ErrorCode.INVALID_STATE: "Invalid protocol state",
    ErrorCode.TRANSPORT: "Transport error",
    ErrorCode.CONNECTION_LOST: "Connection lost",
    ErrorCode.CONNECTION_FAILED: "Connection failed",
    ErrorCode.TRANSPORT_TIMEOUT: "Transport timeout",
    ErrorCode.MESSAGE_TOO_LARGE: "Message size exceeded",
    ErrorCode.ENCODING_ERROR: "Message encoding error",
    ErrorCode.HANDLER: "Handler error",
    ErrorCode.TOOL_NOT_FOUND: "Tool not found",
    ErrorCode.TOOL_ERROR: "Tool execution error",
    ErrorCode.RESOURCE_NOT_FOUND: "Resource not found",
    ErrorCode.RESOURCE_ERROR: "Resource access error",
    ErrorCode.PROMPT_NOT_FOUND: "Prompt not found",
    ErrorCode.PROMPT_ERROR: "Prompt execution error",
    ErrorCode.SECURITY: "Security error",
    ErrorCode.UNAUTHORIZED: "Unauthorized access",
    ErrorCode.FORBIDDEN: "Forbidden operation",
    ErrorCode.RATE_LIMIT: "Rate limit exceeded",
    ErrorCode.QUOTA_EXCEEDED: "Quota exceeded",
    ErrorCode.SYSTEM: "System error",
    ErrorCode.RESOURCE_LIMIT: "Resource limit exceeded",
    ErrorCode.MEMORY_LIMIT: "Memory limit exceeded",
    ErrorCode.DISK_SPACE: "Disk space exceeded",
    ErrorCode.SERVICE_UNAVAILABLE: "Service unavailable",
}

_SENSITIVE_KEYS = (
    "password", "token", "secret", "auth", "credential",
    "session", "cookie", "bearer", "api_key", "private",
    "access_key", "secret_key", "private_key", "public_key",
)

_CATEGORY_RANGES = (
    (-32019, -32000, "protocol"),
    (-32039, -32020, "transport"),
    (-32059, -32040, "handler"),
    (-32079, -32060, "security"),
    (-32099, -32080, "system"),
)


def get_category(code: int) -> str:
    """Return the category name for an error code."""
    for low, high, name in _CATEGORY_RANGES:
        if low <= code <= high:
            return name
    return "unknown"


def is_mcp_error(code: int) -> bool:
    """Return True if ``code`` lies in the protocol error range."""
    return -32099 <= code <= -32000


def get_mcp_error_message(code: int) -> str:
    """Return the standard message for a code."""
    return _ERROR_MESSAGES.get(code, "Unknown MCP error")


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(word in lowered for word in _SENSITIVE_KEYS)


class MCPError(Exception):
    """A protocol error carrying a code, category, context and optional cause."""

    def __init__(
        self,
        code: int,
        message: str = "",
        data: Any = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.code = int(code)
        self.message = message
        self.data = data
        self.category = get_category(self.code)
        self.context: dict[str, Any] = {}
        self.debug_info: dict[str, Any] = {}
        self.sanitized = False
        self.cause = cause

    @property
    def cause(self) -> Optional[BaseException]:
        return self.__cause__

    @cause.setter
    def cause(self, value: Optional[BaseException]) -> None:
        self.__cause__ = value

    def __str__(self) -> str:
        text = f"MCP {self.category} error ({self.code}): {self.message}"
        if self.cause is not None:
            text += f" - caused by: {self.cause}"
        return text

    def __repr__(self) -> str:
        return f"MCPError(code={self.code}, message={self.message!r})"

    def matches(self, other: object) -> bool:
        """Return True if ``other`` is an MCPError with the same code."""
        return isinstance(other, MCPError) and other.code == self.code

    def with_context(self, key: str, value: Any) -> "MCPError":
        self.context[key] = value
        return self

    def with_debug_info(self, key: str, value: Any) -> "MCPError":
        self.debug_info[key] = value
        return self

    def with_cause(self, cause: Optional[BaseException]) -> "MCPError":
        self.cause = cause
        return self

    def to_jsonrpc_error(self) -> dict[str, Any]:
        """Return the JSON-RPC error object for this error."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error

    def to_response(self, request_id: Any) -> dict[str, Any]:
        """Return a complete JSON-RPC error response for ``request_id``."""
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "error": {"code": self.code, "message": self.message, "data": self.data},
        }

    def sanitize(self) -> "MCPError":
        """Return a copy without data, cause, debug info or sensitive context."""
        if self.sanitized:
            return self
        clean = MCPError(self.code, self.message)
        clean.category = self.category
        clean.context = {k: v for k, v in self.context.items() if not _is_sensitive(k)}
        clean.sanitized = True
        return clean

    def clone(self) -> "MCPError":
        """Return a copy whose context and debug info are independent."""
        copy = MCPError(self.code, self.message, self.data, self.cause)
        copy.category = self.category
        copy.sanitized = self.sanitized
        copy.context = dict(self.context)
        copy.debug_info = dict(self.debug_info)
        return copy

    def has_context(self, key: str) -> bool:
        return key in self.context

    def get_context(self, key: str, default: Any = None) -> Any:
        return self.context.get(key, default)

    def get_context_string(self, key: str) -> Optional[str]:
        """Return the context value for ``key`` if it is a string."""
        value = self.context.get(key)
        return value if isinstance(value, str) else None

    def remove_context(self, key: str) -> "MCPError":
        self.context.pop(key, None)
        return self

    def clear_context(self) -> "MCPError":
        self.context = {}
        return self

    def clear_debug_info(self) -> "MCPError":
        self.debug_info = {}
        return self