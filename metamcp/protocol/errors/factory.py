"""Constructors for the common kinds of protocol errors."""

from __future__ import annotations

from typing import Any, Optional

from metamcp.protocol.errors.mcp_error import ErrorCode, MCPError, get_mcp_error_message


def new_mcp_error(code: int, message: str = "", data: Any = None) -> MCPError:
    """Create an MCPError; an empty message is replaced by the standard one."""
    return MCPError(code, message or get_mcp_error_message(code), data)


def new_mcp_errorf(code: int, fmt: str, *args: Any) -> MCPError:
    """Create an MCPError with a ``%``-formatted message."""
    return new_mcp_error(code, fmt % args if args else fmt)


# Protocol errors


def new_protocol_error(message: str, data: Any = None) -> MCPError:
    return new_mcp_error(ErrorCode.PROTOCOL, message, data)


def new_version_mismatch_error(client_version: str, server_version: str) -> MCPError:
    return (
        new_mcp_error(
            ErrorCode.VERSION_MISMATCH,
            f"Protocol version mismatch: client={client_version}, server={server_version}",
        )
        .with_context("client_version", client_version)
        .with_context("server_version", server_version)
    )


def new_capability_error(capability: str, message: str) -> MCPError:
    return new_mcp_error(ErrorCode.CAPABILITY_ERROR, message).with_context(
        "capability", capability
    )


def new_initialize_error(message: str, data: Any = None) -> MCPError:
    return new_mcp_error(ErrorCode.INITIALIZE_ERROR, message, data)


def new_handshake_timeout_error(timeout: str) -> MCPError:
    return new_mcp_error(ErrorCode.HANDSHAKE_TIMEOUT, "Handshake timeout").with_context(
        "timeout", timeout
    )


def new_invalid_state_error(current_state: str, expected_state: str) -> MCPError:
    return (
        new_mcp_error(
            ErrorCode.INVALID_STATE,
            f"Invalid protocol state: current={current_state}, expected={expected_state}",
        )
        .with_context("current_state", current_state)
        .with_context("expected_state", expected_state)
    )


# Transport errors


def new_transport_error(message: str, data: Any = None) -> MCPError:
    return new_mcp_error(ErrorCode.TRANSPORT, message, data)


def new_connection_lost_error(reason: str = "") -> MCPError:
    err = new_mcp_error(ErrorCode.CONNECTION_LOST, "Connection lost")
    if reason:
        err.with_context("reason", reason)
    return err


def new_connection_failed_error(
    address: str, reason: Optional[BaseException] = None
) -> MCPError:
    err = new_mcp_error(ErrorCode.CONNECTION_FAILED, "Connection failed")
    err.with_context("address", address)
    if reason is not None:
        err.cause = reason
        err.with_context("reason", str(reason))
    return err


def new_transport_timeout_error(operation: str, timeout: str) -> MCPError:
    return (
        new_mcp_error(ErrorCode.TRANSPORT_TIMEOUT, f"Transport timeout during {operation}")
        .with_context("operation", operation)
        .with_context("timeout", timeout)
    )


def new_message_too_large_error(size: int, max_size: int) -> MCPError:
    return (
        new_mcp_error(
            ErrorCode.MESSAGE_TOO_LARGE, f"Message size {size} exceeds maximum {max_size}"
        )
        .with_context("message_size", size)
        .with_context("max_size", max_size)
    )


def new_encoding_error(fmt: str, cause: Optional[BaseException] = None) -> MCPError:
    err = new_mcp_error(ErrorCode.ENCODING_ERROR, f"Message encoding error: {fmt}")
    err.with_context("format", fmt)
    if cause is not None:
        err.cause = cause
    return err


# Handler errors


def new_handler_error(message: str, data: Any = None) -> MCPError:
    return new_mcp_error(ErrorCode.HANDLER, message, data)


def new_tool_not_found_error(tool_name: str) -> MCPError:
    return new_mcp_error(
        ErrorCode.TOOL_NOT_FOUND, f"Tool not found: {tool_name}"
    ).with_context("tool_name", tool_name)


def new_tool_error(tool_name: str, cause: Optional[BaseException] = None) -> MCPError:
    err = new_mcp_error(ErrorCode.TOOL_ERROR, f"Tool execution error: {tool_name}")
    err.with_context("tool_name", tool_name)
    if cause is not None:
        err.cause = cause
    return err


def new_resource_not_found_error(resource_uri: str) -> MCPError:
    return new_mcp_error(
        ErrorCode.RESOURCE_NOT_FOUND, f"Resource not found: {resource_uri}"
    ).with_context("resource_uri", resource_uri)


def new_resource_error(resource_uri: str, cause: Optional[BaseException] = None) -> MCPError:
    err = new_mcp_error(ErrorCode.RESOURCE_ERROR, f"Resource access error: {resource_uri}")
    err.with_context("resource_uri", resource_uri)
    if cause is not None:
        err.cause = cause
    return err


def new_prompt_not_found_error(prompt_name: str) -> MCPError:
    return new_mcp_error(
        ErrorCode.PROMPT_NOT_FOUND, f"Prompt not found: {prompt_name}"
    ).with_context("prompt_name", prompt_name)


def new_prompt_error(prompt_name: str, cause: Optional[BaseException] = None) -> MCPError:
    err = new_mcp_error(ErrorCode.PROMPT_ERROR, f"Prompt execution error: {prompt_name}")
    err.with_context("prompt_name", prompt_name)
    if cause is not None:
        err.cause = cause
    return err


# Security errors


def new_security_error(message: str, data: Any = None) -> MCPError:
    return new_mcp_error(ErrorCode.SECURITY, message, data)


def new_unauthorized_error(resource: str = "") -> MCPError:
    err = new_mcp_error(ErrorCode.UNAUTHORIZED, "Unauthorized access")
    if resource:
        err.with_context("resource", resource)
    return err


def new_forbidden_error(operation: str = "") -> MCPError:
    err = new_mcp_error(ErrorCode.FORBIDDEN, "Forbidden operation")
    if operation:
        err.with_context("operation", operation)
    return err


def new_rate_limit_error(limit: int, window: str) -> MCPError:
    return (
        new_mcp_error(ErrorCode.RATE_LIMIT, "Rate limit exceeded")
        .with_context("limit", limit)
        .with_context("window", window)
    )


def new_quota_exceeded_error(quota_type: str, used: int, limit: int) -> MCPError:
    return (
        new_mcp_error(
            ErrorCode.QUOTA_EXCEEDED, f"Quota exceeded for {quota_type}: {used}/{limit}"
        )
        .with_context("quota_type", quota_type)
        .with_context("used", used)
        .with_context("limit", limit)
    )


# System errors


def new_system_error(message: str, data: Any = None) -> MCPError:
    return new_mcp_error(ErrorCode.SYSTEM, message, data)


def new_resource_limit_error(resource: str, used: int, limit: int) -> MCPError:
    return (
        new_mcp_error(
            ErrorCode.RESOURCE_LIMIT,
            f"Resource limit exceeded for {resource}: {used}/{limit}",
        )
        .with_context("resource", resource)
        .with_context("used", used)
        .with_context("limit", limit)
    )


def new_memory_limit_error(used: int, limit: int) -> MCPError:
    return (
        new_mcp_error(
            ErrorCode.MEMORY_LIMIT, f"Memory limit exceeded: {used}/{limit} bytes"
        )
        .with_context("used_bytes", used)
        .with_context("limit_bytes", limit)
    )


def new_disk_space_error(path: str, used: int, available: int) -> MCPError:
    return (
        new_mcp_error(
            ErrorCode.DISK_SPACE,
            f"Disk space exceeded on {path}: {used} bytes used, {available} available",
        )
        .with_context("path", path)
        .with_context("used_bytes", used)
        .with_context("available_bytes", available)
    )


def new_service_unavailable_error(service: str, reason: str = "") -> MCPError:
    err = new_mcp_error(ErrorCode.SERVICE_UNAVAILABLE, f"Service unavailable: {service}")
    err.with_context("service", service)
    if reason:
        err.with_context("reason", reason)
    return err