import pytest

from metamcp.protocol.errors.factory import (
    new_capability_error,
    new_connection_failed_error,
    new_connection_lost_error,
    new_disk_space_error,
    new_encoding_error,
    new_forbidden_error,
    new_handler_error,
    new_handshake_timeout_error,
    new_initialize_error,
    new_invalid_state_error,
    new_mcp_error,
    new_mcp_errorf,
    new_memory_limit_error,
    new_message_too_large_error,
    new_prompt_error,
    new_prompt_not_found_error,
    new_protocol_error,
    new_quota_exceeded_error,
    new_rate_limit_error,
    new_resource_error,
    new_resource_limit_error,
    new_resource_not_found_error,
    new_security_error,
    new_service_unavailable_error,
    new_system_error,
    new_tool_error,
    new_tool_not_found_error,
    new_transport_error,
    new_transport_timeout_error,
    new_unauthorized_error,
    new_version_mismatch_error,
)
from metamcp.protocol.errors.mcp_error import ErrorCode, MCPError


@pytest.mark.parametrize(
    "err, code, fragments",
    [
        (new_protocol_error("invalid request format"), ErrorCode.PROTOCOL, ["invalid request format"]),
        (new_version_mismatch_error("2025-03-26", "2024-01-01"), ErrorCode.VERSION_MISMATCH, ["2025-03-26", "2024-01-01"]),
        (new_capability_error("tools", "Tool capability not supported"), ErrorCode.CAPABILITY_ERROR, ["Tool capability not supported"]),
        (new_initialize_error("missing client info"), ErrorCode.INITIALIZE_ERROR, ["missing client info"]),
        (new_handshake_timeout_error("30s"), ErrorCode.HANDSHAKE_TIMEOUT, ["Handshake", "timeout"]),
        (new_invalid_state_error("not_initialized", "ready"), ErrorCode.INVALID_STATE, ["not_initialized", "ready"]),
        (new_transport_error("connection failed"), ErrorCode.TRANSPORT, ["connection failed"]),
        (new_connection_lost_error("network timeout"), ErrorCode.CONNECTION_LOST, ["Connection lost"]),
        (new_connection_failed_error("tcp://localhost:8080"), ErrorCode.CONNECTION_FAILED, ["Connection failed"]),
        (new_transport_timeout_error("read", "5s"), ErrorCode.TRANSPORT_TIMEOUT, ["timeout"]),
        (new_message_too_large_error(1024, 512), ErrorCode.MESSAGE_TOO_LARGE, ["1024", "512"]),
        (new_encoding_error("json"), ErrorCode.ENCODING_ERROR, ["json"]),
        (new_handler_error("handler execution failed"), ErrorCode.HANDLER, ["handler execution failed"]),
        (new_tool_not_found_error("test_tool"), ErrorCode.TOOL_NOT_FOUND, ["test_tool"]),
        (new_tool_error("test_tool"), ErrorCode.TOOL_ERROR, ["test_tool"]),
        (new_resource_not_found_error("test_resource"), ErrorCode.RESOURCE_NOT_FOUND, ["test_resource"]),
        (new_resource_error("test_resource"), ErrorCode.RESOURCE_ERROR, ["test_resource"]),
        (new_prompt_not_found_error("test_prompt"), ErrorCode.PROMPT_NOT_FOUND, ["test_prompt"]),
        (new_prompt_error("test_prompt"), ErrorCode.PROMPT_ERROR, ["test_prompt"]),
        (new_security_error("access denied"), ErrorCode.SECURITY, ["access denied"]),
        (new_unauthorized_error("protected_resource"), ErrorCode.UNAUTHORIZED, ["Unauthorized"]),
        (new_forbidden_error("delete_operation"), ErrorCode.FORBIDDEN, ["Forbidden"]),
        (new_rate_limit_error(100, "1m"), ErrorCode.RATE_LIMIT, ["Rate limit"]),
        (new_quota_exceeded_error("API calls", 1000, 500), ErrorCode.QUOTA_EXCEEDED, ["API calls", "1000", "500"]),
        (new_system_error("system overload"), ErrorCode.SYSTEM, ["system overload"]),
        (new_resource_limit_error("memory", 1024, 512), ErrorCode.RESOURCE_LIMIT, ["memory", "1024", "512"]),
        (new_memory_limit_error(1024, 512), ErrorCode.MEMORY_LIMIT, ["1024", "512"]),
        (new_disk_space_error("/tmp", 1024, 512), ErrorCode.DISK_SPACE, ["/tmp", "1024", "512"]),
        (new_service_unavailable_error("database", "maintenance mode"), ErrorCode.SERVICE_UNAVAILABLE, ["Service unavailable"]),
    ],
)
def test_factories_set_code_and_message(err, code, fragments):
    assert err.code == code
    text = str(err)
    for fragment in fragments:
        assert fragment in text


def test_new_mcp_errorf_formats_message():
    err = new_mcp_errorf(ErrorCode.PROTOCOL, "test error with %s", "formatting")
    assert "test error with formatting" in str(err)
    assert err.code == ErrorCode.PROTOCOL


@pytest.mark.parametrize(
    "factory, code",
    [
        (new_protocol_error, ErrorCode.PROTOCOL),
        (new_transport_error, ErrorCode.TRANSPORT),
        (new_handler_error, ErrorCode.HANDLER),
        (new_security_error, ErrorCode.SECURITY),
        (new_system_error, ErrorCode.SYSTEM),
    ],
)
def test_generic_factories_return_mcp_errors(factory, code):
    err = factory("test")
    assert isinstance(err, MCPError)
    assert isinstance(err, Exception)
    assert err.code == code


def test_empty_message_uses_standard_message():
    err = new_mcp_error(ErrorCode.TOOL_NOT_FOUND, "")
    assert err.message == "Tool not found"
    assert err.category == "handler"


def test_data_is_kept():
    err = new_protocol_error("bad", {"field": "x"})
    assert err.data == {"field": "x"}


def test_connection_failed_records_reason_and_cause():
    reason = OSError("refused")
    err = new_connection_failed_error("localhost:8080", reason)
    assert err.cause is reason
    assert err.get_context("reason") == "refused"
    assert err.get_context("address") == "localhost:8080"


def test_connection_lost_without_reason_has_no_reason_context():
    assert not new_connection_lost_error("").has_context("reason")
    assert new_connection_lost_error("gone").get_context("reason") == "gone"


def test_tool_error_cause():
    cause = ValueError("boom")
    err = new_tool_error("calc", cause)
    assert err.cause is cause
    assert "caused by: boom" in str(err)


def test_quota_context_values():
    err = new_quota_exceeded_error("API calls", 1000, 500)
    assert err.context == {"quota_type": "API calls", "used": 1000, "limit": 500}


def test_message_too_large_exact_message():
    err = new_message_too_large_error(1024, 512)
    assert err.message == "Message size 1024 exceeds maximum 512"
    assert err.get_context("message_size") == 1024
    assert err.get_context("max_size") == 512


def test_unauthorized_without_resource():
    err = new_unauthorized_error("")
    assert err.context == {}
    assert err.message == "Unauthorized access"