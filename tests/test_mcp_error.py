import pytest

from metamcp.protocol.errors.mcp_error import (
    ErrorCode,
    MCPError,
    get_category,
    get_mcp_error_message,
    is_mcp_error,
)


@pytest.mark.parametrize(
    "code, message, category",
    [
        (ErrorCode.PROTOCOL, "test protocol error", "protocol"),
        (ErrorCode.TRANSPORT, "test transport error", "transport"),
        (ErrorCode.HANDLER, "test handler error", "handler"),
    ],
)
def test_creation(code, message, category):
    err = MCPError(code, message)
    assert err.code == code
    assert err.message == message
    assert err.category == category


def test_error_string_with_cause():
    err = MCPError(ErrorCode.PROTOCOL, "test error")
    err.cause = ValueError("underlying error")
    assert str(err) == "MCP protocol error (-32000): test error - caused by: underlying error"


def test_error_string_without_cause():
    err = MCPError(ErrorCode.TRANSPORT, "boom")
    assert str(err) == "MCP transport error (-32020): boom"


def test_unwrap_via_cause():
    cause = ValueError("underlying error")
    err = MCPError(ErrorCode.PROTOCOL, "test error")
    err.cause = cause
    assert err.cause is cause
    assert err.__cause__ is cause


def test_matches_by_code():
    err1 = MCPError(ErrorCode.PROTOCOL, "test error")
    err2 = MCPError(ErrorCode.PROTOCOL, "different message")
    err3 = MCPError(ErrorCode.TRANSPORT, "test error")
    assert err1.matches(err2)
    assert not err1.matches(err3)
    assert not err1.matches(ValueError("x"))


def test_catchable_as_exception():
    err = MCPError(ErrorCode.PROTOCOL, "test error")
    with pytest.raises(MCPError) as info:
        raise err
    assert info.value is err
    assert err.code == ErrorCode.PROTOCOL
    assert str(err) == "MCP protocol error (-32000): test error"


def test_context():
    err = MCPError(ErrorCode.PROTOCOL, "test error")
    err.with_context("key1", "value1").with_context("key2", 42)
    assert err.get_context("key1") == "value1"
    assert err.get_context("key2") == 42
    assert err.get_context_string("key1") == "value1"
    assert err.get_context_string("key2") is None
    assert err.get_context("nonexistent", "missing") == "missing"
    assert not err.has_context("nonexistent")


def test_debug_info():
    err = MCPError(ErrorCode.PROTOCOL, "test error")
    err.with_debug_info("debug_key", "debug_value")
    assert err.debug_info["debug_key"] == "debug_value"


def test_sanitize():
    err = MCPError(ErrorCode.PROTOCOL, "test error", data="payload")
    err.with_context("safe_key", "safe_value")
    err.with_context("password", "password")
    err.with_context("api_key", "placeholder")
    err.with_debug_info("debug_info", "sensitive_debug")
    err.cause = ValueError("underlying cause")

    sanitized = err.sanitize()

    assert sanitized.get_context("safe_key") == "safe_value"
    assert not sanitized.has_context("password")
    assert not sanitized.has_context("api_key")
    assert len(sanitized.debug_info) == 0
    assert sanitized.cause is None
    assert sanitized.data is None
    assert sanitized.sanitized is True
    assert sanitized.sanitize() is sanitized
    assert err.has_context("password")


def test_clone():
    err = MCPError(ErrorCode.PROTOCOL, "test error")
    err.with_context("key", "value")
    err.with_debug_info("debug", "info")
    err.cause = ValueError("cause")

    clone = err.clone()

    assert clone.code == err.code
    assert clone.message == err.message
    assert clone.category == err.category
    assert clone.cause is err.cause
    assert clone.get_context("key") == "value"
    assert clone.debug_info == {"debug": "info"}

    clone.with_context("new_key", "new_value")
    assert not err.has_context("new_key")


def test_to_response():
    err = MCPError(ErrorCode.PROTOCOL, "test error", data="test data")
    response = err.to_response("test-id")
    assert response["error"]["code"] == err.code
    assert response["error"]["message"] == err.message
    assert response["error"]["data"] == "test data"
    assert response["id"] == "test-id"
    assert response["jsonrpc"] == "2.0"


@pytest.mark.parametrize(
    "code, expected",
    [
        (ErrorCode.PROTOCOL, "protocol"),
        (ErrorCode.TRANSPORT, "transport"),
        (ErrorCode.HANDLER, "handler"),
        (ErrorCode.SECURITY, "security"),
        (ErrorCode.SYSTEM, "system"),
        (-99999, "unknown"),
    ],
)
def test_get_category(code, expected):
    assert get_category(code) == expected


@pytest.mark.parametrize(
    "code, expected",
    [
        (ErrorCode.PROTOCOL, True),
        (ErrorCode.SYSTEM, True),
        (-32100, False),
        (-31999, False),
        (-32700, False),
    ],
)
def test_is_mcp_error(code, expected):
    assert is_mcp_error(code) is expected


def test_get_mcp_error_message():
    assert get_mcp_error_message(ErrorCode.PROTOCOL) == "MCP protocol error"
    assert get_mcp_error_message(-99999) == "Unknown MCP error"


def test_to_jsonrpc_error():
    err = MCPError(ErrorCode.PROTOCOL, "invalid request")
    err.with_context("method", "test_method").with_context("id", "123")
    result = err.to_jsonrpc_error()
    assert result["code"] == ErrorCode.PROTOCOL
    assert result["message"] == "invalid request"
    assert "data" not in result


def test_with_cause_returns_same_instance():
    original = MCPError(ErrorCode.PROTOCOL, "original error")
    cause = MCPError(ErrorCode.TRANSPORT, "cause error")
    result = original.with_cause(cause)
    assert result is original
    assert result.cause is cause


def test_has_context():
    err = MCPError(ErrorCode.PROTOCOL, "test error")
    assert not err.has_context("key")
    err.with_context("key", "value")
    assert err.has_context("key")


def test_remove_context():
    err = MCPError(ErrorCode.PROTOCOL, "test error")
    err.with_context("key1", "value1").with_context("key2", "value2")
    err.remove_context("key1")
    assert not err.has_context("key1")
    assert err.has_context("key2")


def test_clear_context():
    err = MCPError(ErrorCode.PROTOCOL, "test error")
    err.with_context("key1", "value1").with_context("key2", "value2")
    err.clear_context()
    assert not err.has_context("key1")
    assert not err.has_context("key2")


def test_clear_debug_info():
    err = MCPError(ErrorCode.PROTOCOL, "test error")
    err.with_debug_info("stack", "trace info").with_debug_info("line", 123)
    err.clear_debug_info()
    assert err.debug_info == {}