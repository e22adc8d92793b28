"""Standard log field names and a fluent builder for structured log fields."""

from __future__ import annotations

from typing import Any

# Request/response fields
FIELD_CORRELATION_ID = "correlation_id"
FIELD_REQUEST_ID = "request_id"
FIELD_METHOD = "method"
FIELD_PATH = "path"
FIELD_STATUS_CODE = "status_code"
FIELD_DURATION = "duration_ms"
FIELD_RESPONSE_TIME = "response_time"

# Error fields
FIELD_ERROR = "error"
FIELD_ERROR_CODE = "error_code"
FIELD_ERROR_TYPE = "error_type"
FIELD_ERROR_MESSAGE = "error_message"
FIELD_STACK_TRACE = "stack_trace"
FIELD_CAUSE = "cause"

# Context fields
FIELD_USER_ID = "user_id"
FIELD_SESSION_ID = "session_id"
FIELD_CLIENT_ID = "client_id"
FIELD_COMPONENT = "component"
FIELD_SERVICE = "service"
FIELD_VERSION = "version"
FIELD_ENVIRONMENT = "environment"

# Protocol-specific fields
FIELD_PROTOCOL_VERSION = "protocol_version"
FIELD_SERVER_NAME = "server_name"
FIELD_CLIENT_NAME = "client_name"
FIELD_CAPABILITIES = "capabilities"
FIELD_HANDSHAKE_STATE = "handshake_state"
FIELD_CONNECTION_ID = "connection_id"
FIELD_CONNECTION_STATE = "connection_state"

# Performance fields
FIELD_MEMORY_USAGE = "memory_usage_bytes"
FIELD_CPU_USAGE = "cpu_usage_percent"
FIELD_GOROUTINES = "goroutines"
FIELD_QUEUE_SIZE = "queue_size"
FIELD_WORKER_COUNT = "worker_count"

# Metadata fields
FIELD_TIMESTAMP = "timestamp"
FIELD_HOSTNAME = "hostname"
FIELD_PID = "pid"
FIELD_CALLER = "caller"
FIELD_FUNCTION = "function"
FIELD_FILE = "file"
FIELD_LINE = "line"


def _type_name(obj: object) -> str:
    cls = type(obj)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def _cause_of(err: BaseException) -> Any:
    cause = getattr(err, "cause", None)
    if callable(cause):
        cause = cause()
    if cause is None:
        cause = err.__cause__
    return cause


class LogFields(dict):
    """A dictionary of log fields with chainable builder methods."""

    def with_field(self, key: str, value: Any) -> "LogFields":
        self[key] = value
        return self

    def with_error(self, err: BaseException | None) -> "LogFields":
        if err is None:
            return self
        self[FIELD_ERROR] = str(err)
        self[FIELD_ERROR_TYPE] = _type_name(err)
        cause = _cause_of(err)
        if cause is not None:
            self[FIELD_CAUSE] = str(cause)
        return self

    def with_request(self, method: str, path: str, correlation_id: str) -> "LogFields":
        if method:
            self[FIELD_METHOD] = method
        if path:
            self[FIELD_PATH] = path
        if correlation_id:
            self[FIELD_CORRELATION_ID] = correlation_id
        return self

    def with_response(self, status_code: int, duration: int) -> "LogFields":
        if status_code > 0:
            self[FIELD_STATUS_CODE] = status_code
        if duration > 0:
            self[FIELD_DURATION] = duration
        return self

    def with_user(self, user_id: str, session_id: str) -> "LogFields":
        if user_id:
            self[FIELD_USER_ID] = user_id
        if session_id:
            self[FIELD_SESSION_ID] = session_id
        return self

    def with_component(self, component: str) -> "LogFields":
        if component:
            self[FIELD_COMPONENT] = component
        return self

    def with_connection(self, connection_id: str, state: str) -> "LogFields":
        if connection_id:
            self[FIELD_CONNECTION_ID] = connection_id
        if state:
            self[FIELD_CONNECTION_STATE] = state
        return self

    def to_map(self) -> dict[str, Any]:
        """Return the fields as a plain dictionary."""
        return dict(self)


class StandardFields:
    """Builders for commonly used field combinations."""

    def request(self, method: str, correlation_id: str) -> LogFields:
        return (
            LogFields()
            .with_field(FIELD_METHOD, method)
            .with_field(FIELD_CORRELATION_ID, correlation_id)
        )

    def response(
        self, correlation_id: str, duration: int, err: BaseException | None = None
    ) -> LogFields:
        result = (
            LogFields()
            .with_field(FIELD_CORRELATION_ID, correlation_id)
            .with_field(FIELD_DURATION, duration)
        )
        if err is not None:
            result.with_error(err)
        return result

    def connection(self, connection_id: str, state: str) -> LogFields:
        return (
            LogFields()
            .with_field(FIELD_CONNECTION_ID, connection_id)
            .with_field(FIELD_CONNECTION_STATE, state)
        )

    def handshake(
        self, connection_id: str, client_name: str, protocol_version: str
    ) -> LogFields:
        return (
            LogFields()
            .with_field(FIELD_CONNECTION_ID, connection_id)
            .with_field(FIELD_CLIENT_NAME, client_name)
            .with_field(FIELD_PROTOCOL_VERSION, protocol_version)
        )


def fields() -> StandardFields:
    """Return the standard field builders."""
    return StandardFields()