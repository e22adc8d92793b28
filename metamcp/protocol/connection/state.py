"""Connection state tracking for protocol handshakes."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

Context = Mapping[Any, Any]

DEFAULT_HANDSHAKE_TIMEOUT = 30.0


class ConnectionState(IntEnum):
    """Lifecycle state of a connection."""

    NEW = 0
    INITIALIZING = 1
    READY = 2
    CLOSED = 3

    @classmethod
    def _missing_(cls, value: object) -> Optional["ConnectionState"]:
        if not isinstance(value, int):
            return None
        member = int.__new__(cls, value)
        member._name_ = f"UNKNOWN_{value}"
        member._value_ = value
        return member

    def __str__(self) -> str:
        return _STATE_LABELS.get(int(self), f"Unknown({int(self)})")


_STATE_LABELS = {0: "New", 1: "Initializing", 2: "Ready", 3: "Closed"}

_VALID_TRANSITIONS = {
    ConnectionState.NEW: {ConnectionState.INITIALIZING, ConnectionState.CLOSED},
    ConnectionState.INITIALIZING: {ConnectionState.READY, ConnectionState.CLOSED},
    ConnectionState.READY: {ConnectionState.CLOSED},
    ConnectionState.CLOSED: set(),
}


class ConnectionStateError(Exception):
    """Raised for invalid state transitions and handshake misuse."""


class ConnectionContextKey(Enum):
    CONNECTION_ID = "mcp:connection:id"
    CONNECTION_STATE = "mcp:connection:state"


class Connection:
    """A single connection with its handshake state and metadata."""

    def __init__(
        self,
        connection_id: str,
        handshake_timeout: float = DEFAULT_HANDSHAKE_TIMEOUT,
        state: ConnectionState = ConnectionState.NEW,
    ) -> None:
        self.id = connection_id
        self.handshake_timeout = handshake_timeout
        self.handshake_started: Optional[datetime] = None
        self.protocol_version = ""
        self.client_info: dict[str, Any] = {}
        self._state = ConnectionState(state)
        self._lock = threading.Lock()
        self._once_lock = threading.Lock()
        self._handshake_attempted = False
        self._timer: Optional[threading.Timer] = None

    def __repr__(self) -> str:
        return f"Connection(id={self.id!r}, state={self.state})"

    @property
    def state(self) -> ConnectionState:
        with self._lock:
            return self._state

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def set_state(self, new_state: ConnectionState) -> None:
        """Move to ``new_state``, raising if the transition is not allowed."""
        with self._lock:
            allowed = _VALID_TRANSITIONS.get(self._state, set())
            if new_state not in allowed:
                raise ConnectionStateError(
                    f"invalid state transition from {self._state} to {new_state}"
                )
            self._state = new_state
            if new_state == ConnectionState.INITIALIZING:
                self.handshake_started = datetime.now(timezone.utc)
            elif new_state in (ConnectionState.READY, ConnectionState.CLOSED):
                self._cancel_timer()

    def is_ready(self) -> bool:
        return self.state == ConnectionState.READY

    def start_handshake(self, timeout_callback: Optional[Callable[[], Any]] = None) -> None:
        """Begin the handshake; it closes the connection if not completed in time."""
        with self._once_lock:
            if self._handshake_attempted:
                raise ConnectionStateError("handshake already started")
            self._handshake_attempted = True

        try:
            self.set_state(ConnectionState.INITIALIZING)
        except ConnectionStateError as exc:
            raise ConnectionStateError(f"failed to start handshake: {exc}") from exc

        timer = threading.Timer(self.handshake_timeout, self._on_timeout, args=(timeout_callback,))
        timer.daemon = True
        with self._lock:
            self._timer = timer
            timer.start()

    def _on_timeout(self, callback: Optional[Callable[[], Any]]) -> None:
        with self._lock:
            if self._state == ConnectionState.INITIALIZING:
                self._state = ConnectionState.CLOSED
        if callback is not None:
            callback()

    def complete_handshake(
        self, protocol_version: str, client_info: Optional[Mapping[str, Any]] = None
    ) -> None:
        with self._lock:
            if self._state != ConnectionState.INITIALIZING:
                raise ConnectionStateError(f"cannot complete handshake in state {self._state}")
            self._state = ConnectionState.READY
            self.protocol_version = protocol_version
            self.client_info.update(client_info or {})
            self._cancel_timer()

    def close(self) -> None:
        with self._lock:
            self._state = ConnectionState.CLOSED
            self._cancel_timer()


class Manager:
    """Tracks connections by ID."""

    def __init__(self, default_timeout: float = DEFAULT_HANDSHAKE_TIMEOUT) -> None:
        self.default_timeout = default_timeout if default_timeout > 0 else DEFAULT_HANDSHAKE_TIMEOUT
        self._connections: dict[str, Connection] = {}
        self._lock = threading.Lock()

    def create_connection(self, connection_id: str) -> Connection:
        with self._lock:
            if connection_id in self._connections:
                raise ValueError(f"connection {connection_id} already exists")
            conn = Connection(connection_id, self.default_timeout)
            self._connections[connection_id] = conn
            return conn

    def get_connection(self, connection_id: str) -> Optional[Connection]:
        with self._lock:
            return self._connections.get(connection_id)

    def remove_connection(self, connection_id: str) -> None:
        with self._lock:
            conn = self._connections.pop(connection_id, None)
            if conn is not None:
                conn.close()


def with_connection_id(ctx: Optional[Context], connection_id: str) -> Context:
    values = dict(ctx) if ctx else {}
    values[ConnectionContextKey.CONNECTION_ID] = connection_id
    return MappingProxyType(values)


def get_connection_id(ctx: Optional[Context]) -> Optional[str]:
    if ctx is None:
        return None
    value = ctx.get(ConnectionContextKey.CONNECTION_ID)
    return value if isinstance(value, str) else None


def connection_from_context(ctx: Optional[Context], manager: Manager) -> Optional[Connection]:
    connection_id = get_connection_id(ctx)
    if connection_id is None:
        return None
    return manager.get_connection(connection_id)