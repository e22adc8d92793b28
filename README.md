# metamcp

Building blocks for Model Context Protocol servers, using only the standard
library:

- **Structured logging** (`metamcp.logs`): a `Logger` that writes JSON lines
  or human-readable console lines, fields carried through an immutable context
  mapping, environment-driven configuration, and bridges from the standard
  `logging` module.
- **Connection state** (`metamcp.protocol.connection`): a thread-safe
  `Manager` of `Connection` objects that move through the handshake states
  New → Initializing → Ready → Closed, with a handshake timeout.
- **Protocol errors** (`metamcp.protocol.errors`): `MCPError` with error codes
  in the reserved -32000 to -32099 range, factories for common failures, and
  helpers for wrapping, inspecting, classifying and aggregating errors.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Logging

```python
from metamcp.logs.config import config_from_env
from metamcp.logs.context import with_component, with_correlation_id
from metamcp.logs.logger import Logger

logger = Logger(config_from_env())
ctx = with_correlation_id(with_component({}, "main"), "req-42")

logger.with_field("version", "1.0.0").info(ctx, "server starting")
```

`Logger` methods `debug`, `info`, `warn`, `error` and `fatal` take a context
first; `error` and `fatal` also take an exception (or `None`). `fatal` writes
its record and then raises `SystemExit(1)`. The `with_*` methods return new
loggers and leave the original unchanged. `context_logger(ctx, logger)` in
`metamcp.logs.logger` attaches every logging value found in a context.

`metamcp.logs.config.config_from_env` reads `ENVIRONMENT`, `ENV` or `GO_ENV`
(`development`/`dev`/`local`, `staging`/`stage`, `production`/`prod`) and then
the overrides `LOG_LEVEL`, `DEBUG`, `LOG_PRETTY` and `LOG_SANITIZE`. It also
accepts a mapping in place of `os.environ`. `development_config`,
`production_config` and `testing_config(output)` are ready-made presets.

Field builders in `metamcp.logs.fields` give consistent key names:

```python
from metamcp.logs.fields import LogFields, fields

request_fields = fields().request("tools/call", "corr-123")
response_fields = LogFields().with_response(200, 15).with_component("router")
```

To route standard-library logging into a `Logger`, use
`metamcp.logs.adapter.new_std_log_adapter(logger)`, which returns a
`logging.Logger`, or attach a `LoggerHandler` to an existing one.
`StdLogAdapter` is a file-like writer that logs each write at info level.

## Connection state

```python
from metamcp.protocol.connection.state import Manager

manager = Manager(10.0)
conn = manager.create_connection("conn-1")
conn.start_handshake(lambda: print("handshake timed out"))
conn.complete_handshake("1.0", {"name": "client", "version": "1.0.0"})
assert conn.is_ready()
```

Invalid transitions, a second `start_handshake` and completing a handshake
that was not started raise `ConnectionStateError`. Creating a connection with
an ID that already exists raises `ValueError`. If the handshake is not
completed within the timeout, the connection is closed and the callback runs.
`with_connection_id` and `connection_from_context` keep a connection ID in a
context mapping.

## Errors

```python
from metamcp.protocol.errors.factory import new_tool_error
from metamcp.protocol.errors.wrapper import is_retryable

err = new_tool_error("calculator", ZeroDivisionError("division by zero"))
err.with_context("operation", "divide")

print(err)               # MCP handler error (-32042): Tool execution error: calculator - caused by: division by zero
print(err.to_response("1"))
print(is_retryable(err))  # False
print(err.sanitize().context)
```

`MCPError.sanitize` returns a copy without data, cause, debug info or context
keys that look sensitive (containing words such as `password`, `token` or
`secret`). `metamcp.protocol.errors.wrapper` provides `wrap_error`,
`chain_error`, `unwrap_all`, `find_mcp_error`, `find_error_code`,
`is_temporary`, `is_retryable`, `is_fatal` and `new_aggregate_error`.

## What this package does not do

It is a library only: it has no server, no transport, no message handling and
no command to run. There is also no dedicated error logger; log an `MCPError`
through `Logger.error` or `Logger.log_error`, and call `sanitize()` yourself
before logging where its context may hold sensitive values.