"""Protocol support: connection state and MCP errors."""