"""MCP error codes, the MCPError type, factories, and wrapping and classification helpers."""