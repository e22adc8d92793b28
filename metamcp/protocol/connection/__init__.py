"""Connection state management for protocol handshakes."""