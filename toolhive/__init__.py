"""Building blocks for running MCP servers: permissions, ports, processes, registry types, state, secrets and logging."""

__version__ = "0.1.0"