"""Chart MCP - render charts and deliver them to MCP clients."""

__version__ = "0.1.0"
