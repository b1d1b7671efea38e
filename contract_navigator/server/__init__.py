"""MCP server surface for the contract navigator."""
