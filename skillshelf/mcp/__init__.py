"""
Skillshelf MCP server package.

One standalone MCP server (skillshelf.mcp.skills_server) that serves the
skill library as tools and as skill:// resources.

It can run in stdio mode (default, for Claude Desktop / Cursor)
or SSE/HTTP mode (for network-accessible deployment).

    # stdio
    python -m skillshelf.mcp.skills_server

    # SSE on port 8060 (SKILLSHELF_MCP_PORT)
    python -m skillshelf.mcp.skills_server --sse
"""
