"""Entry point for running the server as a module.

Usage:
    python -m plane_mcp_server
    PORT=8080 python -m plane_mcp_server
"""

from plane_mcp_server.app import main

if __name__ == "__main__":
    main()
