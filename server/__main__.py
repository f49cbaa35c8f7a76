"""Entry point for running the server as a module

Usage:
    network-editor-server
    network-editor-server --port 8080
    python -m server --host 127.0.0.1

Log level is read from NETWORK_EDITOR_LOG_LEVEL (default: INFO). Set
NETWORK_EDITOR_FRONTEND_DIR to a built front-end directory to serve it at /
"""

import logging
import os
import sys

import uvicorn

from .app import app


def main():
    """Run the server."""
    host = "0.0.0.0"
    port = 8000
    args = sys.argv[1:]
    for i, arg in enumerate(args):
        if arg == "--port" and i + 1 < len(args):
            port = int(args[i + 1])
        elif arg == "--host" and i + 1 < len(args):
            host = args[i + 1]

    logging.basicConfig(
        level=os.environ.get("NETWORK_EDITOR_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
