"""
project: Maze Explorer
module: server.py
License: MIT

Server bootstrap.

Starts the Flask development server with application logging routed to a
rotating file in the instance folder and to the console.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from explorer import app


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Start the HTTP server.

    When debug=True, Flask's debugger and reloader provide verbose tracebacks.
    """
    _configure_logging()
    try:
        print(f"[INFO] Starting explorer API on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging(log_dir=None):
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/explorer.log. Retains a few backups to avoid growth.
    Returns the log file path.
    """
    log_dir = log_dir or app.instance_path
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "explorer.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
