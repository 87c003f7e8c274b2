#!/usr/bin/env python3
"""
Development server entry point for the show timeline backend.

Usage:
    python dev.py
    DEV_PORT=8080 python dev.py
"""

import os
import subprocess
import sys
from pathlib import Path


def main():
    """Start the FastAPI development server with auto-reload."""
    src_dir = Path(__file__).parent / "src"
    if not src_dir.exists():
        print(f"Error: Source directory not found at {src_dir}", file=sys.stderr)
        sys.exit(1)

    host = os.environ.get("DEV_HOST", "127.0.0.1")
    port = os.environ.get("DEV_PORT", "8000")

    # Modules are imported as top-level names ('config', 'timeline', 'api'...)
    os.chdir(src_dir)

    cmd = [
        sys.executable, "-m", "uvicorn",
        "main:app",
        "--reload",
        "--host", host,
        "--port", port,
    ]

    print("Starting show timeline development server...")
    print(f"Timeline API at http://{host}:{port}/api/timeline")
    print(f"API documentation at http://{host}:{port}/docs")
    print("Press Ctrl+C to stop the server")
    print()

    try:
        subprocess.run(cmd, check=True, env=os.environ.copy())
    except KeyboardInterrupt:
        print("\nServer stopped.")
        sys.exit(0)
    except subprocess.CalledProcessError as e:
        print(f"Error starting server: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
