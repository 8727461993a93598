#!/usr/bin/env python3
"""Startup script for the Basic Diff API server."""

import argparse
import sys
from pathlib import Path

import uvicorn

# Add src to path so basicdiff imports without an editable install
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def main():
    """Main entry point for API server."""
    parser = argparse.ArgumentParser(
        description="Start the Basic Diff API server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/start_api.py                    # Development server
  python scripts/start_api.py --host 0.0.0.0    # Listen on all interfaces
  python scripts/start_api.py --workers 4       # Several worker processes
  python scripts/start_api.py --reload          # Auto-reload on changes
        """,
    )
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")
    parser.add_argument(
        "--workers", type=int, default=1, help="Number of worker processes (default: 1)"
    )
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level (default: info)",
    )
    args = parser.parse_args()

    print("Starting Basic Diff API server")
    print(f"   Listening: http://{args.host}:{args.port}")
    print(f"   Workers: {args.workers}, reload: {args.reload}, log level: {args.log_level}")
    print(f"   API Docs: http://{args.host}:{args.port}/docs")

    config = {
        "app": "basicdiff.api.app:app",
        "host": args.host,
        "port": args.port,
        "log_level": args.log_level,
    }
    if args.reload:
        config["reload"] = True
        config["reload_dirs"] = ["src"]
    else:
        config["workers"] = args.workers

    uvicorn.run(**config)


if __name__ == "__main__":
    main()
