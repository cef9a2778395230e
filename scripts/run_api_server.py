#!/usr/bin/env python3
"""Run the optional FastAPI server for the catalog plugin."""

from __future__ import annotations

import argparse
import logging

from amberflo_catalog.api_server import create_app


def main() -> None:
    parser = argparse.ArgumentParser(description="Run Amberflo catalog API server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover
        raise SystemExit(
            "uvicorn not installed. Install with: pip install 'uvicorn>=0.30,<1.0'"
        ) from exc

    app = create_app()
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
