"""
Start the official matching API with uvicorn.

Usage: python run.py [--host HOST] [--port PORT] [--reload]
Host and port default to the HOST / PORT settings.
"""
from argparse import ArgumentParser
from typing import List, Optional

import uvicorn

from civicfix.config import get_settings

def main(argv: Optional[List[str]] = None) -> None:
    settings = get_settings()

    parser = ArgumentParser(description="Run the CivicFix official matching API")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args(argv)

    uvicorn.run(
        "civicfix.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )

if __name__ == "__main__":
    main()
