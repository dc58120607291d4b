#!/usr/bin/env python3
"""
Startup script for the Task Tracker API.
Optionally seeds demo data, then serves main:app with uvicorn.
"""

import argparse
import os

import uvicorn
from dotenv import load_dotenv

from app.config.settings import Settings


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the Task Tracker API")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "5000")))
    parser.add_argument("--no-reload", action="store_true", help="disable auto-reload (RELOAD=false does the same)")
    parser.add_argument("--seed", action="store_true", help="load demo users, employees and tasks first")
    return parser.parse_args(argv)


def main(argv=None):
    load_dotenv()
    args = parse_args(argv)
    settings = Settings()
    reload = not args.no_reload and os.getenv("RELOAD", "true").lower() == "true"

    if args.seed:
        from seed_all import main as seed_main
        seed_main()

    print("Starting Task Tracker API...")
    print(f"Listening on {args.host}:{args.port} (reload={reload})")
    print(f"Database: {settings.database_url.split('@')[-1]}")
    print("=" * 50)

    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
