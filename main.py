#!/usr/bin/env python3
"""
Account authentication service.
Local registration/login and Google sign-in, all ending in a signed session cookie.
"""

import argparse
import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", stream=sys.stderr
)

#
# NOTE: Keep backend imports lazy (inside main) so `--migrate` doesn't pull in the
# web stack and `--serve` doesn't need psycopg when running on the memory store.
#


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Account authentication service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Apply pending Postgres migrations
  python main.py --migrate

  # Run the HTTP server
  JWT_SECRET=... python main.py --serve --port 8080
        """,
    )
    parser.add_argument("--serve", action="store_true", help="Run the HTTP server")
    parser.add_argument("--migrate", action="store_true", help="Apply pending database migrations and exit")
    parser.add_argument("--host", default="0.0.0.0", help="Server bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8080, help="Server listen port (default: 8080)")

    args = parser.parse_args()

    if args.migrate:
        from backend.db.migrate import main as migrate_main

        raise SystemExit(migrate_main())

    if args.serve:
        from backend.api.server import run

        run(host=args.host, port=args.port)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
