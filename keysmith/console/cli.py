"""Command-line entry point.

    keysmith serve              Run the HTTP service
    keysmith keys               Show issued keys
    keysmith keys --generate    Issue a key, then show the list
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from keysmith.config import get_settings
from keysmith.console.client import KeysClient
from keysmith.console.view import KeyManager


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="keysmith", description="Issue and list API keys")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default=settings.server.host, help="Bind address")
    serve.add_argument("--port", type=int, default=settings.server.port, help="Bind port")

    keys = sub.add_parser("keys", help="Show issued API keys")
    keys.add_argument("--endpoint", default=settings.console.endpoint, help="Service base URL")
    keys.add_argument("--token", default=None, help="Admin token for key creation")
    keys.add_argument("--generate", action="store_true", help="Issue a new key first")
    keys.add_argument(
        "--refresh",
        action="store_true",
        default=settings.console.refresh_after_generate,
        help="Re-fetch the list after generating",
    )
    return parser.parse_args(argv)


async def run_keys(args: argparse.Namespace) -> int:
    """Load the key manager, optionally generate, print it."""
    settings = get_settings()
    async with KeysClient(
        args.endpoint,
        access_token=args.token,
        timeout=settings.console.timeout,
    ) as client:
        view = KeyManager(client, refresh_after_generate=args.refresh)
        await view.load()
        if args.generate:
            await view.generate()
        print(view.render(), end="")
    return 1 if view.error else 0


def serve(args: argparse.Namespace) -> None:
    import uvicorn

    from keysmith.main import create_app

    uvicorn.run(create_app(get_settings()), host=args.host, port=args.port)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command == "serve":
        serve(args)
        return
    try:
        sys.exit(asyncio.run(run_keys(args)))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
