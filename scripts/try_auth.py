#!/usr/bin/env python3
"""Live login/search check against the configured API.

Prints every state emitted by the login stream and, when login succeeds
and a query is given, the blog search stream.

Credentials come from ``BOUNDFLOW_EMAIL`` / ``BOUNDFLOW_PASSWORD`` unless
passed on the command line. Other settings use ``BOUNDFLOW_*`` variables
(see :meth:`boundflow.config.BoundflowConfig.from_env`).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from boundflow import BoundflowClient, BoundflowConfig, Error, Success  # noqa: E402


async def _run(args: argparse.Namespace) -> int:
    config = BoundflowConfig.from_env(api_trace_enabled=args.verbose)
    async with BoundflowClient(config) as client:
        logged_in = False
        async for state in client.login(args.email, args.password):
            print(f"login: {state!r}")
            logged_in = isinstance(state, Success) and state.is_final

        if not logged_in or not args.search:
            return 0 if logged_in else 1

        async for state in client.search_blog_posts(args.search):
            if isinstance(state, Success):
                titles = [post.title for post in state.payload.posts]
                print(f"search ({'final' if state.is_final else 'cached'}): {titles}")
            else:
                print(f"search: {state!r}")
            if isinstance(state, Error):
                return 1
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--email", default=os.environ.get("BOUNDFLOW_EMAIL", ""))
    parser.add_argument("--password", default=os.environ.get("BOUNDFLOW_PASSWORD", ""))
    parser.add_argument("--search", default="", help="Optional blog search query to run after login")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log redacted requests and responses")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
