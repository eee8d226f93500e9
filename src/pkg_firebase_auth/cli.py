# src/pkg_firebase_auth/cli.py

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Optional, Sequence

from .adapters.cache.memory import InMemoryKeyValueCache
from .env import settings_from_env
from .integrations.common.auth_factory import create_auth_dependencies_from_settings


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-firebase-auth",
        description="Verify Firebase ID tokens against Google's public keys",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    verify = sub.add_parser("verify", help="Verify one ID token and print its claims")
    verify.add_argument("token", help="The Firebase ID token (without 'Bearer ')")
    verify.add_argument(
        "--project-id",
        "-p",
        help="Override the Firebase project id (default: env FIREBASE_PROJECT_ID)",
    )

    return parser.parse_args(args=argv)


async def _run(args: argparse.Namespace) -> Optional[dict[str, Any]]:
    settings = settings_from_env(project_id=args.project_id)

    # one-shot process: nothing to share the key set with
    auth = create_auth_dependencies_from_settings(settings, cache=InMemoryKeyValueCache())
    return await auth.authenticate(args.token)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    try:
        claims = asyncio.run(_run(args))
    except (RuntimeError, ValueError) as exc:
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 2

    if claims is None:
        json.dump({"ok": False}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 1

    json.dump({"ok": True, "claims": claims}, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
