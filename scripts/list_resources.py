#!/usr/bin/env python3
"""List (or show) resources of any relation advertised by a cloud API server."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

# Ensure repository root is importable when running from a checkout.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def _env_name_for_option(option: str) -> str:
    return option.lstrip("-").replace("-", "_").upper()


def _resolve_opt(action: argparse.Action, cli_value: str | None, required: bool = True) -> str | None:
    if cli_value:
        return cli_value
    long_opts = [opt for opt in action.option_strings if opt.startswith("--")]
    canonical_opt = long_opts[0] if long_opts else action.option_strings[0]
    env_name = _env_name_for_option(canonical_opt)
    env_value = os.environ.get(env_name)
    if env_value:
        return env_value
    if required:
        raise RuntimeError(f"Missing {canonical_opt}. Provide {canonical_opt} or set {env_name}.")
    return None


def _parse_filters(pairs: list[str]) -> dict:
    filters = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise SystemExit(f"Invalid filter {pair!r}, expected KEY=VALUE")
        filters[key] = value
    return filters


def main() -> None:
    parser = argparse.ArgumentParser(description="List resources from a cloud API server")
    parser.add_argument("relation", nargs="?", help="Relation to list, e.g. instances (omit to list relations)")
    parser.add_argument("--id", help="Show a single resource instead of the collection")
    parser.add_argument("--filter", action="append", default=[], metavar="KEY=VALUE", help="Collection filter")
    url_action = parser.add_argument("--cloudapi-url", "--url", dest="url", help="API URL (or use CLOUDAPI_URL)")
    user_action = parser.add_argument("--cloudapi-user", "--user", dest="user", help="User (or use CLOUDAPI_USER)")
    password_action = parser.add_argument(
        "--cloudapi-password", "--password", dest="password", help="Password (or use CLOUDAPI_PASSWORD)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log requests to stderr")
    args = parser.parse_args()

    from cloudapi.shared.config import LOG_LEVEL

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL().upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    url = _resolve_opt(url_action, args.url)
    user = _resolve_opt(user_action, args.user, required=False)
    password = _resolve_opt(password_action, args.password, required=False)

    from cloudapi.core.client import Client

    client = Client(url, user, password)

    if not args.relation:
        relations = {
            relation: {"href": href, "features": sorted(client.features.get(relation, ()))}
            for relation, href in client.entry_points.items()
        }
        print(json.dumps({"driver": client.driver_name, "version": client.api_version, "links": relations}, indent=2))
        return

    if args.id:
        resource = client.get(args.relation, args.id)
        print(json.dumps(resource.to_dict() if resource else None, indent=2))
        return

    resources = client.list(args.relation, **_parse_filters(args.filter))
    print(json.dumps([r.to_dict() for r in resources], indent=2))


if __name__ == "__main__":
    main()
