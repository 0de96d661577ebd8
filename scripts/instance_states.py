#!/usr/bin/env python3
"""Print an instance lifecycle machine as a node/edge graph."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def main() -> None:
    parser = argparse.ArgumentParser(description="Show the instance lifecycle state machine")
    parser.add_argument(
        "--driver",
        help="Print the declared machine of a built-in driver (mock, gogrid, rhevm, virtualbox) without contacting a server",
    )
    parser.add_argument("--url", default=os.environ.get("CLOUDAPI_URL"), help="API URL (or set CLOUDAPI_URL)")
    parser.add_argument("--user", default=os.environ.get("CLOUDAPI_USER"), help="User (or set CLOUDAPI_USER)")
    parser.add_argument(
        "--password", default=os.environ.get("CLOUDAPI_PASSWORD", ""), help="Password (or set CLOUDAPI_PASSWORD)"
    )
    args = parser.parse_args()

    if args.driver:
        from cloudapi.backends.machines import machine_for

        machine = machine_for(args.driver)
    else:
        if not args.url:
            parser.error("--url (or CLOUDAPI_URL) is required unless --driver is given")
        from cloudapi.core.client import Client

        machine = Client(args.url, args.user, args.password).instance_states()

    graph = machine.as_graph()
    graph["start"] = machine.start
    graph["terminals"] = list(machine.terminals)
    print(json.dumps(graph, indent=2))


if __name__ == "__main__":
    main()
