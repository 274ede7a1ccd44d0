"""Create a Nobl9 project and its role bindings from the command line.

This module is a CLI wrapper around app.core.provisioning_service: it runs the
same validation, user resolution and batched apply as the HTTP endpoint.

Examples:
    python scripts/create_project.py --file request.json
    python scripts/create_project.py --app-id demo \\
        --group project-owner=alice@example.com,bob@example.com \\
        --group project-viewer=u-123
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.config import load_settings
from app.core.exceptions import MalformedRequestError, ProvisioningError
from app.core.provisioning_service import create_project

logger = logging.getLogger("create_project")


def parse_group(value: str) -> dict:
    """Parse ``ROLE=id1,id2`` into a user group payload."""
    role, sep, user_ids = value.partition("=")
    if not sep or not role.strip():
        raise argparse.ArgumentTypeError(f"expected ROLE=user1,user2, got '{value}'")
    return {"userIDs": user_ids, "role": role.strip()}


def build_payload(args: argparse.Namespace) -> dict:
    """Build the request body from --file or from the individual options."""
    if args.file:
        try:
            return json.loads(Path(args.file).read_text())
        except OSError as exc:
            raise MalformedRequestError(f"Cannot read request file: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise MalformedRequestError(f"Invalid request body: {exc}") from exc

    payload = {"appID": args.app_id or "", "userGroups": args.group or []}
    if args.description:
        payload["description"] = args.description
    return payload


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Create a Nobl9 project and assign user roles")
    parser.add_argument("--file", help="JSON request body (same shape as POST /api/create-project)")
    parser.add_argument("--app-id", help="Project name")
    parser.add_argument("--description", help="Project description")
    parser.add_argument(
        "--group",
        action="append",
        type=parse_group,
        metavar="ROLE=USERS",
        help="Role and comma-separated emails or user IDs (repeatable)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every lookup and binding")
    args = parser.parse_args(argv)

    if args.file and (args.app_id or args.group):
        parser.error("--file cannot be combined with --app-id/--group")

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s [%(name)s] %(message)s",
    )

    try:
        payload = build_payload(args)
        result = create_project(payload, load_settings())
    except ProvisioningError as error:
        print(json.dumps({"success": False, "message": error.message}, indent=2))
        return 1

    print(json.dumps({"success": True, "message": result.message}, indent=2))
    for binding in result.bindings:
        logger.info("%s: %s -> %s", binding.name, binding.user_id, binding.role_ref)
    return 0


if __name__ == "__main__":
    sys.exit(main())
