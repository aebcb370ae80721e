"""Teardown command: stop and remove a profile's containers."""

import asyncio
import sys

from unideploy.commands.common import add_profile_args, project_dir, resolve_profile
from unideploy.deploy import DeployParams, teardown


def handle_teardown(args):
    """Handle the teardown command."""
    params = DeployParams(
        project_dir=project_dir(args),
        profile=resolve_profile(args),
        dry_run=args.dry_run,
    )
    if not asyncio.run(teardown(params)):
        sys.exit(1)


def register_teardown_command(subparsers):
    """Register the teardown subcommand."""
    parser = subparsers.add_parser("teardown", help="Stop the stack (docker compose down --remove-orphans)")
    add_profile_args(parser)
    parser.set_defaults(func=handle_teardown)
