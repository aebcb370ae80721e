"""init-db command: run the schema bootstrap on its own."""

import asyncio
import sys

from unideploy.commands.common import add_profile_args, project_dir, resolve_profile
from unideploy.deploy.local import make_run_cmd
from unideploy.deploy.steps import init_schema, prepare_storage


def handle_init_db(args):
    """Handle the init-db command."""
    profile = resolve_profile(args)
    root = project_dir(args)
    if not prepare_storage(root, profile, dry_run=args.dry_run):
        sys.exit(1)
    run_cmd = make_run_cmd(root, dry_run=args.dry_run)
    if not asyncio.run(init_schema(run_cmd, profile, args.python)):
        sys.exit(1)


def register_init_db_command(subparsers):
    """Register the init-db subcommand."""
    parser = subparsers.add_parser("init-db", help="Create database tables if absent (idempotent)")
    add_profile_args(parser)
    parser.add_argument(
        "--python",
        default="python3",
        help=(
            "Interpreter that runs the schema bootstrap inside the backend directory. It must have the "
            "backend's dependencies and unideploy installed (default: python3 from PATH)"
        ),
    )
    parser.set_defaults(func=handle_init_db)
