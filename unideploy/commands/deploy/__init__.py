"""Deploy command: run the full deployment sequence for a profile."""

import asyncio
import logging
import sys

from unideploy.commands.common import add_profile_args, project_dir, resolve_profile
from unideploy.deploy import DeployParams, deploy
from unideploy.logging_setup import add_file_handler

logger = logging.getLogger(__name__)


def handle_deploy(args):
    """Handle the deploy command."""
    if args.log_file:
        path = add_file_handler(args.log_file)
        logger.info(f"Logging to {path}")

    params = DeployParams(
        project_dir=project_dir(args),
        profile=resolve_profile(args),
        python=args.python,
        host=args.host,
        dry_run=args.dry_run,
    )
    success = asyncio.run(deploy(params))
    if not success:
        sys.exit(1)


def register_deploy_command(subparsers):
    """Register the deploy subcommand."""
    parser = subparsers.add_parser("deploy", help="Build, initialize and start the stack")
    add_profile_args(parser)
    parser.add_argument(
        "--python",
        default="python3",
        help=(
            "Interpreter that runs the schema bootstrap inside the backend directory. It must have the "
            "backend's dependencies and unideploy installed (default: python3 from PATH)"
        ),
    )
    parser.add_argument("--host", default="localhost", help="Host used for smoke probes and URLs (default: localhost)")
    parser.add_argument("--log-file", default=None, help="Also write a timestamped log to this file")
    parser.set_defaults(func=handle_deploy)
