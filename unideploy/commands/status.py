"""status and logs commands: thin wrappers over docker compose ps/logs."""

import asyncio
import sys

from unideploy.commands.common import add_profile_args, project_dir, resolve_profile
from unideploy.deploy.compose import logs_cmd, ps_cmd
from unideploy.deploy.local import make_run_cmd


def _run(args, command):
    run_cmd = make_run_cmd(project_dir(args), dry_run=args.dry_run)
    rc, _, _ = asyncio.run(run_cmd(command))
    if rc != 0:
        sys.exit(rc)


def handle_status(args):
    """Handle the status command."""
    profile = resolve_profile(args)
    _run(args, ps_cmd(profile.compose_file))


def handle_logs(args):
    """Handle the logs command."""
    profile = resolve_profile(args)
    _run(args, logs_cmd(profile.compose_file, service=args.service, follow=args.follow, tail=args.tail))


def register_status_commands(subparsers):
    """Register the status and logs subcommands."""
    status_parser = subparsers.add_parser("status", help="Show service status (docker compose ps)")
    add_profile_args(status_parser)
    status_parser.set_defaults(func=handle_status)

    logs_parser = subparsers.add_parser("logs", help="Show service logs (docker compose logs)")
    add_profile_args(logs_parser)
    logs_parser.add_argument("--service", default=None, help="Only show logs for this service")
    logs_parser.add_argument("-f", "--follow", action="store_true", help="Follow log output")
    logs_parser.add_argument("--tail", type=int, default=None, help="Number of lines from the end")
    logs_parser.set_defaults(func=handle_logs)
