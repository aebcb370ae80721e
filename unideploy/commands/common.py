"""Arguments and helpers shared by every profile-based subcommand."""

import logging
import os
import sys

from unideploy.deploy.profile import BUILTIN_PROFILES, load_profile

logger = logging.getLogger(__name__)


def add_profile_args(parser):
    """Add the PROFILE positional and the project/config/dry-run options."""
    parser.add_argument(
        "profile",
        help=f"Deployment profile ({', '.join(BUILTIN_PROFILES)} or one defined in the config file)",
    )
    parser.add_argument("--project-dir", default=".", help="Project root directory (default: .)")
    parser.add_argument(
        "--config",
        default=None,
        help="Profile overrides YAML (default: <project-dir>/unideploy.yaml if present)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print commands without executing")


def resolve_profile(args):
    """Load the requested profile, exiting with status 1 on a config error."""
    try:
        return load_profile(args.profile, project_dir=args.project_dir, config_path=args.config)
    except (ValueError, FileNotFoundError) as e:
        logger.error(str(e))
        sys.exit(1)


def project_dir(args):
    return os.path.abspath(args.project_dir)
