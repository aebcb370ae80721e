"""Individual deployment steps.

Each step logs its own progress. Fatal steps return False (or None for the
env materialization step) after logging an error; non-fatal steps log
warnings and return nothing.
"""

import logging
import os
import shlex
import shutil

from unideploy.deploy.compose import (
    conflict_filters,
    down_cmd,
    list_containers_cmd,
    parse_container_names,
    remove_containers_cmd,
    up_cmd,
)
from unideploy.envfile import EnvConfig, read_env_file, render_env
from unideploy.redact import register_secret, register_uri_password

logger = logging.getLogger(__name__)


def preflight(project_dir, profile):
    """Check the profile's marker file exists in the project directory."""
    marker = os.path.join(project_dir, profile.marker_file)
    if not os.path.isfile(marker):
        logger.error(
            f"{profile.marker_file} not found in {os.path.abspath(project_dir)}. "
            "Please run from the project root directory (or pass --project-dir)."
        )
        return False
    return True


async def materialize_env(write_file, project_dir, profile):
    """Return the env mapping, creating the env file from the template if absent.

    For profiles with ``abort_on_missing_env`` the template is still written,
    but None is returned so the run stops and the operator can fill in real
    secrets before re-running.
    """
    env_path = os.path.join(project_dir, profile.env_file)
    if os.path.isfile(env_path):
        try:
            return read_env_file(env_path)
        except ValueError as e:
            logger.error(f"Invalid environment file: {e}")
            return None

    if profile.abort_on_missing_env:
        logger.warning(f"{profile.env_file} not found. Creating template...")
    else:
        logger.warning(f"{profile.env_file} not found. Creating environment file from the {profile.name} template...")
    await write_file(profile.env_file, render_env(profile.env_template))

    if profile.abort_on_missing_env:
        logger.warning(f"Please edit {profile.env_file} with your actual values before continuing")
        logger.warning("Especially change the SECRET_KEY to a secure random string")
        logger.error(f"Template written to {profile.env_file}; deployment stopped. Re-run after editing it.")
        return None

    logger.info(f"Created {profile.env_file} with {profile.name} settings")
    return dict(profile.env_template)


def load_env_config(env, profile):
    """Validate the env mapping into an EnvConfig and register its secrets."""
    try:
        config = EnvConfig.from_dict(env)
    except ValueError as e:
        logger.error(f"Invalid configuration in {profile.env_file}: {e}")
        return None

    register_secret(config.secret_key)
    register_uri_password(config.database_uri)
    if config.uses_placeholder_secret and profile.abort_on_missing_env:
        logger.warning(f"SECRET_KEY in {profile.env_file} is still the template placeholder")
    return config


async def build_frontend(run_cmd, profile):
    logger.info("Building frontend for production...")
    for command in (profile.frontend_install_cmd, profile.frontend_build_cmd):
        rc, _, _ = await run_cmd(command, log_output=True, cwd=profile.frontend_dir)
        if rc != 0:
            logger.error(f"Frontend build failed: '{command}' exited with {rc}")
            return False
    return True


def propagate_env(project_dir, profile, dry_run=False):
    """Copy the env file verbatim into the backend build context."""
    logger.info("Copying environment file to backend...")
    src = os.path.join(project_dir, profile.env_file)
    dst = os.path.join(project_dir, profile.backend_dir, profile.backend_env_file)
    if dry_run:
        logger.info(f"[dry-run] copy {src} -> {dst}")
        return True
    try:
        os.makedirs(os.path.dirname(dst), exist_ok=True)
        shutil.copyfile(src, dst)
    except OSError as e:
        logger.error(f"Failed to copy {src} to {dst}: {e}")
        return False
    return True


def prepare_storage(project_dir, profile, dry_run=False):
    """Ensure the database directory exists with the profile's permission bits."""
    logger.info("Setting up database directory...")
    path = os.path.join(project_dir, profile.backend_dir, profile.instance_dir)
    if dry_run:
        logger.info(f"[dry-run] mkdir -p {path} && chmod {profile.instance_mode:o} {path}")
        return True
    try:
        os.makedirs(path, exist_ok=True)
        os.chmod(path, profile.instance_mode)
    except OSError as e:
        logger.error(f"Failed to prepare {path}: {e}")
        return False
    return True


def bootstrap_cmd(python, profile):
    return (
        f"{shlex.quote(python)} -m unideploy.db.bootstrap"
        f" --factory {shlex.quote(profile.app_factory)}"
        f" --db {shlex.quote(profile.db_ref)}"
    )


async def init_schema(run_cmd, profile, python):
    """Create all tables via the schema bootstrap, run inside the backend directory."""
    logger.info("Initializing database...")
    rc, _, _ = await run_cmd(bootstrap_cmd(python, profile), log_output=True, cwd=profile.backend_dir)
    if rc != 0:
        logger.error(f"Database initialization failed (exit {rc})")
        return False
    return True


async def teardown_previous(run_cmd, profile, project_dir, config):
    """Stop the previous stack. Never fatal."""
    logger.info("Stopping existing containers and cleaning up orphans...")
    rc, _, _ = await run_cmd(down_cmd(profile.compose_file), log_output=True)
    if rc != 0:
        logger.warning(f"'docker compose down' exited with {rc}; continuing")

    if not profile.force_remove_conflicts:
        return

    logger.info("Removing any conflicting containers...")
    filters = conflict_filters(
        profile.resolve_container_filter(project_dir),
        [config.port, config.redis_port],
    )
    for filter_expr in filters:
        rc, stdout, _ = await run_cmd(list_containers_cmd(filter_expr), stream=False)
        if rc != 0:
            logger.warning(f"Could not list containers for filter {filter_expr}; continuing")
            continue
        names = parse_container_names(stdout)
        if not names:
            continue
        logger.info(f"Removing {', '.join(names)} ({filter_expr})")
        rc, _, _ = await run_cmd(remove_containers_cmd(names), log_output=True)
        if rc != 0:
            logger.warning(f"Failed to remove {', '.join(names)}; continuing")


async def start_stack(run_cmd, profile):
    logger.info(f"Building and starting {profile.name} containers...")
    rc, _, _ = await run_cmd(up_cmd(profile.compose_file), log_output=True)
    if rc != 0:
        logger.error(f"Failed to start services (exit {rc})")
        return False
    return True
