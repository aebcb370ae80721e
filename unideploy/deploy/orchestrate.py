"""Deploy orchestration: run_deploy, run_teardown, deploy, teardown."""

import logging

from unideploy.deploy import steps
from unideploy.deploy.compose import down_cmd, ps_cmd, useful_commands
from unideploy.deploy.health import http_probe, service_url, smoke_test, wait_for_services
from unideploy.deploy.local import make_run_cmd, make_write_file
from unideploy.deploy.params import DeployParams

logger = logging.getLogger(__name__)


async def run_deploy(run_cmd, write_file, params: DeployParams, probe=http_probe):
    """Run the full deployment sequence, stopping at the first fatal step.

    Args:
        run_cmd: async callable(command, stream=True, timeout=None, log_output=False, cwd=None)
            -> (returncode, stdout, stderr)
        write_file: async callable(path, content) -> None, path relative to the project dir
        params: resolved DeployParams
        probe: async callable(url) -> bool used by the smoke test

    Returns:
        True on success. Teardown and smoke-test failures do not affect the result.
    """
    profile = params.profile
    project_dir = params.project_dir
    dry_run = params.dry_run

    logger.info(f"Starting {profile.name} deployment...")

    # Step 1: Preflight
    if not steps.preflight(project_dir, profile):
        return False

    # Step 2: Environment file
    env = await steps.materialize_env(write_file, project_dir, profile)
    if env is None:
        return False
    config = steps.load_env_config(env, profile)
    if config is None:
        return False

    # Step 3: Frontend bundle
    if not await steps.build_frontend(run_cmd, profile):
        return False

    # Step 4: Env file into the backend build context
    if not steps.propagate_env(project_dir, profile, dry_run=dry_run):
        return False

    # Step 5: Database directory
    if not steps.prepare_storage(project_dir, profile, dry_run=dry_run):
        return False

    # Step 6: Schema
    if not await steps.init_schema(run_cmd, profile, params.python):
        return False

    # Step 7: Previous instance (non-fatal)
    await steps.teardown_previous(run_cmd, profile, project_dir, config)

    # Step 8: Build and start
    if not await steps.start_stack(run_cmd, profile):
        return False

    # Steps 9-10: Readiness
    if not await wait_for_services(run_cmd, profile, dry_run=dry_run):
        return False

    # Step 11: Smoke test (non-fatal)
    base_url = service_url(params.host, config.port)
    await smoke_test(run_cmd, profile, base_url, probe=probe, dry_run=dry_run)

    # Step 12: Summary
    _log_summary(profile, config, params)
    logger.info("Running containers:")
    await run_cmd(ps_cmd(profile.compose_file), log_output=True)
    return True


def _log_summary(profile, config, params):
    def plain(line):
        logger.info(line, extra={"plain": True})

    status = "dry-run (not deployed)" if params.dry_run else "deployed"
    base_url = service_url(params.host, config.port)
    logger.info(f"{profile.name.capitalize()} deployment completed! Status: {status}")
    logger.info("Your application is now running at:")
    plain(f"  - Application: {base_url} (Frontend + Backend)")
    plain(f"  - API endpoints: {base_url}/api/*")
    plain(f"  - Redis: {params.host}:{config.redis_port}")

    if profile.next_steps:
        logger.info(f"Next steps for {profile.name}:")
        for i, step in enumerate(profile.next_steps, start=1):
            plain(f"{i}. {step.replace('{port}', str(config.port))}")

    logger.info("Useful commands:")
    redeploy = f"unideploy deploy {profile.name}"
    for label, command in useful_commands(profile.compose_file, redeploy):
        plain(f"  - {label}: {command}")


async def run_teardown(run_cmd, profile):
    """Tear down: docker compose down --remove-orphans."""
    logger.info("Tearing down...")
    rc, _, _ = await run_cmd(down_cmd(profile.compose_file), log_output=True)
    if rc == 0:
        logger.info("Teardown complete.")
    else:
        logger.error("Teardown failed.")
    return rc == 0


async def deploy(params: DeployParams) -> bool:
    """Deploy on the local host. Single entry point."""
    run_cmd = make_run_cmd(params.project_dir, dry_run=params.dry_run)
    write_file = make_write_file(params.project_dir, dry_run=params.dry_run)
    return await run_deploy(run_cmd, write_file, params)


async def teardown(params: DeployParams) -> bool:
    """Stop the profile's stack on the local host."""
    run_cmd = make_run_cmd(params.project_dir, dry_run=params.dry_run)
    return await run_teardown(run_cmd, params.profile)
