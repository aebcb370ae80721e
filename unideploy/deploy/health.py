"""Readiness polling: bounded exponential backoff, compose status, HTTP smoke probes."""

import asyncio
import logging

import httpx

from unideploy.deploy.compose import logs_cmd, ps_cmd, services_up

logger = logging.getLogger(__name__)


async def poll_until(check, timeout, interval=1.0, max_interval=10.0, backoff=2.0):
    """Await ``check()`` until it returns True or *timeout* seconds elapse.

    The delay between attempts starts at *interval*, is multiplied by
    *backoff* after every failed attempt, is capped at *max_interval*, and is
    clipped so that no sleep extends past the deadline. ``check`` always runs
    at least once.

    Returns:
        True as soon as a check succeeds, False once the deadline passes.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    delay = interval
    while True:
        if await check():
            return True
        remaining = deadline - loop.time()
        if remaining <= 0:
            return False
        await asyncio.sleep(min(delay, remaining))
        delay = min(delay * backoff, max_interval)


def service_url(host, port):
    """Base URL of the deployed app; IPv6 hosts are bracketed."""
    try:
        return str(httpx.URL(scheme="http", host=host.strip("[]"), port=port)).rstrip("/")
    except httpx.InvalidURL:
        return f"http://{host}:{port}"


async def http_probe(url, timeout=5.0, transport=None):
    """GET *url* without following redirects; reachable means any HTTP response below 500."""
    try:
        async with httpx.AsyncClient(transport=transport) as client:
            resp = await client.get(url, timeout=timeout)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.debug(f"Probe {url} failed: {e}")
        return False
    return resp.status_code < 500


async def wait_for_services(run_cmd, profile, dry_run=False):
    """Poll ``docker compose ps`` until a service reports Up.

    On timeout the full compose logs are dumped and False is returned.
    """
    logger.info("Waiting for services to be ready...")
    if dry_run:
        await run_cmd(ps_cmd(profile.compose_file), stream=False)
        return True

    async def _check():
        rc, stdout, _ = await run_cmd(ps_cmd(profile.compose_file), stream=False)
        return rc == 0 and services_up(stdout)

    ready = await poll_until(
        _check,
        timeout=profile.readiness_timeout,
        interval=profile.poll_interval,
        max_interval=profile.poll_max_interval,
    )
    if ready:
        logger.info("Services are running successfully!")
        return True

    logger.error(f"Services did not report 'Up' within {profile.readiness_timeout:g}s. Check logs:")
    await run_cmd(logs_cmd(profile.compose_file), log_output=True)
    return False


async def smoke_test(run_cmd, profile, base_url, probe=http_probe, dry_run=False):
    """Probe each of the profile's smoke paths under *base_url*.

    Failures are downgraded to warnings with a backend log dump.

    Returns:
        List of paths that never became reachable.
    """
    logger.info("Testing unified application...")
    failed = []
    for path in profile.smoke_paths:
        url = base_url.rstrip("/") + path
        if dry_run:
            logger.info(f"[dry-run] GET {url}")
            continue

        async def _check(url=url):
            return await probe(url)

        ok = await poll_until(
            _check,
            timeout=profile.smoke_timeout,
            interval=profile.poll_interval,
            max_interval=profile.poll_max_interval,
        )
        if ok:
            logger.info(f"{url} is responding")
        else:
            logger.warning(f"{url} might not be ready yet. Check logs:")
            await run_cmd(logs_cmd(profile.compose_file, service=profile.backend_service), log_output=True)
            failed.append(path)
    return failed
