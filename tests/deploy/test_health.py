"""Unit tests for backoff polling, service readiness and HTTP smoke probes."""

import asyncio
import time

import httpx

import unideploy.deploy.health as health
from unideploy.deploy.health import http_probe, poll_until, service_url, smoke_test, wait_for_services

PS_HEADER = "NAME   IMAGE   COMMAND   SERVICE   CREATED   STATUS   PORTS"

# ── poll_until ──────────────────────────────────────────────────────


def _counting_check(succeed_on):
    calls = []

    async def check():
        calls.append(1)
        return len(calls) >= succeed_on

    return check, calls


def test_poll_until_immediate_success():
    check, calls = _counting_check(1)
    assert asyncio.run(poll_until(check, timeout=1, interval=0.01)) is True
    assert len(calls) == 1


def test_poll_until_succeeds_after_retries():
    check, calls = _counting_check(3)
    assert asyncio.run(poll_until(check, timeout=5, interval=0.01, max_interval=0.02)) is True
    assert len(calls) == 3


def test_poll_until_times_out_within_ceiling():
    check, calls = _counting_check(10**6)
    start = time.monotonic()
    assert asyncio.run(poll_until(check, timeout=0.2, interval=0.01, max_interval=0.05)) is False
    elapsed = time.monotonic() - start
    assert elapsed < 1.0
    assert len(calls) >= 2


def test_poll_until_exponential_backoff_capped(monkeypatch):
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr(health.asyncio, "sleep", fake_sleep)
    check, _ = _counting_check(6)
    assert asyncio.run(poll_until(check, timeout=100, interval=0.5, max_interval=2.0)) is True
    assert delays == [0.5, 1.0, 2.0, 2.0, 2.0]


# ── http_probe ──────────────────────────────────────────────────────


def _transport(status=None, exc=None):
    def handler(request):
        if exc is not None:
            raise exc
        return httpx.Response(status)

    return httpx.MockTransport(handler)


def test_http_probe_ok():
    assert asyncio.run(http_probe("http://localhost:5000/", transport=_transport(200)))


def test_http_probe_client_error_is_reachable():
    assert asyncio.run(http_probe("http://localhost:5000/api/users", transport=_transport(401)))


def test_http_probe_server_error_is_not_ready():
    assert not asyncio.run(http_probe("http://localhost:5000/", transport=_transport(503)))


def test_http_probe_connection_refused():
    exc = httpx.ConnectError("Connection refused")
    assert not asyncio.run(http_probe("http://localhost:5000/", transport=_transport(exc=exc)))


def test_http_probe_redirect_is_reachable_without_following():
    def handler(request):
        if request.url.host == "localhost":
            return httpx.Response(302, headers={"Location": "https://boards.example.invalid/"})
        raise httpx.ConnectError("unexpected redirect follow")

    assert asyncio.run(http_probe("http://localhost:5000/", transport=httpx.MockTransport(handler)))


def test_http_probe_invalid_url_is_not_ready():
    assert not asyncio.run(http_probe("http://::1:5000/api/users", transport=_transport(200)))


# ── service_url ─────────────────────────────────────────────────────


def test_service_url_hostname():
    assert service_url("localhost", 5000) == "http://localhost:5000"


def test_service_url_brackets_ipv6():
    assert service_url("::1", 5000) == "http://[::1]:5000"
    assert service_url("[::1]", 5000) == "http://[::1]:5000"


# ── wait_for_services ───────────────────────────────────────────────


def test_wait_for_services_ready(fake_run_cmd, unified_profile):
    run_cmd = fake_run_cmd()
    assert asyncio.run(wait_for_services(run_cmd, unified_profile)) is True
    assert run_cmd.commands == ["docker compose -f docker-compose.unified.yml ps"]


def test_wait_for_services_timeout_dumps_logs(fake_run_cmd, unified_profile):
    run_cmd = fake_run_cmd({" ps": (0, PS_HEADER + "\n", "")})
    assert asyncio.run(wait_for_services(run_cmd, unified_profile)) is False
    assert run_cmd.commands[-1] == "docker compose -f docker-compose.unified.yml logs"
    assert run_cmd.commands.count("docker compose -f docker-compose.unified.yml ps") >= 2


def test_wait_for_services_failed_ps_is_not_ready(fake_run_cmd, unified_profile):
    run_cmd = fake_run_cmd({" ps": (1, "", "cannot connect to docker daemon")})
    assert asyncio.run(wait_for_services(run_cmd, unified_profile)) is False


def test_wait_for_services_dry_run(fake_run_cmd, unified_profile):
    run_cmd = fake_run_cmd({" ps": (0, "", "")})
    assert asyncio.run(wait_for_services(run_cmd, unified_profile, dry_run=True)) is True


# ── smoke_test ──────────────────────────────────────────────────────


def test_smoke_test_all_paths_probed(fake_run_cmd, unified_profile):
    probed = []

    async def probe(url):
        probed.append(url)
        return True

    failed = asyncio.run(smoke_test(fake_run_cmd(), unified_profile, "http://localhost:5000", probe=probe))
    assert failed == []
    assert probed == ["http://localhost:5000/api/users", "http://localhost:5000/"]


def test_smoke_test_failure_is_reported_with_backend_logs(fake_run_cmd, unified_profile):
    async def probe(url):
        return not url.endswith("/api/users")

    run_cmd = fake_run_cmd()
    failed = asyncio.run(smoke_test(run_cmd, unified_profile, "http://localhost:5000/", probe=probe))
    assert failed == ["/api/users"]
    assert run_cmd.commands == ["docker compose -f docker-compose.unified.yml logs backend"]


def test_smoke_test_dry_run_skips_probes(fake_run_cmd, unified_profile):
    async def probe(url):
        raise AssertionError("probe must not run in dry-run")

    failed = asyncio.run(smoke_test(fake_run_cmd(), unified_profile, "http://localhost:5000", probe=probe, dry_run=True))
    assert failed == []
