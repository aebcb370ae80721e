"""Shared pytest fixtures for all test modules."""

import dataclasses
import os
import subprocess
import sys

import pytest

from unideploy.deploy import BUILTIN_PROFILES

PROJECT_ROOT = os.path.normpath(os.path.join(os.path.dirname(__file__), ".."))

PS_HEADER = "NAME                      IMAGE          COMMAND   SERVICE   CREATED   STATUS         PORTS"
PS_UP = (
    PS_HEADER
    + "\nproj-backend-1   proj-backend   \"flask run\"   backend   5s ago   Up 4 seconds   0.0.0.0:5000->5000/tcp"
    + "\nproj-redis-1     redis:7        \"redis\"       redis     5s ago   Up 4 seconds   0.0.0.0:6379->6379/tcp"
)


@pytest.fixture(scope="session")
def project_root():
    """Absolute path to the repository root."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def run_cli(project_root):
    """Return a callable that invokes the unideploy CLI as a subprocess."""

    def _run(*args):
        env = dict(os.environ)
        env.pop("NO_COLOR", None)
        result = subprocess.run(
            [sys.executable, "-m", "unideploy.unideploy", *args],
            capture_output=True,
            text=True,
            cwd=project_root,
            env=env,
        )
        return result.returncode, result.stdout, result.stderr

    return _run


# ── Unit-test fixtures ──────────────────────────────────────────────


class FakeRunCmd:
    """Recording stand-in for run_cmd.

    ``results`` maps a substring of the command to the (rc, stdout, stderr)
    it returns; the first matching entry wins. Unmatched ``ps`` commands
    report running services, everything else succeeds with no output.
    """

    def __init__(self, results=None):
        self.results = results or {}
        self.calls = []

    async def __call__(self, command, stream=True, timeout=None, log_output=False, cwd=None):
        self.calls.append((command, cwd))
        for needle, result in self.results.items():
            if needle in command:
                return result
        if command.endswith(" ps"):
            return 0, PS_UP, ""
        return 0, "", ""

    @property
    def commands(self):
        return [command for command, _ in self.calls]

    def index(self, needle):
        """Position of the first command containing *needle*, or -1."""
        for i, command in enumerate(self.commands):
            if needle in command:
                return i
        return -1


class FakeWriteFile:
    def __init__(self, project_dir):
        self.project_dir = project_dir
        self.writes = []

    async def __call__(self, path, content):
        self.writes.append(path)
        with open(os.path.join(self.project_dir, path), "w") as f:
            f.write(content)


@pytest.fixture
def fake_run_cmd():
    """Factory for FakeRunCmd instances."""
    return FakeRunCmd


@pytest.fixture
def fake_write_file():
    return FakeWriteFile


@pytest.fixture
def project_dir(tmp_path):
    """A minimal unified-app project: compose markers plus frontend/ and backend/."""
    root = tmp_path / "proj"
    (root / "frontend").mkdir(parents=True)
    (root / "backend").mkdir()
    (root / "docker-compose.yml").write_text("services: {}\n")
    (root / "docker-compose.unified.yml").write_text("services: {}\n")
    return str(root)


def _fast(profile):
    return dataclasses.replace(
        profile,
        readiness_timeout=0.2,
        smoke_timeout=0.05,
        poll_interval=0.01,
        poll_max_interval=0.02,
    )


@pytest.fixture
def unified_profile():
    """Built-in unified profile with short poll timings."""
    return _fast(BUILTIN_PROFILES["unified"])


@pytest.fixture
def production_profile():
    """Built-in production profile with short poll timings."""
    return _fast(BUILTIN_PROFILES["production"])
