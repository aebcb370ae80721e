"""Deploy library: profiles, compose commands, steps, deploy orchestration."""

from unideploy.deploy.params import DeployParams
from unideploy.deploy.profile import (
    BUILTIN_PROFILES,
    DeployProfile,
    deep_merge,
    load_profile,
)
from unideploy.deploy.compose import (
    compose_cmd,
    services_up,
)
from unideploy.deploy.health import http_probe, poll_until
from unideploy.deploy.orchestrate import (
    run_deploy,
    run_teardown,
    deploy,
    teardown,
)

__all__ = [
    "BUILTIN_PROFILES",
    "DeployParams",
    "DeployProfile",
    "deep_merge",
    "load_profile",
    "compose_cmd",
    "services_up",
    "http_probe",
    "poll_until",
    "run_deploy",
    "run_teardown",
    "deploy",
    "teardown",
]
