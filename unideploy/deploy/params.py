"""Deploy parameters dataclass."""

import dataclasses
from dataclasses import dataclass, field

from unideploy.deploy.profile import BUILTIN_PROFILES, DeployProfile


def _default_profile():
    profile = BUILTIN_PROFILES["unified"]
    return dataclasses.replace(
        profile,
        env_template=dict(profile.env_template),
        smoke_paths=list(profile.smoke_paths),
        next_steps=list(profile.next_steps),
    )


@dataclass
class DeployParams:
    """All parameters needed for a single deployment."""

    project_dir: str = "."
    profile: DeployProfile = field(default_factory=_default_profile)
    python: str = "python3"  # interpreter that runs the schema bootstrap, from PATH inside backend_dir
    host: str = "localhost"  # hostname used for probes and the summary
    dry_run: bool = False
