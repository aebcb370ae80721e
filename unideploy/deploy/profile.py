"""Deployment profiles: built-in unified/production settings plus YAML overrides."""

import dataclasses
import os
from dataclasses import dataclass, field

import yaml

from unideploy.envfile.templates import PRODUCTION_TEMPLATE, UNIFIED_TEMPLATE

DEFAULT_CONFIG_FILE = "unideploy.yaml"

_BOOL_FIELDS = ("abort_on_missing_env", "force_remove_conflicts")
_LIST_FIELDS = ("smoke_paths", "next_steps")
_DURATION_FIELDS = ("readiness_timeout", "smoke_timeout", "poll_interval", "poll_max_interval")
_STR_FIELDS = (
    "marker_file",
    "compose_file",
    "env_file",
    "container_filter",
    "frontend_dir",
    "frontend_install_cmd",
    "frontend_build_cmd",
    "backend_dir",
    "backend_env_file",
    "instance_dir",
    "app_factory",
    "db_ref",
    "backend_service",
)


@dataclass
class DeployProfile:
    """Everything that differs between deployment variants.

    Paths are relative to the project directory; ``backend_env_file`` and
    ``instance_dir`` are relative to ``backend_dir``.
    """

    name: str
    marker_file: str = "docker-compose.unified.yml"
    compose_file: str = "docker-compose.unified.yml"
    env_file: str = ".env"
    env_template: dict[str, str] = field(default_factory=lambda: dict(UNIFIED_TEMPLATE))
    abort_on_missing_env: bool = False
    force_remove_conflicts: bool = False
    container_filter: str | None = None  # default: project directory name

    frontend_dir: str = "frontend"
    frontend_install_cmd: str = "npm install"
    frontend_build_cmd: str = "npm run build"

    backend_dir: str = "backend"
    backend_env_file: str = ".env"
    instance_dir: str = "instance"
    instance_mode: int = 0o755
    app_factory: str = "app_factory:create_app"
    db_ref: str = "db:db"
    backend_service: str = "backend"

    smoke_paths: list[str] = field(default_factory=lambda: ["/api/users", "/"])
    readiness_timeout: float = 120.0
    smoke_timeout: float = 30.0
    poll_interval: float = 1.0
    poll_max_interval: float = 10.0
    next_steps: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, name: str, d: dict) -> "DeployProfile":
        """Build a profile from a (post-merge) dict, rejecting unknown fields and wrong types."""
        known = {f.name for f in dataclasses.fields(cls)} - {"name"}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"Unknown field(s) in profile '{name}': {', '.join(unknown)}")

        values = dict(d)
        for key, value in values.items():
            if key in _BOOL_FIELDS and not isinstance(value, bool):
                raise ValueError(f"Profile '{name}': {key} must be true or false, got {value!r}")
            if key in _LIST_FIELDS and not (isinstance(value, list) and all(isinstance(v, str) for v in value)):
                raise ValueError(f"Profile '{name}': {key} must be a list of strings, got {value!r}")
            if key in _STR_FIELDS and not isinstance(value, str):
                if key == "container_filter" and value is None:
                    continue
                raise ValueError(f"Profile '{name}': {key} must be a string, got {value!r}")
        if "instance_mode" in values:
            values["instance_mode"] = _parse_mode(values["instance_mode"])
        if "env_template" in values:
            template = values["env_template"] or {}
            if not isinstance(template, dict):
                raise ValueError(f"Profile '{name}': env_template must be a mapping, got {template!r}")
            values["env_template"] = {str(k): str(v) for k, v in template.items()}
        for key in _DURATION_FIELDS:
            if key in values:
                value = values[key]
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ValueError(f"Profile '{name}': {key} must be a number of seconds, got {value!r}")
                values[key] = float(value)
                if values[key] <= 0:
                    raise ValueError(f"Profile '{name}': {key} must be positive")
        return cls(name=name, **values)

    def to_dict(self) -> dict:
        d = dataclasses.asdict(self)
        d.pop("name")
        return d

    def resolve_container_filter(self, project_dir) -> str:
        if self.container_filter:
            return self.container_filter
        return os.path.basename(os.path.abspath(project_dir))


def _parse_mode(value) -> int:
    """Accept an int (0o755 from YAML is read as 493) or an octal string like '755'."""
    if isinstance(value, bool):
        raise ValueError(f"instance_mode must be an octal permission string, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value), 8)
    except ValueError:
        raise ValueError(f"instance_mode must be an octal permission string, got {value!r}") from None


BUILTIN_PROFILES = {
    "unified": DeployProfile(
        name="unified",
        marker_file="docker-compose.yml",
        compose_file="docker-compose.unified.yml",
        env_file=".env",
        env_template=dict(UNIFIED_TEMPLATE),
    ),
    "production": DeployProfile(
        name="production",
        marker_file="docker-compose.unified.yml",
        compose_file="docker-compose.unified.yml",
        env_file=".env.production",
        env_template=dict(PRODUCTION_TEMPLATE),
        abort_on_missing_env=True,
        force_remove_conflicts=True,
        next_steps=[
            "Set up reverse proxy (nginx/Apache) to forward requests to localhost:{port}",
            "Configure SSL certificate with Let's Encrypt",
            "Set up domain DNS to point to this server",
            "Configure firewall to allow HTTP/HTTPS traffic",
        ],
    ),
}


def deep_merge(base, override):
    """Recursive dict merge. Override wins for scalars."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_overrides(config_path):
    """Load the ``profiles:`` mapping from a YAML config file."""
    if not os.path.isfile(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"{config_path}: expected a mapping at top level")
    profiles = config.get("profiles") or {}
    if not isinstance(profiles, dict):
        raise ValueError(f"{config_path}: 'profiles' must be a mapping")
    return profiles


def load_profile(name, project_dir=".", config_path=None):
    """Resolve a profile by name, deep-merging overrides from YAML.

    When *config_path* is None, ``<project_dir>/unideploy.yaml`` is used if it
    exists. Profiles defined only in YAML start from ``DeployProfile`` defaults.
    """
    if config_path is None:
        candidate = os.path.join(project_dir, DEFAULT_CONFIG_FILE)
        overrides = load_overrides(candidate) if os.path.isfile(candidate) else {}
    else:
        overrides = load_overrides(config_path)

    available = sorted(set(BUILTIN_PROFILES) | set(overrides))
    if name not in available:
        raise ValueError(f"Unknown profile '{name}'. Available profiles: {', '.join(available)}")

    base = BUILTIN_PROFILES[name].to_dict() if name in BUILTIN_PROFILES else {}
    override = overrides.get(name) or {}
    if not isinstance(override, dict):
        raise ValueError(f"Profile '{name}' must be a mapping")
    return DeployProfile.from_dict(name, deep_merge(base, override))
