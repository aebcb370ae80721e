"""Environment file codec, templates, and typed configuration."""

from unideploy.envfile.parser import parse_env, read_env_file, render_env
from unideploy.envfile.templates import (
    PRODUCTION_TEMPLATE,
    SECRET_PLACEHOLDERS,
    UNIFIED_TEMPLATE,
)
from unideploy.envfile.types import REQUIRED_KEYS, EnvConfig, parse_port

__all__ = [
    "EnvConfig",
    "PRODUCTION_TEMPLATE",
    "REQUIRED_KEYS",
    "SECRET_PLACEHOLDERS",
    "UNIFIED_TEMPLATE",
    "parse_env",
    "parse_port",
    "read_env_file",
    "render_env",
]
