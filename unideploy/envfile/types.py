"""Typed application configuration built from an environment file."""

from dataclasses import dataclass, field

from unideploy.envfile.templates import SECRET_PLACEHOLDERS

# env key -> EnvConfig attribute
KEY_MAP = {
    "FLASK_RUN_HOST": "host",
    "FLASK_RUN_PORT": "port",
    "REDIS_PORT": "redis_port",
    "SECRET_KEY": "secret_key",
    "SQLALCHEMY_DATABASE_URI": "database_uri",
    "FRONTEND_URL": "frontend_url",
    "FLASK_ENV": "mode",
    "FLASK_DEBUG": "debug",
    "FLASK_APP": "app",
}

REQUIRED_KEYS = tuple(KEY_MAP)

PORT_KEYS = ("FLASK_RUN_PORT", "REDIS_PORT")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_port(key, value) -> int:
    """Parse a TCP port (plain ASCII digits), raising ValueError naming *key* when malformed."""
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()) or not 1 <= int(text) <= 65535:
        raise ValueError(f"{key} must be an integer port (1-65535), got {value!r}")
    return int(text)


def parse_flag(key, value) -> bool:
    normalized = str(value).strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ValueError(f"{key} must be a boolean flag (0/1/true/false), got {value!r}")


@dataclass
class EnvConfig:
    """Validated application configuration.

    Only the keys listed in ``KEY_MAP`` are interpreted; anything else in the
    env file is carried through ``extra`` untouched.
    """

    host: str
    port: int
    redis_port: int
    secret_key: str
    database_uri: str
    frontend_url: str
    mode: str
    debug: bool
    app: str
    extra: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, env: dict) -> "EnvConfig":
        """Validate an env mapping and build an EnvConfig.

        Raises:
            ValueError: listing every missing required key, or naming the
                first malformed port / flag value.
        """
        missing = [key for key in REQUIRED_KEYS if not str(env.get(key, "")).strip()]
        if missing:
            raise ValueError(f"Missing required configuration keys: {', '.join(missing)}")

        values = {attr: str(env[key]).strip() for key, attr in KEY_MAP.items()}
        for key in PORT_KEYS:
            values[KEY_MAP[key]] = parse_port(key, env[key])
        values["debug"] = parse_flag("FLASK_DEBUG", env["FLASK_DEBUG"])

        extra = {k: v for k, v in env.items() if k not in KEY_MAP}
        return cls(**values, extra=extra)

    def to_dict(self) -> dict[str, str]:
        """Render back to the env-file string mapping."""
        env = {}
        for key, attr in KEY_MAP.items():
            value = getattr(self, attr)
            if isinstance(value, bool):
                value = "1" if value else "0"
            env[key] = str(value)
        env.update(self.extra)
        return env

    @property
    def uses_placeholder_secret(self) -> bool:
        return self.secret_key in SECRET_PLACEHOLDERS
