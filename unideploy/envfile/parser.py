"""Environment file codec: line-oriented KEY=VALUE text."""

import io
import os

from dotenv import dotenv_values


def parse_env(text, source="<string>"):
    """Parse KEY=VALUE lines into an ordered dict.

    Parsing is done by python-dotenv without variable interpolation, so
    comments, ``export`` prefixes and quoting follow its rules and values
    containing ``$`` are kept verbatim. Later duplicates override earlier ones.

    Raises:
        ValueError: on a key with no ``=`` (``KEY`` alone on its line).
    """
    env = dotenv_values(stream=io.StringIO(text), interpolate=False)
    bare = [key for key, value in env.items() if value is None]
    if bare:
        raise ValueError(f"{source}: expected KEY=VALUE, got bare key(s): {', '.join(bare)}")
    return dict(env)


def render_env(env):
    """Render a mapping as KEY=VALUE lines (insertion order, trailing newline)."""
    return "".join(f"{key}={value}\n" for key, value in env.items())


def read_env_file(path):
    """Read and parse an env file."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Environment file not found: {path}")
    with open(path) as f:
        return parse_env(f.read(), source=path)
