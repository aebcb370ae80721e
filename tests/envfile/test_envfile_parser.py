"""Unit tests for the KEY=VALUE env file codec."""

import pytest

from unideploy.envfile import UNIFIED_TEMPLATE, parse_env, read_env_file, render_env

# ── parse_env ───────────────────────────────────────────────────────


def test_parse_basic_pairs():
    env = parse_env("FLASK_RUN_HOST=0.0.0.0\nFLASK_RUN_PORT=5000\n")
    assert env == {"FLASK_RUN_HOST": "0.0.0.0", "FLASK_RUN_PORT": "5000"}


def test_parse_skips_blank_lines_and_comments():
    text = "# generated\n\n  # indented comment\nA=1\n\nB=2\n"
    assert parse_env(text) == {"A": "1", "B": "2"}


def test_parse_strips_export_and_whitespace():
    assert parse_env("export  SECRET_KEY = abc123 \n") == {"SECRET_KEY": "abc123"}


def test_parse_unwraps_quotes():
    env = parse_env("A=\"quoted value\"\nB='single'\n")
    assert env == {"A": "quoted value", "B": "single"}


def test_parse_does_not_interpolate():
    env = parse_env("SECRET_KEY=abc${HOME}def$USER\n")
    assert env == {"SECRET_KEY": "abc${HOME}def$USER"}


def test_parse_splits_on_first_equals():
    env = parse_env("SQLALCHEMY_DATABASE_URI=postgresql://u:p@db/app?sslmode=require\n")
    assert env["SQLALCHEMY_DATABASE_URI"] == "postgresql://u:p@db/app?sslmode=require"


def test_parse_empty_value_allowed():
    assert parse_env("EMPTY=\n") == {"EMPTY": ""}


def test_parse_later_duplicate_wins():
    assert parse_env("A=1\nA=2\n") == {"A": "2"}


def test_parse_preserves_order():
    env = parse_env("Z=1\nA=2\nM=3\n")
    assert list(env) == ["Z", "A", "M"]


def test_parse_bare_key_raises_with_source():
    with pytest.raises(ValueError, match=r"\.env: expected KEY=VALUE.*NOT_A_PAIR"):
        parse_env("A=1\n# ok\nNOT_A_PAIR\n", source=".env")


# ── render_env / read_env_file ──────────────────────────────────────


def test_render_template_matches_shell_heredoc():
    expected = (
        "FLASK_RUN_HOST=0.0.0.0\n"
        "FLASK_RUN_PORT=5000\n"
        "REDIS_PORT=6379\n"
        "SECRET_KEY=dev-secret-key-change-in-production\n"
        "SQLALCHEMY_DATABASE_URI=sqlite:///instance/users.db\n"
        "FRONTEND_URL=http://localhost:5000\n"
        "FLASK_ENV=development\n"
        "FLASK_DEBUG=1\n"
        "FLASK_APP=app.py\n"
    )
    assert render_env(UNIFIED_TEMPLATE) == expected


def test_render_then_parse_keeps_template():
    assert parse_env(render_env(UNIFIED_TEMPLATE)) == UNIFIED_TEMPLATE


def test_read_env_file(tmp_path):
    path = tmp_path / ".env"
    path.write_text("A=1\n")
    assert read_env_file(str(path)) == {"A": "1"}


def test_read_env_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError, match="Environment file not found"):
        read_env_file(str(tmp_path / ".env"))
