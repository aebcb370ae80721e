"""Database schema bootstrap."""

from unideploy.db.bootstrap import create_schema, resolve_ref

__all__ = ["create_schema", "resolve_ref"]
