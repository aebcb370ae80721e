"""Schema bootstrap: build the application context and create all tables.

Runs inside the backend directory so the backend's own modules import::

    python -m unideploy.db.bootstrap --factory app_factory:create_app --db db:db

``create_all`` only creates missing tables, so re-running is safe.
"""

import argparse
import importlib
import logging
import os
import sys

from unideploy.logging_setup import setup_cli_logging

logger = logging.getLogger(__name__)

DEFAULT_FACTORY = "app_factory:create_app"
DEFAULT_DB = "db:db"


def resolve_ref(ref):
    """Resolve ``"package.module:attr.path"`` to the referenced object."""
    module_name, sep, attr_path = ref.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Expected 'module:attribute', got {ref!r}")
    obj = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        obj = getattr(obj, attr)
    return obj


def create_schema(factory_ref=DEFAULT_FACTORY, db_ref=DEFAULT_DB, app_dir=None):
    """Call the app factory and run ``db.create_all()`` inside its app context.

    The factory may return the app alone or an ``(app, queue, ...)`` tuple.
    """
    if app_dir is not None:
        app_dir = os.path.abspath(app_dir)
        if app_dir not in sys.path:
            sys.path.insert(0, app_dir)

    factory = resolve_ref(factory_ref)
    result = factory()
    app = result[0] if isinstance(result, tuple) else result
    db = resolve_ref(db_ref)

    with app.app_context():
        db.create_all()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create all database tables if absent")
    parser.add_argument("--factory", default=DEFAULT_FACTORY, help=f"App factory reference (default: {DEFAULT_FACTORY})")
    parser.add_argument("--db", default=DEFAULT_DB, help=f"SQLAlchemy db object reference (default: {DEFAULT_DB})")
    parser.add_argument("--app-dir", default=os.getcwd(), help="Directory containing the backend modules (default: cwd)")
    args = parser.parse_args(argv)

    if not logging.getLogger().handlers:
        setup_cli_logging()

    try:
        create_schema(args.factory, args.db, app_dir=args.app_dir)
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        return 1
    logger.info("Database initialized successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
