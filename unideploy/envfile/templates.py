"""Built-in environment file templates."""

DEV_SECRET_PLACEHOLDER = "dev-secret-key-change-in-production"
PRODUCTION_SECRET_PLACEHOLDER = "your-production-secret-key-change-this"

SECRET_PLACEHOLDERS = frozenset({DEV_SECRET_PLACEHOLDER, PRODUCTION_SECRET_PLACEHOLDER})

UNIFIED_TEMPLATE = {
    "FLASK_RUN_HOST": "0.0.0.0",
    "FLASK_RUN_PORT": "5000",
    "REDIS_PORT": "6379",
    "SECRET_KEY": DEV_SECRET_PLACEHOLDER,
    "SQLALCHEMY_DATABASE_URI": "sqlite:///instance/users.db",
    "FRONTEND_URL": "http://localhost:5000",
    "FLASK_ENV": "development",
    "FLASK_DEBUG": "1",
    "FLASK_APP": "app.py",
}

PRODUCTION_TEMPLATE = {
    "FLASK_RUN_HOST": "0.0.0.0",
    "FLASK_RUN_PORT": "5000",
    "REDIS_PORT": "6379",
    "SECRET_KEY": PRODUCTION_SECRET_PLACEHOLDER,
    "SQLALCHEMY_DATABASE_URI": "sqlite:///instance/users.db",
    "FRONTEND_URL": "https://boards.norgayhrconsulting.com.au",
    "FLASK_ENV": "production",
    "FLASK_DEBUG": "0",
    "FLASK_APP": "app.py",
}
