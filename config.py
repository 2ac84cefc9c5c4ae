import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./ledger.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    AUTH_DISABLED = bool(data.get("AUTH_DISABLED", False))
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Store contention: how many times one atomic unit is attempted before giving up
    STORE_MAX_ATTEMPTS = int(data.get("STORE_MAX_ATTEMPTS", 5))

    # Account bootstrap
    BOOTSTRAP_ADMIN_EMAIL = data.get("BOOTSTRAP_ADMIN_EMAIL", "")
    ADMIN_WELCOME_BONUS = int(data.get("ADMIN_WELCOME_BONUS", 5000))

    # Plan upgrades
    PLAN_DURATION_DAYS = int(data.get("PLAN_DURATION_DAYS", 30))
    PLAN_POINT_ALLOTMENTS = data.get(
        "PLAN_POINT_ALLOTMENTS",
        {
            "basic": 300,
            "pro": 1290,
            "elite": 5000,
            "e-commerce": 2000,
        },
    )

    # Ledger reconciliation worker
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = int(data.get("RECONCILIATION_INTERVAL_SECONDS", 86400))
