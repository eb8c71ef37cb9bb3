import os


def _as_bool(value, default=False):
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _as_list(value, default):
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    # Security
    SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret_key_change_in_production")

    # Operational store (pharmacies, audit, traces, memberships)
    DATABASE_URL = os.getenv("DATABASE_URL")

    # Reference registry (persons, legal entities, cities, states) - read-only
    REFERENCE_DATABASE_URL = os.getenv("REFERENCE_DATABASE_URL")

    # Pool / timeouts applied to both engines
    DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "10"))
    DB_CONNECT_TIMEOUT = int(os.getenv("DB_CONNECT_TIMEOUT", "5"))
    DB_STATEMENT_TIMEOUT_MS = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "15000"))

    # Request trace (best-effort)
    TRACE_ROUTES = _as_list(os.getenv("TRACE_ROUTES"), ["/api/pharmacies"])
    TRACE_MAX_PENDING = int(os.getenv("TRACE_MAX_PENDING", "100"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    RATELIMIT_ENABLED = _as_bool(os.getenv("RATELIMIT_ENABLED"), default=True)

config = Config()
