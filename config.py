import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def as_bool(value) -> bool:
    # YAML booleans pass through; quoted or env-style strings are parsed
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./caster_auth.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = as_bool(data.get("CORS_ALLOW_CREDENTIALS", True))
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Token codec
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_TTL_MINUTES = int(data.get("ACCESS_TOKEN_TTL_MINUTES", 15))
    TWO_FACTOR_TOKEN_TTL_MINUTES = int(data.get("TWO_FACTOR_TOKEN_TTL_MINUTES", 5))

    # Refresh tokens
    REFRESH_TOKEN_TTL_DAYS = int(data.get("REFRESH_TOKEN_TTL_DAYS", 7))
    REFRESH_TOKEN_RETENTION = int(data.get("REFRESH_TOKEN_RETENTION", 4))
    REFRESH_COOKIE_NAME = data.get("REFRESH_COOKIE_NAME", "refresh_token")
    REFRESH_COOKIE_PATH = data.get("REFRESH_COOKIE_PATH", "/auth")
    REFRESH_COOKIE_SECURE = as_bool(data.get("REFRESH_COOKIE_SECURE", False))

    # Two-factor
    TOTP_ISSUER = data.get("TOTP_ISSUER", "Caster")
    TOTP_VALID_WINDOW = int(data.get("TOTP_VALID_WINDOW", 1))
    BACKUP_CODE_COUNT = int(data.get("BACKUP_CODE_COUNT", 10))

    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")
