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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ACCESS_TOKEN_TTL_MINUTES = int(data.get("ACCESS_TOKEN_TTL_MINUTES", 60))

    # Unconditional superadmins, rotated through deployment config
    SUPERADMIN_EMAILS = data.get("SUPERADMIN_EMAILS", [])
    SUPERADMIN_IDENTITY_IDS = data.get("SUPERADMIN_IDENTITY_IDS", [])

    # Test role override only ever applies when this is set
    NON_PRODUCTION = bool(data.get("NON_PRODUCTION", False))
    ALLOW_ROLE_SELECTION = bool(data.get("ALLOW_ROLE_SELECTION", False))

    TEMP_CREDENTIAL_PREFIX = data.get("TEMP_CREDENTIAL_PREFIX", "Ptl!")
    PORTAL_URL = data.get("PORTAL_URL", "http://localhost:5173")
    RECOVERY_TOKEN_TTL_MINUTES = int(data.get("RECOVERY_TOKEN_TTL_MINUTES", 60))
    ROLE_CACHE_TTL_SECONDS = int(data.get("ROLE_CACHE_TTL_SECONDS", 300))
