import os
import yaml

CONFIG_FILE_PATH = os.environ.get(
    "GATEPASS_CONFIG", os.path.join(os.getcwd(), "env.yaml")
)

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./gatepass.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")

    # Invitation codes
    QR_PREFIX = data.get("QR_PREFIX", "GATEPASS")
    SHORT_CODE_MAX_ATTEMPTS = int(data.get("SHORT_CODE_MAX_ATTEMPTS", 5))

    # Admission retries
    ADMIT_MAX_ATTEMPTS = int(data.get("ADMIT_MAX_ATTEMPTS", 3))
    STORE_RETRY_ATTEMPTS = int(data.get("STORE_RETRY_ATTEMPTS", 3))
    STORE_RETRY_BASE_DELAY = float(data.get("STORE_RETRY_BASE_DELAY", 0.2))
