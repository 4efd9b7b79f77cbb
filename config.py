import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./eventguard.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")

    # Event access tokens
    EVENT_TOKEN_SECRET = data.get("EVENT_TOKEN_SECRET", "dev-event-token-secret")
    EVENT_TOKEN_TTL_HOURS = int(data.get("EVENT_TOKEN_TTL_HOURS", 24))

    # Composed checks (fraud check, registration guard)
    CHECK_TIMEOUT_SECONDS = float(data.get("CHECK_TIMEOUT_SECONDS", 5.0))
    RISK_POLICY = data.get("RISK_POLICY", {}) or {}

    # Threat intelligence feeds
    MISP_BASE_URL = data.get("MISP_BASE_URL", "")
    MISP_API_KEY = data.get("MISP_API_KEY", "")
    OTX_BASE_URL = data.get("OTX_BASE_URL", "https://otx.alienvault.com/api/v1")
    OTX_API_KEY = data.get("OTX_API_KEY", "")
    THREATCROWD_BASE_URL = data.get(
        "THREATCROWD_BASE_URL", "https://www.threatcrowd.org/api/v2"
    )
    THREAT_FEED_TIMEOUT_SECONDS = float(data.get("THREAT_FEED_TIMEOUT_SECONDS", 10.0))
