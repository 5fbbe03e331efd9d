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
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Ledger program
    PROGRAM_ID = data.get("PROGRAM_ID", "Fg6PaFpoGXkYsidMpWTK6W2BeZ7FEfcYkg476zPFsLnS")

    # Rent schedule for allocated accounts
    RENT_LAMPORTS_PER_BYTE_YEAR = data.get("RENT_LAMPORTS_PER_BYTE_YEAR", 3480)
    RENT_EXEMPTION_THRESHOLD = data.get("RENT_EXEMPTION_THRESHOLD", 2.0)

    # Airdrop faucet
    FAUCET_ENABLED = bool(data.get("FAUCET_ENABLED", True))
    FAUCET_MAX_LAMPORTS = data.get("FAUCET_MAX_LAMPORTS", 5_000_000_000)  # 5 SOL

    # Invoice account audit
    AUDIT_ENABLED = bool(data.get("AUDIT_ENABLED", True))
    AUDIT_INTERVAL_SECONDS = data.get("AUDIT_INTERVAL_SECONDS", 3600)  # Hourly
