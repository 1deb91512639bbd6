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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./billing.db")
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", False))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))

    # Billing calendar ("today" for the generation horizon is taken in this zone)
    BILLING_TIMEZONE = data.get("BILLING_TIMEZONE", "Asia/Manila")

    # Invoice numbering: OFC00000219, OFC00000220, ...
    INVOICE_NUMBER_PREFIX = data.get("INVOICE_NUMBER_PREFIX", "OFC")
    INVOICE_NUMBER_WIDTH = data.get("INVOICE_NUMBER_WIDTH", 8)
    INVOICE_NUMBER_SEED = data.get("INVOICE_NUMBER_SEED", 219)

    # Contract numbering: VO-SA-2025-0001, ...
    CONTRACT_NUMBER_PREFIX = data.get("CONTRACT_NUMBER_PREFIX", "VO-SA")
    CONTRACT_NUMBER_WIDTH = data.get("CONTRACT_NUMBER_WIDTH", 4)

    # Re-read and retry when a concurrent request took the same number
    NUMBER_ALLOCATION_MAX_RETRIES = data.get("NUMBER_ALLOCATION_MAX_RETRIES", 5)

    # Bulk client import runs in one transaction bounded by this timeout
    BULK_TRANSACTION_TIMEOUT_SECONDS = data.get("BULK_TRANSACTION_TIMEOUT_SECONDS", 300)

    # Rendered invoice documents
    INVOICE_STORAGE_DIR = data.get("INVOICE_STORAGE_DIR", os.path.join(ROOT_PATH, "storage"))

    INVOICE_NOTIFICATION_WEBHOOK = data.get("INVOICE_NOTIFICATION_WEBHOOK", None)
