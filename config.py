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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./pharmacy.db")
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Invoice numbering (e.g. INV000042)
    INVOICE_NUMBER_PREFIX = data.get("INVOICE_NUMBER_PREFIX", "INV")
    INVOICE_NUMBER_WIDTH = int(data.get("INVOICE_NUMBER_WIDTH", 6))

    # Editing a cancelled invoice re-activates it instead of being rejected
    REACTIVATE_CANCELLED_ON_EDIT = bool(data.get("REACTIVATE_CANCELLED_ON_EDIT", True))

    # Stock alerts
    STOCK_EXPIRY_ALERT_DAYS = int(data.get("STOCK_EXPIRY_ALERT_DAYS", 30))

    # Printed invoice
    COMPANY_NAME = data.get("COMPANY_NAME", "MEDICAL INVENTORY SYSTEM")
    COMPANY_ADDRESS = data.get("COMPANY_ADDRESS", "")
    CURRENCY_SYMBOL = data.get("CURRENCY_SYMBOL", "Rs.")
