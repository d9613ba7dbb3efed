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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./finai.db")
    CREATE_TABLES_ON_STARTUP = bool(data.get("CREATE_TABLES_ON_STARTUP", False))
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    APP_URL = data.get("APP_URL", "http://localhost:3000")

    # Session cookie
    SESSION_SECRET = data.get("SESSION_SECRET", "dev-session-secret-change-in-production")
    SESSION_MAX_AGE = int(data.get("SESSION_MAX_AGE", 604800))  # 7 days
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "finai_session")
    SESSION_COOKIE_SECURE = bool(data.get("SESSION_COOKIE_SECURE", True))

    # 64 hex characters (32 bytes); required, checked at startup
    TOKEN_ENCRYPTION_KEY = data.get("TOKEN_ENCRYPTION_KEY", "")

    # Email (Resend); without an API key mail is only logged
    EMAIL_FROM = data.get("EMAIL_FROM", "finai <no-reply@localhost>")
    RESEND_API_KEY = data.get("RESEND_API_KEY", "")

    # OAuth
    GITHUB_CLIENT_ID = data.get("GITHUB_CLIENT_ID", "")
    GITHUB_CLIENT_SECRET = data.get("GITHUB_CLIENT_SECRET", "")
    GOOGLE_CLIENT_ID = data.get("GOOGLE_CLIENT_ID", "")
    GOOGLE_CLIENT_SECRET = data.get("GOOGLE_CLIENT_SECRET", "")

    # Bank aggregator (Plaid)
    PLAID_ENV = data.get("PLAID_ENV", "sandbox")
    PLAID_CLIENT_ID = data.get("PLAID_CLIENT_ID", "")
    PLAID_SECRET = data.get("PLAID_SECRET", "")
