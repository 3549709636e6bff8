import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./portal.db")
STORAGE_KEY_PREFIX = os.getenv("STORAGE_KEY_PREFIX", "hafedpoly_")

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["http://localhost:5173"])

ADMIN_ID = os.getenv("ADMIN_ID", "admin")
ADMIN_NAME = os.getenv("ADMIN_NAME", "System Administrator")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@hafedpoly.edu.ng")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
ALLOW_LEGACY_PLAINTEXT_PASSWORDS = _get_bool(
    os.getenv("ALLOW_LEGACY_PLAINTEXT_PASSWORDS"),
    default=True,
)

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

POLL_INTERVAL_SECONDS = float(os.getenv("POLL_INTERVAL_SECONDS", "1.0"))
CHAT_SEND_DELAY_SECONDS = float(os.getenv("CHAT_SEND_DELAY_SECONDS", "1.0"))
CHAT_SENT_DISPLAY_SECONDS = float(os.getenv("CHAT_SENT_DISPLAY_SECONDS", "2.0"))

def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if APP_ENV.lower() == "production" and ADMIN_PASSWORD == "admin123":
        raise RuntimeError("ADMIN_PASSWORD must be set in production.")
