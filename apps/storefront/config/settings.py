import os

from dotenv import load_dotenv

load_dotenv()


def is_enabled(flag: str, default: bool = False) -> bool:
    return os.getenv(flag, str(default)).lower() == "true"


DATABASE_URL = os.getenv("DATABASE_URL", "").rstrip("/")
DATABASE_SCHEMA = os.getenv("DATABASE_SCHEMA") or "public"
DATABASE_API_KEY = os.getenv("DATABASE_API_KEY", "")
NEON_AUTH_URL = os.getenv("NEON_AUTH_URL", "")

STOREFRONT_VERSION = os.getenv("STOREFRONT_VERSION", "0.1.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SETTINGS = {
    "require_auth": is_enabled("REQUIRE_AUTH", False),
    "loyalty_enabled": is_enabled("LOYALTY_ENABLED", True),
}
