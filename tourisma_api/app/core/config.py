"""
Configuration for the Tourisma API.

Settings are read from environment variables once, when this module is
imported.  Every field has a default suitable for a local demo; override
them in the environment (or a process manager) before the application
starts.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Tourisma API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional log file; console logging is always enabled.
    log_file: str = os.getenv("LOG_FILE", "")

    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    # Platform commission applied at read time to non-cancelled bookings.
    commission_rate: float = float(os.getenv("COMMISSION_RATE", "0.15"))
    # Children pay this fraction of the adult price (rounded half-up).
    child_price_ratio: float = float(os.getenv("CHILD_PRICE_RATIO", "0.5"))

    # Reserved partner row representing platform support staff.
    support_partner_id: str = os.getenv("SUPPORT_PARTNER_ID", "p0")

    # Load the demo fixtures into the store when the application starts.
    seed_fixtures: bool = _env_flag("SEED_FIXTURES", "true")

    # Terminal client settings.
    api_url: str = os.getenv("TOURISMA_API_URL", "http://127.0.0.1:8000")
    session_dir: str = os.getenv("SESSION_DIR", os.path.join(os.path.expanduser("~"), ".tourisma"))
    unread_poll_seconds: int = int(os.getenv("UNREAD_POLL_SECONDS", "5"))


settings = Settings()
