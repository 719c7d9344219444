import os
import warnings
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip().lower() for item in value.split(",") if item.strip()]


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


_secret_key = os.getenv("SECRET_KEY")
if not _secret_key:
    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    _secret_key = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"


class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "development")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./nail_studio.db")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    secret_key: str = _secret_key
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    # accounts that are promoted to approved admins when they register
    admin_emails: List[str] = _csv(os.getenv("ADMIN_EMAILS"))

    studio_name: str = os.getenv("STUDIO_NAME", "Nail Studio")

    availability_max_retries: int = int(os.getenv("AVAILABILITY_MAX_RETRIES", "3"))
    calendar_max_range_days: int = int(os.getenv("CALENDAR_MAX_RANGE_DAYS", "62"))
    enforce_status_transitions: bool = _flag("ENFORCE_STATUS_TRANSITIONS")

    loyalty_points_per_dollar: int = int(os.getenv("LOYALTY_POINTS_PER_DOLLAR", "10"))
    loyalty_completion_bonus: int = int(os.getenv("LOYALTY_COMPLETION_BONUS", "50"))


settings = Settings()
