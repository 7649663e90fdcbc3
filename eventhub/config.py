import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./eventhub.db")

# Session cookie signing - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "eventhub_session")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", "86400"))  # 1 day
# Only set to true behind HTTPS, otherwise browsers drop the cookie
SESSION_HTTPS_ONLY = os.getenv("SESSION_HTTPS_ONLY", "false").lower() == "true"

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
