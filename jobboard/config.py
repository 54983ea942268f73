# ========================================
# jobboard/config.py
# ========================================

import os
from pathlib import Path

from dotenv import load_dotenv

# .env lives next to the jobboard/ package
env_path = Path(__file__).resolve().parent.parent / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)
else:
    load_dotenv()


def _bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Database
MONGO_URI = os.getenv("MONGO_URI")
DATABASE_NAME = os.getenv("DATABASE_NAME", "jobboard")

# Auth (tokens are issued elsewhere; we only verify them)
SECRET_KEY = os.getenv("SECRET_KEY", "super_secret_random_key_CHANGE_THIS")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# HTTP
ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR")

# Lifecycle
MAX_CATEGORY_DEPTH = int(os.getenv("MAX_CATEGORY_DEPTH", "3"))
NOTIFICATIONS_ENABLED = _bool("NOTIFICATIONS_ENABLED", True)
