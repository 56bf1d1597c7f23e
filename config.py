"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "paycycle")
DB_USER: str = os.getenv("DB_USER", "paycycle_user")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ── Salary / cycle defaults ───────────────────────────────
DEFAULT_CYCLE_START_RULE: str = os.getenv("DEFAULT_CYCLE_START_RULE", "salary_day")
NEXT_PAYDAYS_COUNT: int = int(os.getenv("NEXT_PAYDAYS_COUNT", "6"))
PAST_PAYDAYS_COUNT: int = int(os.getenv("PAST_PAYDAYS_COUNT", "3"))
