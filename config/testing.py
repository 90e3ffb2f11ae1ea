import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "homecare_test_db"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TIMEZONE = "America/New_York"
LOW_ACCURACY_METERS = 100.0
SHORT_SESSION_MINUTES = 5
LONG_SESSION_MINUTES = 720
UNLOCK_REASON_MIN_LENGTH = 3
ELIGIBLE_POSITION_KEYWORDS = ("office",)

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
