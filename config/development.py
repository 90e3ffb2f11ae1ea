import os

from config import env_keywords

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "homecare_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Agency-local zone used for week boundaries and day attribution
TIMEZONE = os.getenv("TIMEZONE", "America/New_York")

LOW_ACCURACY_METERS = float(os.getenv("LOW_ACCURACY_METERS", "100"))
SHORT_SESSION_MINUTES = int(os.getenv("SHORT_SESSION_MINUTES", "5"))
LONG_SESSION_MINUTES = int(os.getenv("LONG_SESSION_MINUTES", "720"))
UNLOCK_REASON_MIN_LENGTH = int(os.getenv("UNLOCK_REASON_MIN_LENGTH", "3"))
ELIGIBLE_POSITION_KEYWORDS = env_keywords("ELIGIBLE_POSITION_KEYWORDS", "office")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo employees on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
