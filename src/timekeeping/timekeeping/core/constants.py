"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "America/New_York"

DEFAULT_LOW_ACCURACY_METERS = 100.0
DEFAULT_SHORT_SESSION_MINUTES = 5
DEFAULT_LONG_SESSION_MINUTES = 12 * 60

DEFAULT_UNLOCK_REASON_MIN_LENGTH = 3
DEFAULT_ELIGIBLE_POSITION_KEYWORDS = ("office",)

# Upper bound for a single day's adjusted value.
MAX_DAILY_MINUTES = 24 * 60

MAX_LATITUDE = 90.0
MAX_LONGITUDE = 180.0
