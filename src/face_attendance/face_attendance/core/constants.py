"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_MATCH_THRESHOLD = 0.95
DEFAULT_DUPLICATE_WINDOW_MINUTES = 5
DEFAULT_HISTORY_DAYS = 30

MILLIS_PER_MINUTE = 60 * 1000
MILLIS_PER_DAY = 24 * 60 * MILLIS_PER_MINUTE

# Scores closer than this to the best score are treated as ties.
SIMILARITY_EPSILON = 1e-9

SERVER_CONFIDENCE = 1.0

# Column sizes in database/schema.sql
MAX_EVENT_ID_LENGTH = 64
MAX_DEVICE_ID_LENGTH = 255
