import os

from config import optional_int

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Apply database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Face match and duplicate guard
MATCH_THRESHOLD = float(os.getenv("MATCH_THRESHOLD", "0.95"))
DUPLICATE_WINDOW_MINUTES = int(os.getenv("DUPLICATE_WINDOW_MINUTES", "5"))
# Unset: inferred from the stored embeddings
EMBEDDING_DIM = optional_int("EMBEDDING_DIM")

HISTORY_DAYS = int(os.getenv("HISTORY_DAYS", "30"))
