import os

from config import optional_int

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

MATCH_THRESHOLD = float(os.getenv("MATCH_THRESHOLD", "0.95"))
DUPLICATE_WINDOW_MINUTES = int(os.getenv("DUPLICATE_WINDOW_MINUTES", "5"))
EMBEDDING_DIM = optional_int("EMBEDDING_DIM")

HISTORY_DAYS = int(os.getenv("HISTORY_DAYS", "30"))
