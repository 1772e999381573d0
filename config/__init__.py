import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module; development is the default.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def optional_int(name: str):
    """Read an int env var; unset, empty or "0" means None."""
    value = os.getenv(name, "").strip()
    return int(value) or None if value else None
