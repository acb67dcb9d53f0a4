import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module; anything unrecognised means development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "attendsync.config.production"

    if env in {"test", "testing"}:
        return "attendsync.config.testing"

    return "attendsync.config.development"
