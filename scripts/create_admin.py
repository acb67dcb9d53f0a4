from __future__ import annotations

import argparse
import getpass
import importlib

from dotenv import load_dotenv

from attendsync.config import get_settings_module
from attendsync.core.constants import MIN_PASSWORD_LENGTH
from attendsync.database.bootstrap import ensure_admin


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the first administrator account.")
    parser.add_argument("email")
    parser.add_argument("--name", default="Administrator")
    args = parser.parse_args()

    password = getpass.getpass("Password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise SystemExit(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    user_id = ensure_admin(dict(settings.DB_CONFIG), email=args.email, password=password, name=args.name)
    print(f"OK: admin user_id={user_id}")


if __name__ == "__main__":
    main()
