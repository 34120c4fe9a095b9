import argparse
import getpass

from contactbook.config import configure_logging, get_settings
from contactbook.services.credentials import ConnectionProfile, resolve_profile, save_profile
from contactbook.services.errors import StoreError


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Test the database connection and optionally remember it")
    parser.add_argument("--host", help="Database host")
    parser.add_argument("--port", type=int, help="Database port")
    parser.add_argument("--user", help="Database user")
    parser.add_argument("--database", help="Database name")
    parser.add_argument("--remember", action="store_true", help="Save host, port, user and database (never the password)")
    return parser.parse_args()


def _profile_from_args(args: argparse.Namespace, base: ConnectionProfile) -> ConnectionProfile:
    overrides = {
        key: value
        for key, value in {"host": args.host, "port": args.port, "user": args.user, "database": args.database}.items()
        if value is not None
    }
    return ConnectionProfile(**{**base.model_dump(), **overrides})


def main() -> int:
    args = parse_args()
    settings = get_settings()
    configure_logging(settings)
    profile = _profile_from_args(args, resolve_profile(settings))
    password = settings.db_password or getpass.getpass(f"Password for {profile.user}@{profile.host}: ")

    try:
        with profile.open_store(password) as store:
            ok = store.test_connection()
    except StoreError as exc:
        print(f"Connection failed: {exc}")
        return 1
    if not ok:
        print("Connection failed")
        return 1

    print(f"Connection successful: {profile.user}@{profile.host}:{profile.port}/{profile.database}")
    if args.remember:
        save_profile(profile, settings.credentials_file)
        print(f"Saved connection details to {settings.credentials_file}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
