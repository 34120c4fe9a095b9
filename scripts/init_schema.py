import argparse
import getpass

from contactbook.config import configure_logging, get_settings
from contactbook.database import open_store
from contactbook.services.errors import StoreError


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the contacts table and its indexes if missing")
    parser.add_argument("--prompt-password", action="store_true", help="Ask for the database password instead of DB_PASSWORD")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    settings = get_settings()
    configure_logging(settings)
    password = getpass.getpass("Database password: ") if args.prompt_password else None

    try:
        with open_store(settings, password) as store:
            store.ensure_schema()
            print(f"Schema ready ({store.count()} contacts)")
    except StoreError as exc:
        raise SystemExit(str(exc)) from exc
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
