import argparse
from pathlib import Path

from contactbook.config import configure_logging, get_settings
from contactbook.database import open_store
from contactbook.services.errors import StoreError
from contactbook.services.transfer import read_contacts_file


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import contacts from a CSV file in a single transaction")
    parser.add_argument("path", type=Path, help="CSV file with a First Name,Last Name,Email,Mobile header")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    settings = get_settings()
    configure_logging(settings)

    if not args.path.is_file():
        raise SystemExit(f"File not found: {args.path}")
    drafts = read_contacts_file(args.path)
    if not drafts:
        print("No valid contacts found in CSV")
        return 0

    try:
        with open_store(settings) as store:
            store.ensure_schema()
            if not store.import_contacts(drafts):
                print("Failed to import contacts; no rows were saved")
                return 1
    except StoreError as exc:
        raise SystemExit(str(exc)) from exc

    print(f"Successfully imported {len(drafts)} contacts")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
