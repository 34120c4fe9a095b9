import argparse
from pathlib import Path

from contactbook.config import configure_logging, get_settings
from contactbook.database import open_store
from contactbook.services.errors import StoreError
from contactbook.services.transfer import write_contacts_file


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export all contacts to a CSV file")
    parser.add_argument("path", type=Path, nargs="?", default=Path("contacts.csv"), help="Output file (default: contacts.csv)")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    settings = get_settings()
    configure_logging(settings)

    try:
        with open_store(settings) as store:
            written = write_contacts_file(args.path, store.list_all())
    except StoreError as exc:
        raise SystemExit(str(exc)) from exc

    print(f"Successfully exported {written} contacts to {args.path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
