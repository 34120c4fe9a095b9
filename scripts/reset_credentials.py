from contactbook.config import get_settings
from contactbook.services.credentials import clear_profile


def main() -> int:
    settings = get_settings()
    if clear_profile(settings.credentials_file):
        print(f"Removed saved connection details: {settings.credentials_file}")
    else:
        print("No saved connection details found")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
