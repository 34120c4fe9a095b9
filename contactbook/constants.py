import re

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
MOBILE_MAX_LENGTH = 50

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

# Columns a caller may order by. Anything else falls back to DEFAULT_SORT_COLUMN.
SORTABLE_COLUMNS = frozenset({"id", "first_name", "last_name", "email", "mobile"})
DEFAULT_SORT_COLUMN = "last_name"

CSV_HEADER = ("First Name", "Last Name", "Email", "Mobile")

CREDENTIALS_FILENAME = "db_config.txt"

# Largest id a signed 64-bit INTEGER column can hold.
MAX_CONTACT_ID = 2**63 - 1
