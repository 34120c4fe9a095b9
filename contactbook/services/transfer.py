import csv
import io
from collections.abc import Iterable
from pathlib import Path

from contactbook.constants import CSV_HEADER
from contactbook.services.store import Contact, ContactDraft

FIELD_COUNT = len(CSV_HEADER)


def _row_to_draft(row: list[str]) -> ContactDraft:
    padded = [value.strip() for value in row[:FIELD_COUNT]]
    padded.extend([""] * (FIELD_COUNT - len(padded)))
    first_name, last_name, email, mobile = padded
    return ContactDraft(first_name=first_name, last_name=last_name, email=email, mobile=mobile)


def parse_contacts_csv(content: str) -> list[ContactDraft]:
    """Parse exported contacts text into drafts ready for ``ContactStore.import_contacts``.

    The first line is a header and is skipped. Rows without a first or last
    name are dropped; other fields are passed through unchecked so that the
    import transaction decides whether the batch is acceptable.
    """
    reader = csv.reader(io.StringIO(content))
    drafts: list[ContactDraft] = []
    for line_no, row in enumerate(reader):
        if line_no == 0 or not any(value.strip() for value in row):
            continue
        draft = _row_to_draft(row)
        if draft.first_name or draft.last_name:
            drafts.append(draft)
    return drafts


def render_contacts_csv(contacts: Iterable[Contact | ContactDraft]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for contact in contacts:
        writer.writerow([contact.first_name, contact.last_name, contact.email, contact.mobile])
    return output.getvalue()


def read_contacts_file(path: Path) -> list[ContactDraft]:
    with path.open("r", encoding="utf-8", newline="") as handle:
        return parse_contacts_csv(handle.read())


def write_contacts_file(path: Path, contacts: Iterable[Contact | ContactDraft]) -> int:
    rows = list(contacts)
    path.write_text(render_contacts_csv(rows), encoding="utf-8", newline="")
    return len(rows)
