from pathlib import Path

from contactbook.services.store import ContactDraft, ContactStore

MEMORY_URL = "sqlite+pysqlite:///:memory:"

SAMPLE_DRAFTS = [
    ContactDraft(first_name="Ada", last_name="Lovelace", email="ada@x.io", mobile="+44 1"),
    ContactDraft(first_name="Alan", last_name="Turing", email="alan@bletchley.uk", mobile="+44 2"),
    ContactDraft(first_name="Grace", last_name="Hopper", email="grace@navy.mil", mobile="+1 3"),
]


def insert_drafts(store: ContactStore, drafts: list[ContactDraft] = SAMPLE_DRAFTS) -> list[int]:
    return [store.insert(d.first_name, d.last_name, d.email, d.mobile) for d in drafts]


def create_csv_file(tmp_path: Path, content: str, name: str = "contacts.csv") -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path
