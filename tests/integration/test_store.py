import pytest
from sqlalchemy import create_engine, inspect

from contactbook.services.errors import NotFoundError, StoreConnectionError, StoreError
from contactbook.services.store import Contact, ContactDraft, ContactStore
from contactbook.services.validation import ValidationError
from tests.helpers import SAMPLE_DRAFTS, insert_drafts


def test_insert_then_get_by_id_returns_same_fields(store):
    contact_id = store.insert("Ada", "Lovelace", "ada@x.io", "+44 1")
    assert store.get_by_id(contact_id) == Contact(
        id=contact_id, first_name="Ada", last_name="Lovelace", email="ada@x.io", mobile="+44 1"
    )


def test_lovelace_scenario(store):
    assert store.insert("Ada", "Lovelace", "ada@x.io", "+44 1") == 1
    assert store.get_by_id(1) == Contact(id=1, first_name="Ada", last_name="Lovelace", email="ada@x.io", mobile="+44 1")

    store.delete(1)

    assert store.get_by_id(1) is None
    assert store.count() == 0


def test_ids_are_not_reused_after_delete(store):
    first = store.insert("Ada", "")
    store.delete(first)
    assert store.insert("Alan", "") > first


def test_insert_requires_a_name(store):
    with pytest.raises(ValidationError):
        store.insert("", "")
    assert store.insert("A", "") > 0
    assert store.count() == 1


def test_insert_validates_email(store):
    with pytest.raises(ValidationError, match="email"):
        store.insert("Ada", "", "not-an-email")
    store.insert("Ada", "", "")
    store.insert("Ada", "", "a@b.co")
    assert store.count() == 2


def test_insert_strips_surrounding_whitespace(store):
    contact_id = store.insert("  Ada ", " Lovelace", " ada@x.io ", " +44 1 ")
    assert store.get_by_id(contact_id).as_draft() == SAMPLE_DRAFTS[0]


def test_update_overwrites_all_fields(store):
    contact_id = store.insert("Ada", "Lovelace", "ada@x.io", "+44 1")
    store.update(contact_id, "Augusta", "King", "", "")
    assert store.get_by_id(contact_id) == Contact(id=contact_id, first_name="Augusta", last_name="King")


def test_update_with_unchanged_values_still_matches(store):
    contact_id = store.insert("Ada", "Lovelace")
    store.update(contact_id, "Ada", "Lovelace")


def test_update_validates_before_touching_storage(store):
    contact_id = store.insert("Ada", "Lovelace")
    with pytest.raises(ValidationError):
        store.update(contact_id, "", "")
    assert store.get_by_id(contact_id).first_name == "Ada"


def test_update_and_delete_missing_id_raise_not_found(store):
    with pytest.raises(NotFoundError, match="999"):
        store.update(999, "Ada", "Lovelace")
    with pytest.raises(NotFoundError):
        store.delete(999)


def test_ids_beyond_integer_range_are_absent(store):
    huge_id = 2**70
    assert store.get_by_id(huge_id) is None
    assert store.get_by_id(0) is None
    with pytest.raises(NotFoundError):
        store.update(huge_id, "Ada", "Lovelace")
    with pytest.raises(NotFoundError):
        store.delete(huge_id)
    with pytest.raises(NotFoundError):
        store.delete(-1)


def test_not_found_is_a_store_error(store):
    with pytest.raises(StoreError):
        store.delete(1)


def test_delete_all_empties_table(store):
    insert_drafts(store)
    assert store.delete_all() == 3
    assert store.list_all() == []
    assert store.count() == 0


def test_list_all_orders_by_last_then_first_name(store):
    insert_drafts(store)
    store.insert("Ada", "Hopper")
    names = [(c.last_name, c.first_name) for c in store.list_all()]
    assert names == [("Hopper", "Ada"), ("Hopper", "Grace"), ("Lovelace", "Ada"), ("Turing", "Alan")]


def test_returned_contacts_are_copies(store):
    contact_id = store.insert("Ada", "Lovelace")
    before = store.get_by_id(contact_id)
    store.update(contact_id, "Augusta", "King")
    assert before.first_name == "Ada"


def test_search_matches_any_field_case_insensitively(store):
    insert_drafts(store)
    assert [c.last_name for c in store.search("LOVE")] == ["Lovelace"]
    assert [c.last_name for c in store.search("bletchley")] == ["Turing"]
    assert [c.last_name for c in store.search("+44")] == ["Lovelace", "Turing"]
    assert store.search("nobody") == []


def test_search_treats_wildcards_literally(store):
    insert_drafts(store)
    assert store.search("%") == []
    assert store.search("_") == []


def test_empty_search_equals_list_all(store):
    insert_drafts(store)
    assert store.search("") == store.list_all()


def test_search_keeps_surrounding_whitespace(store):
    store.insert("Ada", "", mobile="+44 1")
    store.insert("Grace", "")
    assert [c.first_name for c in store.search(" ")] == ["Ada"]
    assert store.search(" ada") == []


def test_sorted_by_requested_column(store):
    insert_drafts(store)
    assert [c.first_name for c in store.sorted_by("first_name")] == ["Ada", "Alan", "Grace"]
    assert [c.email for c in store.sorted_by("email", ascending=False)] == [
        "grace@navy.mil",
        "alan@bletchley.uk",
        "ada@x.io",
    ]
    assert [c.id for c in store.sorted_by("id", ascending=False)] == [3, 2, 1]


def test_sorted_with_unsafe_column_behaves_like_last_name(store):
    insert_drafts(store)
    assert store.sorted_by("drop table contacts") == store.sorted_by("last_name")
    assert store.sorted_by("drop table contacts", ascending=False) == store.sorted_by("last_name", ascending=False)
    assert store.count() == 3


def test_import_all_valid_rows(store):
    store.insert("Existing", "Contact")
    assert store.import_contacts(SAMPLE_DRAFTS) is True
    assert store.count() == 1 + len(SAMPLE_DRAFTS)
    assert {c.as_draft() for c in store.list_all()} >= set(SAMPLE_DRAFTS)


def test_import_keeps_duplicates(store):
    assert store.import_contacts([SAMPLE_DRAFTS[0], SAMPLE_DRAFTS[0]]) is True
    assert store.count() == 2


def test_import_inserts_in_input_order(store):
    store.import_contacts(SAMPLE_DRAFTS)
    assert [c.last_name for c in store.sorted_by("id")] == ["Lovelace", "Turing", "Hopper"]


@pytest.mark.parametrize(
    "bad_row",
    [
        ContactDraft(first_name="", last_name="", email="x@y.io"),
        ContactDraft(first_name="Bad", email="not-an-email"),
        ContactDraft(first_name="x" * 101),
    ],
)
def test_import_rolls_back_whole_batch_on_a_bad_row(store, bad_row):
    store.insert("Existing", "Contact")
    batch = [SAMPLE_DRAFTS[0], SAMPLE_DRAFTS[1], bad_row, SAMPLE_DRAFTS[2]]

    assert store.import_contacts(batch) is False

    assert store.count() == 1
    assert [c.first_name for c in store.list_all()] == ["Existing"]


def test_store_usable_after_rolled_back_import(store):
    store.import_contacts([SAMPLE_DRAFTS[0], ContactDraft()])
    store.insert("Alan", "Turing")
    assert store.import_contacts([SAMPLE_DRAFTS[2]]) is True
    assert store.count() == 2


def test_empty_import_succeeds(store):
    assert store.import_contacts([]) is True
    assert store.count() == 0


def test_test_connection_reports_live_and_closed(store):
    assert store.test_connection() is True
    store.close()
    assert store.test_connection() is False


def test_connection_guard_fails_writes_fast_after_close(store):
    store.close()
    with pytest.raises(StoreConnectionError, match="connection lost"):
        store.insert("Ada", "Lovelace")
    with pytest.raises(StoreConnectionError):
        store.delete_all()
    with pytest.raises(StoreConnectionError):
        store.import_contacts(SAMPLE_DRAFTS)


def test_connection_guard_rejects_invalidated_connection(store):
    store._connection.invalidate()
    with pytest.raises(StoreConnectionError, match="connection lost"):
        store.insert("Ada", "Lovelace")
    assert store.test_connection() is False


def test_reads_swallow_connection_failures_by_default(store):
    insert_drafts(store)
    store.close()
    assert store.list_all() == []
    assert store.search("Ada") == []
    assert store.sorted_by("email") == []
    assert store.get_by_id(1) is None
    assert store.count() == 0


def test_strict_reads_raise_typed_errors(strict_store):
    strict_store.close()
    with pytest.raises(StoreConnectionError):
        strict_store.list_all()
    with pytest.raises(StoreConnectionError):
        strict_store.count()
    with pytest.raises(StoreConnectionError):
        strict_store.get_by_id(1)


def test_unreachable_database_raises_connection_error(tmp_path):
    with pytest.raises(StoreConnectionError, match="connection error"):
        ContactStore(f"sqlite+pysqlite:///{tmp_path}/missing/dir/contacts.db")


def test_schema_is_idempotent_and_indexed(tmp_path):
    url = f"sqlite+pysqlite:///{tmp_path / 'contacts.db'}"
    with ContactStore(url) as contact_store:
        contact_store.ensure_schema()
        contact_store.ensure_schema()
        contact_store.insert("Ada", "Lovelace")

    engine = create_engine(url)
    inspector = inspect(engine)
    columns = {column["name"] for column in inspector.get_columns("contacts")}
    indexes = {index["name"]: index["column_names"] for index in inspector.get_indexes("contacts")}
    engine.dispose()

    assert columns == {"id", "first_name", "last_name", "email", "mobile", "created_at", "updated_at"}
    assert indexes == {"idx_name": ["last_name", "first_name"], "idx_email": ["email"]}


def test_data_persists_across_store_instances(tmp_path):
    url = f"sqlite+pysqlite:///{tmp_path / 'contacts.db'}"
    with ContactStore(url) as first:
        first.ensure_schema()
        first.insert("Grace", "Hopper")
    with ContactStore(url) as second:
        assert [c.last_name for c in second.list_all()] == ["Hopper"]


def test_connect_builds_mysql_url(monkeypatch):
    captured = {}

    def fake_init(self, url, **kwargs):
        captured["url"] = url
        captured["kwargs"] = kwargs

    monkeypatch.setattr(ContactStore, "__init__", fake_init)
    ContactStore.connect("db.local", "ada", "", "Contacts", port=3307, strict_reads=True)

    assert captured["url"].render_as_string(hide_password=False) == "mysql+pymysql://ada@db.local:3307/Contacts"
    assert captured["kwargs"] == {"strict_reads": True}
