"""Contact storage over a single SQLAlchemy connection.

A ``ContactStore`` owns one connection for its whole lifetime. Every operation
first runs the connection guard (``ensure_connection``), then executes inside
its own transaction so the connection is never left mid-transaction between
calls. The store does no locking; callers that share it across threads must
serialize access themselves.

Writes raise typed errors. Reads log backing-store failures and return an
empty result unless the store was opened with ``strict_reads=True``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy import create_engine, delete, func, insert, select, text, update
from sqlalchemy.engine import URL, Connection, CursorResult, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from contactbook.config import Settings, build_url
from contactbook.constants import MAX_CONTACT_ID
from contactbook.models.base import Base
from contactbook.models.core import contacts_table
from contactbook.services.errors import NotFoundError, SchemaError, StoreConnectionError, StoreError
from contactbook.services.validation import ValidationError, sanitize_column_name, validate_contact_fields

logger = logging.getLogger(__name__)

T = TypeVar("T")

_COLUMNS = (
    contacts_table.c.id,
    contacts_table.c.first_name,
    contacts_table.c.last_name,
    contacts_table.c.email,
    contacts_table.c.mobile,
)


@dataclass(frozen=True)
class ContactDraft:
    """The user-supplied fields of a contact, before the database assigns an id."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    mobile: str = ""


@dataclass(frozen=True)
class Contact:
    id: int
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    mobile: str = ""

    def as_draft(self) -> ContactDraft:
        return ContactDraft(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            mobile=self.mobile,
        )


def _clean(value: str | None) -> str:
    return (value or "").strip()


def _clean_fields(first_name: str | None, last_name: str | None, email: str | None, mobile: str | None) -> dict[str, str]:
    fields = {
        "first_name": _clean(first_name),
        "last_name": _clean(last_name),
        "email": _clean(email),
        "mobile": _clean(mobile),
    }
    validate_contact_fields(fields["first_name"], fields["last_name"], fields["email"], fields["mobile"])
    return fields


def _row_to_contact(row: Any) -> Contact:
    return Contact(
        id=int(row.id),
        first_name=row.first_name or "",
        last_name=row.last_name or "",
        email=row.email or "",
        mobile=row.mobile or "",
    )


def _is_storable_id(contact_id: int) -> bool:
    return 1 <= contact_id <= MAX_CONTACT_ID


def _wrap_error(action: str, exc: SQLAlchemyError) -> StoreError:
    if getattr(exc, "connection_invalidated", False):
        return StoreConnectionError(f"{action} error: database connection lost ({exc})")
    return StoreError(f"{action} error: {exc}")


def _create_engine(url: str | URL, **engine_kwargs: Any) -> Engine:
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        if parsed.database in (None, "", ":memory:"):
            engine_kwargs.setdefault("poolclass", StaticPool)
    return create_engine(parsed, future=True, **engine_kwargs)


class ContactStore:
    def __init__(self, url: str | URL, *, strict_reads: bool = False, **engine_kwargs: Any) -> None:
        self._strict_reads = strict_reads
        self._engine: Engine | None = None
        self._connection: Connection | None = None
        try:
            self._engine = _create_engine(url, **engine_kwargs)
            self._connection = self._engine.connect()
            self._connection.execute(text("SELECT 1"))
            self._connection.commit()
        except SQLAlchemyError as exc:
            self.close()
            raise StoreConnectionError(f"Database connection error: {exc}") from exc
        logger.info("Database connected: %s", self._engine.url.render_as_string(hide_password=True))

    @classmethod
    def connect(
        cls,
        host: str,
        user: str,
        password: str,
        database: str,
        port: int = 3306,
        **kwargs: Any,
    ) -> ContactStore:
        url = build_url(host=host, user=user, password=password, database=database, port=port)
        return cls(url, **kwargs)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> ContactStore:
        kwargs.setdefault("strict_reads", settings.strict_reads)
        return cls(settings.sqlalchemy_url(), **kwargs)

    def __enter__(self) -> ContactStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    # -- connection guard -------------------------------------------------

    def ensure_connection(self) -> None:
        connection = self._connection
        if connection is None or connection.closed or connection.invalidated:
            raise StoreConnectionError("Database connection lost")

    def test_connection(self) -> bool:
        try:
            self.ensure_connection()
            with self._connection.begin():
                self._connection.execute(text("SELECT 1"))
        except (StoreConnectionError, SQLAlchemyError):
            return False
        return True

    # -- schema -----------------------------------------------------------

    def ensure_schema(self) -> None:
        self.ensure_connection()
        try:
            with self._connection.begin():
                Base.metadata.create_all(self._connection, tables=[contacts_table], checkfirst=True)
        except SQLAlchemyError as exc:
            raise SchemaError(f"Schema initialization error: {exc}") from exc
        logger.info("Database schema initialized")

    # -- writes -----------------------------------------------------------

    def _execute_write(self, action: str, statement: Any) -> CursorResult:
        self.ensure_connection()
        try:
            with self._connection.begin():
                return self._connection.execute(statement)
        except SQLAlchemyError as exc:
            raise _wrap_error(action, exc) from exc

    def insert(self, first_name: str, last_name: str, email: str = "", mobile: str = "") -> int:
        fields = _clean_fields(first_name, last_name, email, mobile)
        result = self._execute_write("Insert", insert(contacts_table).values(**fields))
        contact_id = int(result.inserted_primary_key[0])
        logger.info("Inserted contact %d: %s %s", contact_id, fields["first_name"], fields["last_name"])
        return contact_id

    def update(self, contact_id: int, first_name: str, last_name: str, email: str = "", mobile: str = "") -> None:
        fields = _clean_fields(first_name, last_name, email, mobile)
        if not _is_storable_id(contact_id):
            self.ensure_connection()
            raise NotFoundError(f"Contact not found with ID: {contact_id}")
        statement = update(contacts_table).where(contacts_table.c.id == contact_id).values(**fields)
        result = self._execute_write("Update", statement)
        if result.rowcount == 0:
            raise NotFoundError(f"Contact not found with ID: {contact_id}")
        logger.info("Updated contact %d", contact_id)

    def delete(self, contact_id: int) -> None:
        if not _is_storable_id(contact_id):
            self.ensure_connection()
            raise NotFoundError(f"Contact not found with ID: {contact_id}")
        result = self._execute_write("Delete", delete(contacts_table).where(contacts_table.c.id == contact_id))
        if result.rowcount == 0:
            raise NotFoundError(f"Contact not found with ID: {contact_id}")
        logger.info("Deleted contact %d", contact_id)

    def delete_all(self) -> int:
        result = self._execute_write("Delete all", delete(contacts_table))
        removed = max(result.rowcount, 0)
        logger.info("Deleted all contacts (%d rows)", removed)
        return removed

    def import_contacts(self, drafts: Iterable[ContactDraft]) -> bool:
        """Insert every draft in one transaction.

        Each row is checked with the same rules as ``insert``. The first row
        that fails validation or is rejected by the database rolls back the
        whole batch, so a failed import never leaves partial rows behind.
        """
        self.ensure_connection()
        statement = insert(contacts_table)
        imported = 0
        try:
            with self._connection.begin():
                for draft in drafts:
                    fields = _clean_fields(draft.first_name, draft.last_name, draft.email, draft.mobile)
                    self._connection.execute(statement, fields)
                    imported += 1
        except (ValidationError, SQLAlchemyError) as exc:
            logger.warning("Import rolled back at row %d: %s", imported + 1, exc)
            return False
        logger.info("Imported %d contacts", imported)
        return True

    # -- reads ------------------------------------------------------------

    def _query(self, action: str, run: Callable[[Connection], T], default: T) -> T:
        try:
            self.ensure_connection()
            with self._connection.begin():
                return run(self._connection)
        except (StoreConnectionError, SQLAlchemyError) as exc:
            if self._strict_reads:
                if isinstance(exc, StoreError):
                    raise
                raise _wrap_error(action, exc) from exc
            logger.warning("%s error: %s", action, exc)
            return default

    def _fetch_contacts(self, action: str, statement: Any) -> list[Contact]:
        return self._query(
            action,
            lambda connection: [_row_to_contact(row) for row in connection.execute(statement)],
            [],
        )

    def get_by_id(self, contact_id: int) -> Contact | None:
        statement = select(*_COLUMNS).where(contacts_table.c.id == contact_id)

        def run(connection: Connection) -> Contact | None:
            if not _is_storable_id(contact_id):
                return None
            row = connection.execute(statement).first()
            return _row_to_contact(row) if row is not None else None

        return self._query("Query", run, None)

    def list_all(self) -> list[Contact]:
        statement = select(*_COLUMNS).order_by(
            contacts_table.c.last_name, contacts_table.c.first_name, contacts_table.c.id
        )
        return self._fetch_contacts("Query", statement)

    def search(self, query: str) -> list[Contact]:
        if not query:
            return self.list_all()
        c = contacts_table.c
        statement = (
            select(*_COLUMNS)
            .where(
                c.first_name.icontains(query, autoescape=True)
                | c.last_name.icontains(query, autoescape=True)
                | c.email.icontains(query, autoescape=True)
                | c.mobile.icontains(query, autoescape=True)
            )
            .order_by(c.last_name, c.first_name, c.id)
        )
        return self._fetch_contacts("Search", statement)

    def sorted_by(self, column: str, ascending: bool = True) -> list[Contact]:
        safe_column = contacts_table.c[sanitize_column_name(column)]
        order = safe_column.asc() if ascending else safe_column.desc()
        statement = select(*_COLUMNS).order_by(order, contacts_table.c.id)
        return self._fetch_contacts("Sort", statement)

    def count(self) -> int:
        statement = select(func.count()).select_from(contacts_table)
        return self._query("Count", lambda connection: int(connection.execute(statement).scalar_one()), 0)
