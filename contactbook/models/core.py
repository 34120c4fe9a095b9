from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from contactbook.constants import EMAIL_MAX_LENGTH, MOBILE_MAX_LENGTH, NAME_MAX_LENGTH
from contactbook.models.base import Base, TimestampedMixin


class ContactRecord(Base, TimestampedMixin):
    __tablename__ = "contacts"
    __table_args__ = (
        Index("idx_name", "last_name", "first_name"),
        Index("idx_email", "email"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str | None] = mapped_column(String(NAME_MAX_LENGTH), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(NAME_MAX_LENGTH), nullable=True)
    email: Mapped[str | None] = mapped_column(String(EMAIL_MAX_LENGTH), nullable=True)
    mobile: Mapped[str | None] = mapped_column(String(MOBILE_MAX_LENGTH), nullable=True)


contacts_table = ContactRecord.__table__
