from contactbook.models.core import ContactRecord, contacts_table

__all__ = [
    "ContactRecord",
    "contacts_table",
]
