from datetime import datetime

from pydantic import BaseModel, Field

from contactbook.services.store import Contact


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime


class HealthDetailsResponse(BaseModel):
    status: str
    timestamp: datetime
    database_ok: bool
    contact_count: int


class ContactPayload(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    mobile: str = ""


class ContactResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    mobile: str

    @classmethod
    def from_contact(cls, contact: Contact) -> "ContactResponse":
        return cls(
            id=contact.id,
            first_name=contact.first_name,
            last_name=contact.last_name,
            email=contact.email,
            mobile=contact.mobile,
        )


class ContactListResponse(BaseModel):
    total: int
    items: list[ContactResponse]


class ContactCreatedResponse(BaseModel):
    id: int


class CountResponse(BaseModel):
    count: int


class DeleteAllResponse(BaseModel):
    deleted: int


class ImportRequest(BaseModel):
    csv_text: str = Field(min_length=1)


class ImportResponse(BaseModel):
    imported: int
    count: int
