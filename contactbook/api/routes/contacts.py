from fastapi import APIRouter, Depends, HTTPException, Query, Response

from contactbook.database import StoreHandle, get_store_handle
from contactbook.schemas import (
    ContactCreatedResponse,
    ContactListResponse,
    ContactPayload,
    ContactResponse,
    CountResponse,
    DeleteAllResponse,
    ImportRequest,
    ImportResponse,
)
from contactbook.services.errors import NotFoundError, StoreConnectionError, StoreError
from contactbook.services.transfer import parse_contacts_csv
from contactbook.services.validation import ValidationError

router = APIRouter(prefix="/api/v1/contacts", tags=["contacts"])


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, StoreConnectionError):
        return HTTPException(status_code=503, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


@router.get("", response_model=ContactListResponse)
def list_contacts(
    q: str = Query(default=""),
    sort: str | None = Query(default=None),
    ascending: bool = Query(default=True),
    handle: StoreHandle = Depends(get_store_handle),
) -> ContactListResponse:
    with handle.acquire() as store:
        try:
            if q:
                contacts = store.search(q)
            elif sort:
                contacts = store.sorted_by(sort, ascending)
            else:
                contacts = store.list_all()
        except StoreError as exc:
            raise _http_error(exc) from exc
    return ContactListResponse(total=len(contacts), items=[ContactResponse.from_contact(c) for c in contacts])


@router.get("/count", response_model=CountResponse)
def count_contacts(handle: StoreHandle = Depends(get_store_handle)) -> CountResponse:
    with handle.acquire() as store:
        try:
            return CountResponse(count=store.count())
        except StoreError as exc:
            raise _http_error(exc) from exc


@router.post("/import", response_model=ImportResponse)
def import_contacts(payload: ImportRequest, handle: StoreHandle = Depends(get_store_handle)) -> ImportResponse:
    drafts = parse_contacts_csv(payload.csv_text)
    if not drafts:
        raise HTTPException(status_code=400, detail="No valid contacts found in CSV")
    with handle.acquire() as store:
        try:
            if not store.import_contacts(drafts):
                raise HTTPException(status_code=409, detail="Failed to import contacts; no rows were saved")
            return ImportResponse(imported=len(drafts), count=store.count())
        except StoreError as exc:
            raise _http_error(exc) from exc


@router.get("/{contact_id}", response_model=ContactResponse)
def get_contact(contact_id: int, handle: StoreHandle = Depends(get_store_handle)) -> ContactResponse:
    with handle.acquire() as store:
        try:
            contact = store.get_by_id(contact_id)
        except StoreError as exc:
            raise _http_error(exc) from exc
    if contact is None:
        raise HTTPException(status_code=404, detail=f"Contact not found with ID: {contact_id}")
    return ContactResponse.from_contact(contact)


@router.post("", response_model=ContactCreatedResponse, status_code=201)
def create_contact(payload: ContactPayload, handle: StoreHandle = Depends(get_store_handle)) -> ContactCreatedResponse:
    with handle.acquire() as store:
        try:
            contact_id = store.insert(payload.first_name, payload.last_name, payload.email, payload.mobile)
        except (ValidationError, StoreError) as exc:
            raise _http_error(exc) from exc
    return ContactCreatedResponse(id=contact_id)


@router.put("/{contact_id}", response_model=ContactResponse)
def update_contact(
    contact_id: int,
    payload: ContactPayload,
    handle: StoreHandle = Depends(get_store_handle),
) -> ContactResponse:
    with handle.acquire() as store:
        try:
            store.update(contact_id, payload.first_name, payload.last_name, payload.email, payload.mobile)
            contact = store.get_by_id(contact_id)
        except (ValidationError, StoreError) as exc:
            raise _http_error(exc) from exc
    if contact is None:
        raise HTTPException(status_code=404, detail=f"Contact not found with ID: {contact_id}")
    return ContactResponse.from_contact(contact)


@router.delete("/{contact_id}", status_code=204)
def delete_contact(contact_id: int, handle: StoreHandle = Depends(get_store_handle)) -> Response:
    with handle.acquire() as store:
        try:
            store.delete(contact_id)
        except StoreError as exc:
            raise _http_error(exc) from exc
    return Response(status_code=204)


@router.delete("", response_model=DeleteAllResponse)
def delete_all_contacts(handle: StoreHandle = Depends(get_store_handle)) -> DeleteAllResponse:
    with handle.acquire() as store:
        try:
            return DeleteAllResponse(deleted=store.delete_all())
        except StoreError as exc:
            raise _http_error(exc) from exc
