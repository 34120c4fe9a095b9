from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from contactbook.database import StoreHandle, get_store_handle
from contactbook.services.errors import StoreError
from contactbook.services.transfer import render_contacts_csv

router = APIRouter(prefix="/api/v1/exports", tags=["exports"])


@router.get("/contacts.csv")
def export_contacts(handle: StoreHandle = Depends(get_store_handle)) -> Response:
    with handle.acquire() as store:
        try:
            contacts = store.list_all()
        except StoreError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")
    return Response(
        content=render_contacts_csv(contacts),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{timestamp}_contacts.csv"'},
    )
