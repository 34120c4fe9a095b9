from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from contactbook.database import StoreHandle, get_store_handle
from contactbook.schemas import HealthDetailsResponse, HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", timestamp=datetime.now(UTC))


@router.get("/health/details", response_model=HealthDetailsResponse)
def health_details(handle: StoreHandle = Depends(get_store_handle)) -> HealthDetailsResponse:
    with handle.acquire() as store:
        database_ok = store.test_connection()
        contact_count = store.count() if database_ok else 0
    return HealthDetailsResponse(
        status="ok" if database_ok else "degraded",
        timestamp=datetime.now(UTC),
        database_ok=database_ok,
        contact_count=contact_count,
    )
