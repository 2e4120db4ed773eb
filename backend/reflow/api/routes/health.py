"""Health check endpoints.

- /health: liveness, always 200 while the process runs
- /healthz: checks the itinerary store and reports component status
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from backend.reflow.db.engine import get_store
from backend.reflow.db.repositories import ItineraryStore

router = APIRouter()


def check_store(store: ItineraryStore) -> tuple[bool, str]:
    """Check itinerary store connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        store.ping()
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
def healthz(
    store: Annotated[ItineraryStore, Depends(get_store)],
) -> dict[str, Any] | JSONResponse:
    """Health check endpoint.

    Returns:
        200 with component status if the store is reachable
        503 if it is not
    """
    store_ok, store_status = check_store(store)

    response_body = {
        "status": "ok" if store_ok else "degraded",
        "components": {"store": store_status},
    }

    if not store_ok:
        return JSONResponse(content=response_body, status_code=503)

    return response_body
