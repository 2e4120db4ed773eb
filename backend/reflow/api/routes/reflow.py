"""Trip itinerary endpoints - reflow and version reads."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from backend.reflow.db.engine import get_store
from backend.reflow.db.repositories import ItineraryStore
from backend.reflow.errors import BudgetExceeded, ReflowError
from backend.reflow.models.reflow import (
    ItineraryVersionResponse,
    ReflowErrorBody,
    ReflowErrorResponse,
    ReflowRequest,
    ReflowResponse,
)
from backend.reflow.orchestration.reflow import ReflowOrchestrator

router = APIRouter(prefix="/trips", tags=["trips"])

ERROR_STATUS: dict[str, int] = {
    "invalid_change_set": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "version_conflict": status.HTTP_409_CONFLICT,
    "budget_exceeded": status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def get_orchestrator(
    store: Annotated[ItineraryStore, Depends(get_store)],
) -> ReflowOrchestrator:
    """FastAPI dependency building an orchestrator over the configured store."""
    return ReflowOrchestrator(store)


def error_response(error: ReflowError) -> JSONResponse:
    """Render a ReflowError as the reflow failure envelope."""
    attempted = error.attempted if isinstance(error, BudgetExceeded) else None
    body = ReflowErrorResponse(
        error=ReflowErrorBody(kind=error.kind, message=error.message, details=error.details()),
        attempted_itinerary=attempted,
    )
    return JSONResponse(
        status_code=ERROR_STATUS.get(error.kind, status.HTTP_400_BAD_REQUEST),
        content=body.model_dump(mode="json", by_alias=True),
    )


@router.post(
    "/{trip_id}/reflow",
    response_model=ReflowResponse,
    response_model_by_alias=True,
    responses={
        400: {"model": ReflowErrorResponse},
        404: {"model": ReflowErrorResponse},
        409: {"model": ReflowErrorResponse},
        422: {"model": ReflowErrorResponse},
    },
)
def reflow_trip(
    trip_id: str,
    request: ReflowRequest,
    orchestrator: Annotated[ReflowOrchestrator, Depends(get_orchestrator)],
) -> ReflowResponse | JSONResponse:
    """Apply a change set to the trip's itinerary and persist a new version.

    Args:
        trip_id: Trip identifier
        request: Base version, change set, and preferences
        orchestrator: Reflow orchestrator

    Returns:
        New itinerary and version, or a failure envelope
    """
    try:
        result = orchestrator.reflow(
            trip_id, request.base_version, request.change_set, request.preferences
        )
    except ReflowError as e:
        return error_response(e)

    return ReflowResponse(
        itinerary=result.itinerary,
        version=result.version,
        change_summary=result.summary,
        warnings=result.warnings,
    )


@router.get(
    "/{trip_id}/itinerary",
    response_model=ItineraryVersionResponse,
    response_model_by_alias=True,
)
def get_latest_itinerary(
    trip_id: str,
    store: Annotated[ItineraryStore, Depends(get_store)],
) -> ItineraryVersionResponse:
    """Get the latest version of a trip's itinerary."""
    version = store.latest_version(trip_id)
    itinerary = store.get(trip_id, version) if version is not None else None

    if version is None or itinerary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")

    return ItineraryVersionResponse(trip_id=trip_id, version=version, itinerary=itinerary)


@router.get(
    "/{trip_id}/itinerary/{version}",
    response_model=ItineraryVersionResponse,
    response_model_by_alias=True,
)
def get_itinerary_version(
    trip_id: str,
    version: int,
    store: Annotated[ItineraryStore, Depends(get_store)],
) -> ItineraryVersionResponse:
    """Get a specific version of a trip's itinerary."""
    itinerary = store.get(trip_id, version)

    if itinerary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Version not found")

    return ItineraryVersionResponse(trip_id=trip_id, version=version, itinerary=itinerary)
