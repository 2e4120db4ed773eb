"""FastAPI application."""

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from backend.reflow.api.routes.health import router as health_router
from backend.reflow.api.routes.metrics import router as metrics_router
from backend.reflow.api.routes.reflow import router as reflow_router
from backend.reflow.models.reflow import ReflowErrorBody, ReflowErrorResponse

app = FastAPI(title="Itinerary Reflow API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(reflow_router)


@app.exception_handler(RequestValidationError)
async def invalid_change_set_handler(request: Request, exc: RequestValidationError) -> Response:
    """Report malformed reflow bodies as invalid change sets (400).

    Other routes keep FastAPI's default 422 response.
    """
    if request.method != "POST" or not request.url.path.endswith("/reflow"):
        return await request_validation_exception_handler(request, exc)

    errors = [
        {"field": ".".join(str(p) for p in err["loc"] if p != "body"), "message": err["msg"]}
        for err in exc.errors()
    ]
    first_field = errors[0]["field"] if errors else ""
    body = ReflowErrorResponse(
        error=ReflowErrorBody(
            kind="invalid_change_set",
            message="Invalid reflow request",
            details={"field": first_field, "errors": errors},
        )
    )
    return JSONResponse(status_code=400, content=body.model_dump(mode="json", by_alias=True))


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Itinerary Reflow API", "version": "0.1.0"}
