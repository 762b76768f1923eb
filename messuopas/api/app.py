"""FastAPI application for Messuopas."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from messuopas import __version__
from messuopas.api.routes import catalog, content, events, invitations, organizations, sections
from messuopas.api.serializers import serialize_resolved
from messuopas.config import configure_logging
from messuopas.exceptions import (
    DatabaseError,
    DuplicateError,
    InvitationError,
    NotFoundError,
    PermissionDeniedError,
    PreferenceWriteError,
    ValidationError,
)
from messuopas.storage.database import get_db

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Messuopas",
    description="Trade-fair guide: sections, preferences, organizations and events",
    version=__version__,
)

app.include_router(sections.router)
app.include_router(catalog.router)
app.include_router(organizations.router)
app.include_router(events.router)
app.include_router(invitations.router)
app.include_router(content.router)
app.include_router(content.collaborators_router)


def _error(status_code: int, exc: Exception, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "message": str(exc), **extra},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error(400, exc, field=exc.field)


@app.exception_handler(InvitationError)
async def invitation_error_handler(request: Request, exc: InvitationError):
    return _error(400, exc)


@app.exception_handler(PermissionDeniedError)
async def permission_error_handler(request: Request, exc: PermissionDeniedError):
    return _error(403, exc)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, exc)


@app.exception_handler(DuplicateError)
async def duplicate_handler(request: Request, exc: DuplicateError):
    return _error(409, exc, field=exc.field)


@app.exception_handler(PreferenceWriteError)
async def preference_write_handler(request: Request, exc: PreferenceWriteError):
    # Body carries the refetched, unchanged view so the client can revert
    logger.error("Preference write failed: %s", exc)
    return _error(503, exc, sections=serialize_resolved(exc.resolved))


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError):
    logger.error("Database error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"error": "DatabaseError", "message": "Database operation failed"},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "messuopas"}


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    configure_logging()
    get_db().create_tables()
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
