"""SPAC OS HTTP application.

Mounts the record, workflow and fit score routes under ``/api`` and maps
``SpacOSError`` subclasses onto HTTP status codes in one place. Error bodies
keep the ``{"detail": ...}`` shape of ``HTTPException``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from spac_os import __version__
from spac_os.exceptions import (
    DuplicateRecordError,
    InvalidTransitionError,
    NotATargetError,
    NotFoundError,
    SpacOSError,
    UnknownEntityTypeError,
    UnknownStatusError,
)
from spac_os.models.database import get_session_factory
from .routes import router

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[SpacOSError], int] = {
    NotFoundError: 404,
    DuplicateRecordError: 409,
    InvalidTransitionError: 400,
    UnknownStatusError: 400,
    UnknownEntityTypeError: 400,
    NotATargetError: 400,
}


def error_status_code(error: SpacOSError) -> int:
    """HTTP status for a service error; 500 for anything unmapped."""
    for error_cls, status_code in ERROR_STATUS_CODES.items():
        if isinstance(error, error_cls):
            return status_code
    return 500


# Create the schema and the shared session maker before serving
get_session_factory()

app = FastAPI(
    title="SPAC OS Rule Engine",
    description="SPAC and filing status workflows, and target fit scoring",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SpacOSError)
async def handle_spac_os_error(request: Request, error: SpacOSError):
    status_code = error_status_code(error)
    if status_code == 500:
        logger.error(f"Unhandled rule engine error on {request.url.path}: {error.to_dict()}")
        return JSONResponse(status_code=500, content={"detail": "Internal error"})
    logger.debug(f"{request.method} {request.url.path} -> {status_code}: {error.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": error.message, "error": error.to_dict()},
    )


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__}


app.include_router(router, prefix="/api")
