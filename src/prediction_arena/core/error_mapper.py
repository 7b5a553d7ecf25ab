"""Mapping of domain errors to HTTP responses."""
import logging
from dataclasses import dataclass, field
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from prediction_arena.core.errors import (AlreadyEntered, AlreadyExists,
                                          ArenaError, AuthenticationError,
                                          CooldownActive, Full,
                                          InsufficientFunds, NotActive,
                                          NotFound, PermissionDenied,
                                          StorageFailure, ValidationError)

logger = logging.getLogger(__name__)

_DEFAULT_STATUS: dict[type[ArenaError], int] = {
    NotFound: 404,
    NotActive: 409,
    InsufficientFunds: 400,
    Full: 409,
    AlreadyEntered: 409,
    CooldownActive: 429,
    ValidationError: 422,
    AlreadyExists: 409,
    AuthenticationError: 401,
    PermissionDenied: 403,
    StorageFailure: 503,
}


@dataclass(frozen=True)
class ArenaErrorMapper:
    """Maps ArenaError subclasses to (status_code, body).

    Unknown subclasses fall back to 400; the body always carries the error
    kind so clients can branch on it.
    """

    status_codes: dict[type[ArenaError], int] = field(
        default_factory=lambda: dict(_DEFAULT_STATUS)
    )

    def status_for(self, exc: ArenaError) -> int:
        for cls in type(exc).__mro__:
            if cls in self.status_codes:
                return self.status_codes[cls]
        return 400

    def to_http(self, exc: ArenaError) -> tuple[int, dict[str, Any]]:
        """Map a domain error to (status_code, JSON body)."""
        body: dict[str, Any] = {"error": exc.kind, "detail": exc.message}
        body.update(exc.extra())
        return self.status_for(exc), body

    async def handle(self, request: Request, exc: ArenaError) -> JSONResponse:
        """FastAPI exception handler."""
        status_code, body = self.to_http(exc)
        if isinstance(exc, StorageFailure):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info(
                "%s %s rejected: %s (%s)",
                request.method,
                request.url.path,
                exc.kind,
                exc.message,
            )
        headers = None
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(status_code=status_code, content=body, headers=headers)
