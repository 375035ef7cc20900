"""
Gestionnaires d'exceptions.
- HTTPException: corps {"detail": ...} standard FastAPI.
- RequestValidationError: 400 (et non 422) avec un message qui nomme le champ invalide.
- Exception non gérée (ex: dépendance mal configurée): 500 générique, loggée.
"""
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from hearty_hounds.utils.errors import error_body

logger = logging.getLogger(__name__)

def _field_name(loc) -> str:
    # loc = ("body", "items", 0, "price") -> "items.0.price"
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = _field_name(first.get("loc") or ())
        message = f"Invalid or missing field: {field} ({first.get('msg', 'invalid')})"
        return JSONResponse(status_code=400, content={"detail": error_body("Validation error", message, field=field)})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": error_body("Internal server error", "Unknown error occurred")},
        )
