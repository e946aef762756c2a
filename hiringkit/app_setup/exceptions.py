"""
Gestionnaires d'exceptions utilisés par la factory.
- HTTPException dont detail est un dict {code, message}: rendu en enveloppe d'erreur normalisée.
- HTTPException « classique » (detail texte, ex: 401/403 des dépendances d'auth): code dérivé du status.
- RequestValidationError (JSON invalide, plan inconnu, URL invalide): 400 VALIDATION_ERROR et non 422.
- Exception non gérée: 500 SERVER_ERROR générique, détail uniquement dans les logs.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hiringkit.utils.responses import error_body, format_validation_errors

logger = logging.getLogger(__name__)

_DEFAULT_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMITED",
}

def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre les handlers HTTPException, RequestValidationError et Exception.
    Aucune exception ne traverse la frontière requête sans être convertie.
    """
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail
        if isinstance(detail, dict) and detail.get("code"):
            body = error_body(detail["code"], str(detail.get("message") or ""), detail.get("details"))
        else:
            code = _DEFAULT_CODES.get(exc.status_code, "SERVER_ERROR" if exc.status_code >= 500 else "ERROR")
            body = error_body(code, str(detail or ""))
        return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = format_validation_errors(exc.errors())
        logger.info("validation error path=%s details=%s", request.url.path, details)
        return JSONResponse(
            status_code=400,
            content=error_body("VALIDATION_ERROR", "Données de requête invalides", details),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled error path=%s", request.url.path)
        return JSONResponse(status_code=500, content=error_body("SERVER_ERROR", "Erreur interne"))

