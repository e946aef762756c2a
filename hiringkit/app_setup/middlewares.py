import time
import logging
from fastapi import Request, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hiringkit.config import COOKIE_SECURE, CORS_ORIGINS

"""
Middlewares transverses de l'application.
- register_basic_middlewares: CORS.
- register_security_middleware: en-têtes de sécurité (API JSON uniquement, pas de CSP de pages).
- register_request_logging_middleware: une ligne de log par requête (méthode, chemin, statut, durée).
Note: le webhook Stripe lit le corps brut; aucun middleware ne consomme le body.
"""

logger = logging.getLogger("hiringkit.access")

def register_basic_middlewares(app: FastAPI) -> None:
    """
    CORSMiddleware: autorise les origines définies (CORS_ORIGINS).
    Les credentials ne sont autorisés que pour une liste explicite d'origines.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        if "X-Frame-Options" not in response.headers:
            response.headers["X-Frame-Options"] = "DENY"
        if "X-Content-Type-Options" not in response.headers:
            response.headers["X-Content-Type-Options"] = "nosniff"
        if "Referrer-Policy" not in response.headers:
            response.headers["Referrer-Policy"] = "no-referrer"
        if COOKIE_SECURE and "Strict-Transport-Security" not in response.headers:
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains; preload"
        # Réponses d'API: jamais de cache partagé
        if request.url.path.startswith("/api/"):
            response.headers.setdefault("Cache-Control", "no-store")
        return response

def register_request_logging_middleware(app: FastAPI) -> None:
    """
    Ajouté en dernier afin de s'exécuter en premier: la durée couvre toute la pile.
    """
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("%s %s failed", request.method, request.url.path)
            raise
        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info("%s %s status=%s duration_ms=%s", request.method, request.url.path, response.status_code, duration_ms)
        return response
