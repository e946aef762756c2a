"""
Factory d'application pour les entrypoints (hiringkit.asgi, python -m hiringkit) et les tests.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_security_middleware, register_request_logging_middleware
from .exceptions import register_exception_handlers
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - middlewares (CORS, en-têtes de sécurité, log des requêtes)
      - gestionnaires d'exceptions (enveloppe d'erreur normalisée)
      - tous les routers (API, admin, health)
    """
    app = FastAPI(title="HiringKit Checkout API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    register_request_logging_middleware(app)
    return app
