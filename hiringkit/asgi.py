"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: uvicorn, gunicorn -k uvicorn.workers.UvicornWorker)
  importe `hiringkit.asgi:app`.
- Toute la configuration FastAPI est centralisée dans hiringkit.app_setup.factory.
"""
from hiringkit.app_setup.factory import create_app
from hiringkit.utils.logging_config import setup_logging

setup_logging()
app = create_app()

if __name__ == "__main__":
    # Exécution directe en développement local
    import os
    import uvicorn
    uvicorn.run(
        "hiringkit.asgi:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
