"""
Limitation de débit optionnelle pour les endpoints sensibles (création de session de paiement).
- fastapi-limiter (Redis) quand le lifespan a pu l'initialiser.
- Fallback mémoire par process si LOCAL_RATE_LIMIT_FALLBACK=1.
- Aucun blocage si le limiteur est désactivé ou indisponible.
"""
from typing import Dict, Any
from fastapi import Request, Response, HTTPException
import hashlib
import logging
import os
import time

from hiringkit.utils.security import COOKIE_NAME

logger = logging.getLogger(__name__)

def request_identifier(request: Request) -> str:
    # Priorité: token (hashé, cookie ou Bearer) puis IP
    auth_header = request.headers.get("Authorization", "")
    token = auth_header[7:].strip() if auth_header.startswith("Bearer ") else request.cookies.get(COOKIE_NAME)
    path = request.url.path
    if token:
        h = hashlib.sha256(token.encode("utf-8")).hexdigest()[:16]
        return f"user:{h}:{path}"
    ip = request.client.host if request.client else "local"
    return f"ip:{ip}:{path}"

def _local_hit(request: Request, times: int, seconds: int) -> None:
    now = time.time()
    key = request_identifier(request)
    store = getattr(request.app.state, "_rl_store", {})
    hits = [t for t in store.get(key, []) if now - t < seconds]
    if len(hits) >= times:
        raise HTTPException(status_code=429, detail="Trop de requêtes, réessayez plus tard")
    hits.append(now)
    store[key] = hits
    request.app.state._rl_store = store

def optional_rate_limit(times: int, seconds: int):
    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            _local_hit(request, times, seconds)
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return

        try:
            from fastapi_limiter.depends import RateLimiter

            async def _identifier(req: Request) -> str:
                return request_identifier(req)
            return await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
        except HTTPException:
            raise
        except Exception:
            # Redis indisponible en cours de route: on laisse passer plutôt que de casser le checkout
            logger.warning("rate limiter indisponible path=%s", request.url.path)
            return
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    limiter_ready = False
    try:
        from fastapi_limiter import FastAPILimiter
        limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
    except Exception:
        limiter_ready = False
    return {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": "redis" if limiter_ready else None,
    }
