from fastapi import Request, HTTPException, Depends
from typing import Callable, Optional
import logging

from hiringkit.auth.principal import GUEST, Authenticated, Principal

COOKIE_NAME = "sb_access"

logger = logging.getLogger(__name__)

def extract_token(request: Request) -> Optional[str]:
    # Hybride: priorité au Bearer, fallback cookie
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        if token:
            return token
    return request.cookies.get(COOKIE_NAME) or None

def get_principal(request: Request) -> Principal:
    """
    Authentification optionnelle: retourne GUEST si aucun token n'est fourni
    ou si le token est refusé par Supabase Auth (équivalent d'un invité).
    """
    token = extract_token(request)
    if not token:
        return GUEST
    try:
        from hiringkit.auth.service import get_principal_from_token
        return get_principal_from_token(token)
    except Exception as e:
        logger.warning("get_principal: token refusé, traitement en invité (%s)", e.__class__.__name__)
        return GUEST

def principal_resolver(request: Request) -> Callable[[], Principal]:
    """
    Variante paresseuse de get_principal pour les routes avec corps JSON.
    FastAPI résout les dépendances avant de valider le corps: la vue appelle le résolveur
    une fois ses propres contrôles passés, si bien qu'une requête rejetée en 400
    n'interroge jamais Supabase Auth. Le résultat est mémorisé pour la requête.
    """
    resolved = []

    def _resolve() -> Principal:
        if not resolved:
            resolved.append(get_principal(request))
        return resolved[0]

    return _resolve

def require_user(principal: Principal = Depends(get_principal)) -> Authenticated:
    if not isinstance(principal, Authenticated):
        raise HTTPException(status_code=401, detail="Authentification requise")
    return principal

def require_admin(principal: Authenticated = Depends(require_user)) -> Authenticated:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Accès admin requis")
    return principal
