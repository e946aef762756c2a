from typing import Optional, Dict, Any

from hiringkit.config import is_admin_email
from hiringkit.auth.principal import Authenticated
from .repository import (
    get_user_from_access_token as _repo_get_user_from_token,
    get_user_profile as _repo_get_user_profile,
)


def determine_role(metadata: Dict[str, Any] | None, email: Optional[str] = None, profile_role: Optional[str] = None) -> str:
    """Rôle effectif: admin si le profil, la metadata Supabase ou ADMIN_EMAILS le disent."""
    candidates = {str(profile_role or "").lower(), str((metadata or {}).get("role", "")).lower()}
    if "admin" in candidates or is_admin_email(email):
        return "admin"
    return "user"

def get_principal_from_token(access_token: str) -> Authenticated:
    """Construit le Principal authentifié à partir d'un access token Supabase:
    - Valide le token via supabase.auth.get_user (lève si invalide/expiré)
    - Complète role/org_id depuis la table users (best-effort)
    """
    raw = _repo_get_user_from_token(access_token)
    uid = raw.get("id")
    if not uid:
        raise ValueError("Token sans utilisateur")
    email = raw.get("email")
    metadata = raw.get("user_metadata") or {}
    profile = _repo_get_user_profile(str(uid)) or {}
    role = determine_role(metadata, email=email, profile_role=profile.get("role"))
    org_id = profile.get("org_id") or metadata.get("org_id")
    return Authenticated(user_id=str(uid), email=email, role=role, org_id=org_id)
