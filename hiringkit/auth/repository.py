from typing import Optional, Dict, Any
import logging
import hiringkit.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

# --- Auth (supabase.auth.*) ---

def get_user_from_access_token(access_token: str) -> Dict[str, Any]:
    """Récupère et normalise l'utilisateur depuis supabase.auth.get_user(access_token)."""
    res = supabase_client.get_supabase().auth.get_user(access_token)
    user = getattr(res, "user", None) or {}
    if not isinstance(user, dict):
        user = {
            "id": getattr(user, "id", None),
            "email": getattr(user, "email", None),
            "user_metadata": getattr(user, "user_metadata", None),
        }
    return user or {}

# --- Table users (profil applicatif: rôle, organisation) ---

def get_user_profile(user_id: str) -> Optional[dict]:
    """Profil applicatif (role, org_id). None si absent ou en cas d'erreur (best-effort)."""
    if not user_id:
        return None
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("users")
            .select("id, email, role, org_id")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        return supabase_client.first_row(res)
    except Exception:
        logger.exception("auth.repository.get_user_profile failed user_id=%s", user_id)
        return None
