from typing import Optional
from supabase import create_client, Client
from hiringkit.config import SUPABASE_URL, SUPABASE_ANON, SUPABASE_SERVICE_KEY

_supabase: Optional[Client] = None
_service_supabase: Optional[Client] = None

def get_supabase() -> Client:
    """Client 'anon' partagé: sert à valider les tokens via Supabase Auth."""
    global _supabase
    if _supabase is None:
        if not SUPABASE_URL or not SUPABASE_ANON:
            raise RuntimeError("SUPABASE_URL/SUPABASE_ANON_KEY manquants pour get_supabase()")
        _supabase = create_client(SUPABASE_URL, SUPABASE_ANON)
    return _supabase

def get_service_supabase() -> Client:
    """
    Client service-role (bypass RLS).
    Toutes les lectures/écritures kits, orders, organizations passent par lui:
    le contrôle d'accès est appliqué explicitement dans les requêtes.
    """
    global _service_supabase
    if not SUPABASE_SERVICE_KEY:
        raise RuntimeError("SUPABASE_SERVICE_KEY manquant pour get_service_supabase()")
    if _service_supabase is None:
        _service_supabase = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    return _service_supabase

def first_row(res) -> Optional[dict]:
    """Retourne la première ligne d'une réponse PostgREST (liste ou dict), sinon None."""
    data = getattr(res, "data", None)
    if isinstance(data, list):
        return data[0] if data else None
    if isinstance(data, dict):
        return data or None
    return None
