"""
Accès aux données pour la feature 'kits'.
Le contrôle d'accès est porté par la requête elle-même: un propriétaire différent
et un kit absent donnent le même résultat (None), sans révéler l'existence du kit.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

import hiringkit.infra.supabase_client as supabase_client
from hiringkit.auth.principal import Authenticated, Principal

logger = logging.getLogger(__name__)

# module hiringkit.kits.repository
def get_accessible_kit(kit_id: str, principal: Principal) -> Optional[dict]:
    """
    Charge un kit par id avec contrôle d'accès:
    - Authenticated non admin: filtre supplémentaire user_id = principal.user_id
    - Admin ou invité: lecture par id seule
    Retourne None si introuvable ou non accessible. Les erreurs d'accès BD remontent à l'appelant.
    """
    query = (
        supabase_client.get_service_supabase()
        .table("kits")
        .select("*")
        .eq("id", kit_id)
    )
    if isinstance(principal, Authenticated) and not principal.is_admin:
        query = query.eq("user_id", principal.user_id)
    res = query.limit(1).execute()
    return supabase_client.first_row(res)

def update_intake(kit_id: str, intake_json: Dict[str, Any]) -> Optional[dict]:
    """Persiste intake_json + edited_at; retourne la ligne mise à jour, None en cas d'échec."""
    now = datetime.now(timezone.utc).isoformat()
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("kits")
            .update({"intake_json": intake_json, "edited_at": now})
            .eq("id", kit_id)
            .execute()
        )
        row = supabase_client.first_row(res)
        # Certaines politiques ne renvoient pas la ligne: on reconstruit le minimum utile
        return row or {"id": kit_id, "intake_json": intake_json, "edited_at": now}
    except Exception:
        logger.exception("kits.repository.update_intake failed kit_id=%s", kit_id)
        return None

def flag_kit_for_review(kit_id: str) -> bool:
    """Kit d'une commande Pro payée: revue humaine requise (qa_required, status editing)."""
    (
        supabase_client.get_service_supabase()
        .table("kits")
        .update({
            "qa_required": True,
            "status": "editing",
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })
        .eq("id", kit_id)
        .execute()
    )
    return True

def publish_reviewed_kit(kit_id: str) -> Optional[dict]:
    """
    Revue humaine validée: status published, qa_required false.
    Conditionné à qa_required = true (deux validations concurrentes ne publient qu'une fois).
    Retourne la ligne publiée, None si aucune ligne n'a changé ou en cas d'échec.
    """
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("kits")
            .update({
                "status": "published",
                "qa_required": False,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })
            .eq("id", kit_id)
            .eq("qa_required", True)
            .execute()
        )
        return supabase_client.first_row(res)
    except Exception:
        logger.exception("kits.repository.publish_reviewed_kit failed kit_id=%s", kit_id)
        return None

def reopen_kit_review(kit_id: str) -> bool:
    """Annule une publication: le kit repasse en revue (status editing, qa_required true)."""
    try:
        (
            supabase_client.get_service_supabase()
            .table("kits")
            .update({"status": "editing", "qa_required": True})
            .eq("id", kit_id)
            .execute()
        )
        return True
    except Exception:
        logger.exception("kits.repository.reopen_kit_review failed kit_id=%s", kit_id)
        return False
