"""
Accès aux données pour la feature 'payments' (organisations invitées, journal des webhooks).
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

import hiringkit.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

GUEST_ORG_NAME = "Guest Checkout"

# module hiringkit.payments.repository
def create_guest_organization() -> Optional[dict]:
    """
    Crée une organisation « Guest Checkout » pour satisfaire la contrainte org_id des commandes.
    Non idempotent: chaque appel crée une nouvelle organisation. None en cas d'échec.
    """
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("organizations")
            .insert({"name": GUEST_ORG_NAME})
            .execute()
        )
        return supabase_client.first_row(res)
    except Exception:
        logger.exception("payments.repository.create_guest_organization failed")
        return None

def get_webhook_event(event_id: str) -> Optional[dict]:
    res = (
        supabase_client.get_service_supabase()
        .table("webhook_events")
        .select("event_id, processing_status")
        .eq("event_id", event_id)
        .limit(1)
        .execute()
    )
    return supabase_client.first_row(res)

def record_webhook_event(event_id: str, event_type: str, metadata: Dict[str, Any]) -> bool:
    """Enregistre (upsert) l'événement au statut 'processing'."""
    try:
        (
            supabase_client.get_service_supabase()
            .table("webhook_events")
            .upsert(
                {
                    "event_id": event_id,
                    "event_type": event_type,
                    "metadata": metadata,
                    "processing_status": "processing",
                },
                on_conflict="event_id",
            )
            .execute()
        )
        return True
    except Exception:
        logger.exception("payments.repository.record_webhook_event failed event_id=%s", event_id)
        return False

def finish_webhook_event(event_id: str, status: str, error_message: Optional[str] = None) -> bool:
    """Clôture l'événement: 'completed' ou 'failed' (+ message d'erreur)."""
    data: Dict[str, Any] = {
        "processing_status": status,
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }
    if error_message:
        data["error_message"] = error_message[:1000]
    try:
        (
            supabase_client.get_service_supabase()
            .table("webhook_events")
            .update(data)
            .eq("event_id", event_id)
            .execute()
        )
        return True
    except Exception:
        logger.exception("payments.repository.finish_webhook_event failed event_id=%s", event_id)
        return False
