"""
Accès aux données pour la feature 'orders' (table orders).
Écritures: retournent la ligne (dict) ou None en cas d'échec (loggé).
Lectures: les erreurs remontent à l'appelant (converties en 500 par les vues).
"""
from datetime import datetime, timezone
from typing import List, Optional
import logging

import hiringkit.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

AWAITING_PAYMENT = "awaiting_payment"
PAID = "paid"
QA_PENDING = "qa_pending"
FAILED = "failed"
READY = "ready"

ORDER_STATUSES = ("draft", AWAITING_PAYMENT, PAID, QA_PENDING, READY, "delivered", FAILED)

KIT_SNAPSHOT = "kits(title, status, qa_required)"

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

# module hiringkit.orders.repository
def insert_order(
    *,
    org_id: str,
    user_id: Optional[str],
    kit_id: str,
    plan_type: str,
    total_cents: int,
    stripe_session_id: Optional[str] = None,
) -> Optional[dict]:
    """
    Insère une commande au statut 'awaiting_payment'.
    - user_id peut être None (checkout invité)
    - stripe_session_id est en général renseigné ensuite via attach_session
    """
    row = {
        "org_id": org_id,
        "user_id": user_id,
        "kit_id": kit_id,
        "status": AWAITING_PAYMENT,
        "plan_type": plan_type,
        "total_cents": int(total_cents),
        "stripe_session_id": stripe_session_id,
    }
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .insert(row)
            .execute()
        )
        return supabase_client.first_row(res)
    except Exception:
        logger.exception("orders.repository.insert_order failed kit_id=%s org_id=%s", kit_id, org_id)
        return None

def attach_session(order_id: str, stripe_session_id: str) -> bool:
    """Renseigne l'identifiant de session Stripe sur une commande existante."""
    try:
        (
            supabase_client.get_service_supabase()
            .table("orders")
            .update({"stripe_session_id": stripe_session_id, "updated_at": _now()})
            .eq("id", order_id)
            .execute()
        )
        return True
    except Exception:
        logger.exception("orders.repository.attach_session failed order_id=%s session_id=%s", order_id, stripe_session_id)
        return False

def update_order_status(order_id: str, status: str) -> bool:
    try:
        (
            supabase_client.get_service_supabase()
            .table("orders")
            .update({"status": status, "updated_at": _now()})
            .eq("id", order_id)
            .execute()
        )
        return True
    except Exception:
        logger.exception("orders.repository.update_order_status failed order_id=%s status=%s", order_id, status)
        return False

def mark_order_failed(order_id: str) -> bool:
    """Compensation: la session de paiement n'a pas pu être créée pour cette commande."""
    return update_order_status(order_id, FAILED)

def mark_reviewed_orders_ready(kit_id: str) -> bool:
    """Commandes d'un kit en 'qa_pending' -> 'ready' une fois la revue validée."""
    try:
        (
            supabase_client.get_service_supabase()
            .table("orders")
            .update({"status": READY, "updated_at": _now()})
            .eq("kit_id", kit_id)
            .eq("status", QA_PENDING)
            .execute()
        )
        return True
    except Exception:
        logger.exception("orders.repository.mark_reviewed_orders_ready failed kit_id=%s", kit_id)
        return False

def get_latest_order_for_kit(kit_id: str) -> Optional[dict]:
    """Commande la plus récente d'un kit (created_at décroissant), avec un aperçu du kit."""
    res = (
        supabase_client.get_service_supabase()
        .table("orders")
        .select(f"*, {KIT_SNAPSHOT}")
        .eq("kit_id", kit_id)
        .order("created_at", desc=True)
        .limit(1)
        .execute()
    )
    return supabase_client.first_row(res)

def get_order_by_id(order_id: str) -> Optional[dict]:
    res = (
        supabase_client.get_service_supabase()
        .table("orders")
        .select("*")
        .eq("id", order_id)
        .limit(1)
        .execute()
    )
    return supabase_client.first_row(res)

def get_order_by_session(stripe_session_id: str) -> Optional[dict]:
    res = (
        supabase_client.get_service_supabase()
        .table("orders")
        .select("*")
        .eq("stripe_session_id", stripe_session_id)
        .limit(1)
        .execute()
    )
    return supabase_client.first_row(res)

def list_orders(status: Optional[str] = None, page: int = 1, limit: int = 20) -> List[dict]:
    """Commandes pour le tableau de bord admin, plus récentes d'abord, paginées."""
    start = (max(page, 1) - 1) * limit
    query = (
        supabase_client.get_service_supabase()
        .table("orders")
        .select("*, kits(id, title, status, qa_required)")
    )
    if status:
        query = query.eq("status", status)
    res = query.order("created_at", desc=True).range(start, start + limit - 1).execute()
    return res.data or []
