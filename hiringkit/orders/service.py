"""Lecture du statut de commande d'un kit."""
from typing import Any, Dict, Optional

from hiringkit.utils.responses import api_error
from . import repository

# Seuil historique: les commandes sans plan_type stocké sont classées par montant
PRO_THRESHOLD_CENTS = 10000

def derive_plan_type(total_cents: Any, stored_plan: Optional[str] = None) -> str:
    """Plan d'une commande: plan_type stocké si présent, sinon 'pro' à partir de 10000 centimes."""
    if stored_plan in ("solo", "pro"):
        return stored_plan
    try:
        amount = int(total_cents or 0)
    except (TypeError, ValueError):
        amount = 0
    return "pro" if amount >= PRO_THRESHOLD_CENTS else "solo"

def get_order_status(kit_id: str) -> Dict[str, Any]:
    order = repository.get_latest_order_for_kit(kit_id)
    if not order:
        raise api_error(404, "ORDER_NOT_FOUND", "Aucune commande pour ce kit")
    return {
        "id": order.get("id"),
        "status": order.get("status"),
        "plan_type": derive_plan_type(order.get("total_cents"), order.get("plan_type")),
        "total_cents": order.get("total_cents"),
        "kit": order.get("kits"),
        "created_at": order.get("created_at"),
    }
