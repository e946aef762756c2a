# module hiringkit.admin.service

from typing import Any, Dict, List, Optional
import logging

from hiringkit.auth.principal import Authenticated
from hiringkit.kits import repository as kits_repository
from hiringkit.orders import repository as orders_repository
from hiringkit.utils.responses import api_error

logger = logging.getLogger(__name__)

def list_orders(status: Optional[str] = None, page: int = 1, limit: int = 20) -> List[dict]:
    """'all' ou None: pas de filtre. Statut inconnu -> 400 INVALID_STATUS."""
    if status in (None, "", "all"):
        status = None
    elif status not in orders_repository.ORDER_STATUSES:
        raise api_error(400, "INVALID_STATUS", f"Statut inconnu: {status}")
    return orders_repository.list_orders(status=status, page=page, limit=limit)

def mark_order_paid(order_id: str) -> Dict[str, Any]:
    """
    Passage manuel d'une commande en 'paid' (paiement constaté hors Stripe).
    Autorisé uniquement depuis 'awaiting_payment'.
    """
    order = orders_repository.get_order_by_id(order_id)
    if not order:
        raise api_error(404, "ORDER_NOT_FOUND", "Commande introuvable")

    previous = order.get("status")
    if previous != orders_repository.AWAITING_PAYMENT:
        raise api_error(400, "INVALID_STATUS", f"Impossible de marquer la commande payée. Statut actuel: {previous}")

    if not orders_repository.update_order_status(order_id, orders_repository.PAID):
        raise api_error(500, "UPDATE_FAILED", "Échec de la mise à jour du statut de commande")

    logger.info("admin.mark_order_paid order_id=%s previous=%s", order_id, previous)
    return {"order_id": order_id, "new_status": orders_repository.PAID, "previous_status": previous}

def approve_kit(kit_id: str, admin: Authenticated) -> Dict[str, Any]:
    """
    Valide la revue humaine d'un kit Pro.
    Étapes:
      1) kit introuvable -> 404 KIT_NOT_FOUND; kit sans revue en attente -> 400 INVALID_STATE
      2) kit publié (qa_required false) -> 500 DATABASE_ERROR si rien n'a changé
      3) commandes 'qa_pending' du kit -> 'ready'; en cas d'échec le kit repasse en revue
         puis 500 DATABASE_ERROR
    Retour: {"kit": <kit publié>, "message": ...}
    """
    kit = kits_repository.get_accessible_kit(kit_id, admin)
    if not kit:
        raise api_error(404, "KIT_NOT_FOUND", "Kit introuvable")
    if not kit.get("qa_required"):
        raise api_error(400, "INVALID_STATE", "Le kit n'attend pas de revue")

    published = kits_repository.publish_reviewed_kit(kit_id)
    if not published:
        raise api_error(500, "DATABASE_ERROR", "Échec de la publication du kit")

    if not orders_repository.mark_reviewed_orders_ready(kit_id):
        if not kits_repository.reopen_kit_review(kit_id):
            logger.error("admin.approve_kit: kit publié sans commande prête kit_id=%s", kit_id)
        raise api_error(500, "DATABASE_ERROR", "Échec de la mise à jour des commandes")

    logger.info("admin.approve_kit kit_id=%s admin_id=%s previous_status=%s", kit_id, admin.user_id, kit.get("status"))
    return {"kit": published, "message": "Kit approuvé et prêt au téléchargement"}
