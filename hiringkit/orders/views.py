# module hiringkit.orders.views
from fastapi import APIRouter, Depends, HTTPException

from hiringkit.orders import service as orders_service
from hiringkit.utils.logging_config import EventLogger, get_event_logger
from hiringkit.utils.responses import api_error

router = APIRouter(prefix="/api/orders", tags=["Orders API"])

@router.get("/{kit_id}/status")
def get_order_status(kit_id: str, events: EventLogger = Depends(get_event_logger)):
    """
    Statut de la dernière commande d'un kit (page de succès / suivi).
    - Réponse: {id, status, plan_type, total_cents, kit, created_at}
    - 404 si aucune commande, 500 si la lecture échoue
    """
    try:
        return orders_service.get_order_status(kit_id)
    except HTTPException:
        events.info("order_status_not_found", kit_id=kit_id)
        raise
    except Exception:
        events.exception("order_status_error", kit_id=kit_id)
        raise api_error(500, "SERVER_ERROR", "Échec de la lecture du statut de commande")
