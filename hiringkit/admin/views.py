from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from hiringkit.admin import service as admin_service
from hiringkit.auth.principal import Authenticated
from hiringkit.utils.logging_config import EventLogger, get_event_logger
from hiringkit.utils.responses import api_error
from hiringkit.utils.security import require_admin
# module hiringkit.admin.views

router = APIRouter(prefix="/api/admin", tags=["Admin"])

# API JSON: tableau de bord des commandes
@router.get("/orders")
def admin_list_orders(
    status: Optional[str] = Query(default="all"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    admin: Authenticated = Depends(require_admin),
    events: EventLogger = Depends(get_event_logger),
):
    try:
        orders = admin_service.list_orders(status=status, page=page, limit=limit)
    except HTTPException:
        raise
    except Exception:
        events.exception("admin_orders_list_error", admin_id=admin.user_id, status=status)
        raise api_error(500, "DATABASE_ERROR", "Échec de la lecture des commandes")
    return {"orders": orders, "page": page, "limit": limit}

@router.post("/orders/{order_id}/mark-paid")
def admin_mark_order_paid(
    order_id: str,
    admin: Authenticated = Depends(require_admin),
    events: EventLogger = Depends(get_event_logger),
):
    try:
        result = admin_service.mark_order_paid(order_id)
    except HTTPException as e:
        events.info("admin_mark_paid_rejected", order_id=order_id, admin_id=admin.user_id, status=e.status_code)
        raise
    except Exception:
        events.exception("admin_mark_paid_error", order_id=order_id, admin_id=admin.user_id)
        raise api_error(500, "SERVER_ERROR", "Échec du passage de la commande en payée")
    events.info("admin_order_marked_paid", order_id=order_id, admin_id=admin.user_id)
    return result

@router.post("/kits/{kit_id}/approve")
def admin_approve_kit(
    kit_id: str,
    admin: Authenticated = Depends(require_admin),
    events: EventLogger = Depends(get_event_logger),
):
    try:
        result = admin_service.approve_kit(kit_id, admin)
    except HTTPException as e:
        events.info("admin_kit_approval_rejected", kit_id=kit_id, admin_id=admin.user_id, status=e.status_code)
        raise
    except Exception:
        events.exception("admin_kit_approval_error", kit_id=kit_id, admin_id=admin.user_id)
        raise api_error(500, "SERVER_ERROR", "Échec de la validation du kit")
    events.info("admin_kit_approved", kit_id=kit_id, admin_id=admin.user_id)
    return result
