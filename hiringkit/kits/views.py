"""Endpoints kits.
- GET /api/kits/{kit_id}: lecture d'un kit (propriétaire ou admin; invité: lecture par id).
- PATCH /api/kits/{kit_id}/inputs: mise à jour partielle de l'intake ({field_updates: {...}}).
Un kit non accessible et un kit inexistant renvoient tous deux 404.
"""
import time
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException

from hiringkit.auth.principal import Principal
from hiringkit.kits import service as kits_service
from hiringkit.kits.schemas import UpdateInputsRequest
from hiringkit.utils.logging_config import EventLogger, get_event_logger
from hiringkit.utils.responses import api_error
from hiringkit.utils.security import get_principal, principal_resolver

# module hiringkit.kits.views
router = APIRouter(prefix="/api/kits", tags=["Kits API"])

@router.get("/{kit_id}")
def get_kit(
    kit_id: str,
    principal: Principal = Depends(get_principal),
    events: EventLogger = Depends(get_event_logger),
):
    try:
        return kits_service.get_kit(kit_id, principal)
    except HTTPException:
        events.info("kit_not_found", kit_id=kit_id, user_id=principal.user_id)
        raise
    except Exception:
        events.exception("kit_read_error", kit_id=kit_id, user_id=principal.user_id)
        raise api_error(500, "SERVER_ERROR", "Échec de la lecture du kit")

@router.patch("/{kit_id}/inputs")
def update_kit_inputs(
    kit_id: str,
    body: UpdateInputsRequest,
    resolve_principal: Callable[[], Principal] = Depends(principal_resolver),
    events: EventLogger = Depends(get_event_logger),
):
    """
    Fusionne field_updates dans intake_json du kit puis persiste.
    - 400: corps invalide, aucune mise à jour, ou intake invalide après fusion
    - 404: kit introuvable ou non accessible
    - 500: échec BD
    Une mise à jour vide est refusée avant la résolution du token.
    """
    started = time.monotonic()
    field_updates = body.field_updates.provided_fields()
    if not field_updates:
        raise api_error(400, "NO_UPDATES", "Aucune mise à jour fournie")
    principal = resolve_principal()
    try:
        result = kits_service.apply_intake_patch(kit_id, field_updates, principal)
    except HTTPException as e:
        events.info("kit_inputs_rejected", kit_id=kit_id, user_id=principal.user_id, status=e.status_code)
        raise
    except Exception:
        events.exception("kit_inputs_update_error", kit_id=kit_id, user_id=principal.user_id)
        raise api_error(500, "SERVER_ERROR", "Échec de la mise à jour du kit")

    events.info(
        "kit_inputs_updated",
        kit_id=kit_id,
        user_id=principal.user_id,
        updated_fields=result["updated_fields"],
        duration_ms=int((time.monotonic() - started) * 1000),
    )
    return result
