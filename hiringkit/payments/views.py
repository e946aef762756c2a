import time
from typing import Callable, Optional
from urllib.parse import urlparse

from fastapi import APIRouter, Request, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator

from hiringkit.auth.principal import Principal
from hiringkit.utils.logging_config import EventLogger, get_event_logger
from hiringkit.utils.rate_limit import optional_rate_limit
from hiringkit.utils.responses import api_error
from hiringkit.utils.security import principal_resolver
from hiringkit.payments import pricing
from hiringkit.payments import stripe_client
from hiringkit.payments import service as payments_service
from hiringkit.payments import webhooks

router = APIRouter(tags=["Payments API"])

class CheckoutRequest(BaseModel):
    kit_id: str = Field(min_length=1)
    plan_type: pricing.PlanType = "solo"
    success_url: str
    cancel_url: str

    @field_validator("success_url", "cancel_url")
    @classmethod
    def _absolute_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("URL absolue http(s) attendue")
        return v

# module hiringkit.payments.views
@router.post("/api/checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_checkout_session(
    body: CheckoutRequest,
    org_id: Optional[str] = None,
    resolve_principal: Callable[[], Principal] = Depends(principal_resolver),
    events: EventLogger = Depends(get_event_logger),
):
    """
    Crée une session Checkout Stripe pour un kit (invité ou utilisateur connecté).
    - Entrée JSON: { "kit_id", "plan_type": "solo"|"pro", "success_url", "cancel_url" }
    - Query optionnelle: org_id (organisation explicite)
    - Réponse: { "url", "session_id" }
    - Erreurs: 400 (validation, organisation), 404 (kit), 500 (BD/Stripe)
    Le plan est contrôlé avant toute résolution du token (aucun appel Supabase sur un 400).
    """
    started = time.monotonic()
    pricing.get_plan(body.plan_type)
    principal = resolve_principal()
    try:
        result = payments_service.create_checkout(
            kit_id=body.kit_id,
            plan_type=body.plan_type,
            success_url=body.success_url,
            cancel_url=body.cancel_url,
            principal=principal,
            requested_org_id=org_id,
            events=events,
        )
    except HTTPException:
        raise
    except Exception:
        events.exception("checkout_error", kit_id=body.kit_id, user_id=principal.user_id)
        raise api_error(500, "SERVER_ERROR", "Échec de la création du checkout")

    events.info(
        "checkout_completed",
        kit_id=body.kit_id,
        plan_type=body.plan_type,
        duration_ms=int((time.monotonic() - started) * 1000),
    )
    return result

@router.post("/api/stripe/webhook", include_in_schema=False)
async def stripe_webhook(request: Request, events: EventLogger = Depends(get_event_logger)):
    """
    Webhook Stripe: vérifie la signature puis réconcilie la commande.
    - 400 si en-tête Stripe-Signature absent ou signature/payload invalide
    - 500 si le traitement échoue (Stripe réessaie)
    """
    sig_header = request.headers.get("stripe-signature")
    if not sig_header:
        raise api_error(400, "MISSING_SIGNATURE", "En-tête Stripe-Signature manquant")

    payload = await request.body()
    try:
        event = stripe_client.parse_event(payload, sig_header)
    except Exception:
        events.warning("webhook_signature_invalid")
        raise api_error(400, "INVALID_SIGNATURE", "Signature du webhook invalide")

    try:
        return webhooks.process_event(event, events=events)
    except HTTPException:
        raise
    except Exception:
        events.exception("webhook_error")
        raise api_error(500, "SERVER_ERROR", "Échec du traitement du webhook")
