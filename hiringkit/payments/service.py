"""
Cas d'usage 'payments': orchestre kits, organisations, commandes et Stripe pour un checkout.

Ordre des écritures:
  1) commande 'awaiting_payment' insérée AVANT l'appel Stripe (aucune session orpheline sans commande)
  2) session Stripe créée avec idempotency_key dérivée de la commande et metadata.order_id
  3) stripe_session_id rattaché à la commande
Si Stripe échoue, la commande passe à 'failed' (compensation). Si le rattachement échoue,
le webhook retrouve la commande via metadata.order_id.
"""
from typing import Any, Dict, Optional

from hiringkit.auth.principal import Authenticated, Principal
from hiringkit.kits import repository as kits_repository
from hiringkit.orders import repository as orders_repository
from hiringkit.utils.logging_config import EventLogger, get_event_logger
from hiringkit.utils.responses import api_error
from . import pricing
from . import repository
from . import stripe_client

def resolve_organization(principal: Principal, kit: Dict[str, Any], requested_org_id: Optional[str] = None,
                         events: Optional[EventLogger] = None) -> str:
    """
    Organisation de la commande:
    - organisation du principal, sinon org_id demandé explicitement
    - invité sans organisation: création d'une organisation « Guest Checkout » (500 si échec)
    - utilisateur authentifié sans organisation: organisation du kit, sinon 400
    """
    events = events or get_event_logger()
    org_id = principal.org_id or requested_org_id

    if not org_id and not isinstance(principal, Authenticated):
        guest_org = repository.create_guest_organization()
        if not guest_org or not guest_org.get("id"):
            events.error("guest_org_creation_failed", kit_id=kit.get("id"))
            raise api_error(500, "ORG_CREATION_ERROR", "Échec de la création de l'organisation invitée")
        org_id = guest_org["id"]
        events.info("guest_org_created", kit_id=kit.get("id"), guest_org_id=org_id)

    if not org_id:
        org_id = kit.get("org_id")

    if not org_id:
        events.error("checkout_org_missing", kit_id=kit.get("id"), user_id=principal.user_id)
        raise api_error(400, "ORG_REQUIRED_ERROR", "Organisation requise pour le checkout")
    return str(org_id)

def create_checkout(
    *,
    kit_id: str,
    plan_type: str,
    success_url: str,
    cancel_url: str,
    principal: Principal,
    requested_org_id: Optional[str] = None,
    events: Optional[EventLogger] = None,
) -> Dict[str, str]:
    """
    Crée une session de paiement pour un kit et la commande associée.
    Retour: {"url": <url de redirection Stripe>, "session_id": <id de session>}
    Erreurs: 400 plan/organisation, 404 kit inaccessible, 500 échec BD ou Stripe.
    """
    events = (events or get_event_logger()).bind(kit_id=kit_id, plan_type=plan_type, user_id=principal.user_id)
    plan = pricing.get_plan(plan_type)

    kit = kits_repository.get_accessible_kit(kit_id, principal)
    if not kit:
        events.info("checkout_kit_not_found")
        raise api_error(404, "KIT_NOT_FOUND", "Kit introuvable")

    org_id = resolve_organization(principal, kit, requested_org_id, events=events)
    order_user_id = kit.get("user_id") or principal.user_id or None

    order = orders_repository.insert_order(
        org_id=org_id,
        user_id=order_user_id,
        kit_id=kit_id,
        plan_type=plan_type,
        total_cents=plan["amount"],
    )
    if not order or not order.get("id"):
        events.error("checkout_order_creation_failed", org_id=org_id)
        raise api_error(500, "ORDER_CREATION_ERROR", "Échec de la création de la commande")
    order_id = str(order["id"])

    metadata = pricing.make_metadata(
        kit_id=kit_id,
        plan_type=plan_type,
        payer_id=pricing.resolve_payer_id(kit, principal.user_id),
        org_id=org_id,
        order_id=order_id,
    )
    try:
        session = stripe_client.create_session(
            line_items=pricing.to_line_items(kit, plan_type),
            success_url=success_url,
            cancel_url=cancel_url,
            metadata=metadata,
            customer_email=principal.email,
            idempotency_key=f"checkout-{order_id}",
        )
    except Exception:
        events.exception("checkout_session_failed", order_id=order_id)
        orders_repository.mark_order_failed(order_id)
        raise api_error(500, "CHECKOUT_SESSION_ERROR", "Échec de la création de la session de paiement")

    if not orders_repository.attach_session(order_id, session["id"]):
        events.warning("checkout_session_attach_failed", order_id=order_id, session_id=session["id"])

    events.info("checkout_session_created", order_id=order_id, session_id=session["id"], amount=plan["amount"], org_id=org_id)
    return {"url": session["url"], "session_id": session["id"]}
