"""
Réconciliation des commandes à partir des webhooks Stripe.
- Idempotence: chaque event_id est journalisé dans webhook_events (processing -> completed/failed);
  un événement déjà 'completed' ou en cours n'est pas retraité.
- checkout.session.completed (payé) / async_payment_succeeded: commande 'paid' ('qa_pending' pour Pro,
  et le kit est marqué pour revue humaine).
- checkout.session.async_payment_failed / expired: commande 'failed' si toujours en attente.
- La commande est retrouvée par metadata.order_id, sinon par stripe_session_id.
"""
from typing import Any, Dict, Optional

from hiringkit.kits import repository as kits_repository
from hiringkit.orders import repository as orders_repository
from hiringkit.orders.service import derive_plan_type
from hiringkit.utils.logging_config import EventLogger, get_event_logger
from hiringkit.utils.responses import api_error
from . import metadata as meta
from . import repository

PAID_EVENTS = {"checkout.session.completed", "checkout.session.async_payment_succeeded"}
FAILED_EVENTS = {"checkout.session.async_payment_failed", "checkout.session.expired"}

def _find_order(ref: Dict[str, Optional[str]]) -> Optional[dict]:
    order = None
    if ref.get("order_id"):
        order = orders_repository.get_order_by_id(ref["order_id"])
    if not order and ref.get("session_id"):
        order = orders_repository.get_order_by_session(ref["session_id"])
    return order

def mark_paid(session: Dict[str, Any], events: EventLogger) -> str:
    ref = meta.extract_order_ref(session)
    order = _find_order(ref)
    if not order:
        raise LookupError(f"Commande introuvable order_id={ref.get('order_id')} session_id={ref.get('session_id')}")

    if order.get("status") in (orders_repository.PAID, orders_repository.QA_PENDING):
        return "already_paid"

    plan_type = ref.get("plan_type") or derive_plan_type(order.get("total_cents"), order.get("plan_type"))
    status = orders_repository.QA_PENDING if plan_type == "pro" else orders_repository.PAID
    # Kit marqué avant la commande: un échec ici laisse la commande rejouable par Stripe
    if plan_type == "pro":
        kits_repository.flag_kit_for_review(order.get("kit_id") or ref.get("kit_id"))

    if not orders_repository.update_order_status(order["id"], status):
        raise RuntimeError(f"Échec de mise à jour de la commande {order['id']}")

    # Rattrape un rattachement de session manqué au checkout
    if not order.get("stripe_session_id") and ref.get("session_id"):
        orders_repository.attach_session(order["id"], ref["session_id"])

    events.info("payment_processed", order_id=order["id"], kit_id=order.get("kit_id"), plan_type=plan_type, status=status)
    return status

def mark_failed(session: Dict[str, Any], events: EventLogger) -> str:
    ref = meta.extract_order_ref(session)
    order = _find_order(ref)
    if not order:
        raise LookupError(f"Commande introuvable order_id={ref.get('order_id')} session_id={ref.get('session_id')}")
    if order.get("status") != orders_repository.AWAITING_PAYMENT:
        return "unchanged"
    if not orders_repository.update_order_status(order["id"], orders_repository.FAILED):
        raise RuntimeError(f"Échec de mise à jour de la commande {order['id']}")
    events.info("payment_failed", order_id=order["id"], kit_id=order.get("kit_id"))
    return orders_repository.FAILED

def dispatch(event_type: str, session: Dict[str, Any], events: EventLogger) -> str:
    if event_type == "checkout.session.completed" and session.get("payment_status") != "paid":
        # Paiement asynchrone (virement...): attendre async_payment_succeeded
        return "awaiting_async_payment"
    if event_type in PAID_EVENTS:
        return mark_paid(session, events)
    if event_type in FAILED_EVENTS:
        return mark_failed(session, events)
    events.info("webhook_unhandled_event", event_type=event_type)
    return "ignored"

def process_event(event: Any, events: Optional[EventLogger] = None) -> Dict[str, Any]:
    """
    Traite un événement Stripe vérifié.
    Retour: {"received": True, ...}; 500 si l'événement ne peut être journalisé ou traité
    (Stripe réessaiera la livraison).
    """
    data = meta.to_dict(event)
    event_id = str(data.get("id") or "")
    event_type = str(data.get("type") or "")
    events = (events or get_event_logger()).bind(event_id=event_id, event_type=event_type)

    existing = repository.get_webhook_event(event_id)
    if existing and existing.get("processing_status") == "completed":
        events.info("webhook_already_processed")
        return {"received": True, "message": "Événement déjà traité"}
    if existing and existing.get("processing_status") == "processing":
        events.info("webhook_currently_processing")
        return {"received": True, "message": "Événement en cours de traitement"}

    recorded = repository.record_webhook_event(
        event_id,
        event_type,
        {"created": data.get("created"), "livemode": data.get("livemode"), "api_version": data.get("api_version")},
    )
    if not recorded:
        raise api_error(500, "WEBHOOK_RECORD_ERROR", "Échec de l'enregistrement de l'événement")

    try:
        outcome = dispatch(event_type, meta.extract_session(data), events)
    except Exception as e:
        repository.finish_webhook_event(event_id, "failed", error_message=str(e))
        events.exception("webhook_processing_failed")
        raise api_error(500, "WEBHOOK_PROCESSING_ERROR", "Échec du traitement de l'événement")

    repository.finish_webhook_event(event_id, "completed")
    events.info("webhook_completed", outcome=outcome)
    return {"received": True, "outcome": outcome}
