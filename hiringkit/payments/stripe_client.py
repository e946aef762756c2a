"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
"""
import stripe
from typing import Any, Dict, List, Optional

from hiringkit.config import STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET, STRIPE_API_VERSION

# module hiringkit.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key (STRIPE_SECRET_KEY) et la version d'API épinglée.
    - Sans clé, les appels échouent côté SDK (AuthenticationError: No API key provided).
    """
    if STRIPE_SECRET_KEY:
        stripe.api_key = STRIPE_SECRET_KEY
    if STRIPE_API_VERSION:
        stripe.api_version = STRIPE_API_VERSION
    return stripe

def create_session(
    *,
    line_items: List[Dict[str, Any]],
    success_url: str,
    cancel_url: str,
    metadata: Dict[str, str],
    customer_email: Optional[str] = None,
    idempotency_key: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Crée une session Stripe Checkout en paiement unique.
    - Codes promo autorisés, collecte d'adresse de facturation 'auto'
    - customer_email pré-rempli si l'utilisateur est connu
    - idempotency_key: une même clé ne crée jamais deux sessions
    Retour: dict session (ex: {"id": "cs_test_...", "url": "https://checkout.stripe.com/..."})
    """
    require_stripe()
    params: Dict[str, Any] = {
        "mode": "payment",
        "payment_method_types": ["card"],
        "line_items": line_items,
        "success_url": success_url,
        "cancel_url": cancel_url,
        "metadata": metadata,
        "allow_promotion_codes": True,
        "billing_address_collection": "auto",
    }
    if customer_email:
        params["customer_email"] = customer_email
    if idempotency_key:
        params["idempotency_key"] = idempotency_key
    session = stripe.checkout.Session.create(**params)
    return {"id": session["id"], "url": session["url"]}

def parse_event(payload: bytes, sig_header: Optional[str]):
    """
    Valide la signature d'un webhook (Stripe-Signature + STRIPE_WEBHOOK_SECRET) et retourne l'événement.
    Lève stripe.error.SignatureVerificationError / ValueError si invalide.
    """
    require_stripe()
    return stripe.Webhook.construct_event(payload, sig_header or "", STRIPE_WEBHOOK_SECRET or "")
