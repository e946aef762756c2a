"""
Module 'payments' (feature-first): point d'entrée public.
Réunit tarification, client Stripe, lecture des événements, repository BD, checkout et webhooks.
"""

from .pricing import PRICING, get_plan, to_line_items, make_metadata, resolve_payer_id
from .metadata import to_dict, extract_session, extract_order_ref
from .stripe_client import require_stripe, create_session, parse_event
from .repository import create_guest_organization, record_webhook_event, finish_webhook_event
from .service import create_checkout, resolve_organization
from .webhooks import process_event

__all__ = [
    # pricing
    "PRICING",
    "get_plan",
    "to_line_items",
    "make_metadata",
    "resolve_payer_id",
    # metadata
    "to_dict",
    "extract_session",
    "extract_order_ref",
    # stripe
    "require_stripe",
    "create_session",
    "parse_event",
    # repository
    "create_guest_organization",
    "record_webhook_event",
    "finish_webhook_event",
    # services
    "create_checkout",
    "resolve_organization",
    "process_event",
]
