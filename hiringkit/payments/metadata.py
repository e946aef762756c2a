"""
Lecture des événements/sessions Stripe (webhook) vers des dicts Python simples.
"""
from typing import Any, Dict, Optional

# module hiringkit.payments.metadata
def to_dict(obj: Any) -> Dict[str, Any]:
    """Convertit un StripeObject (ou dict) en dict récursif; {} si None."""
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return obj
    for attr in ("to_dict_recursive", "to_dict"):
        fn = getattr(obj, attr, None)
        if callable(fn):
            return fn()
    return dict(obj)

def extract_session(event: Any) -> Dict[str, Any]:
    """Objet session d'un événement checkout.session.* (event.data.object)."""
    data = to_dict(event).get("data") or {}
    return to_dict(data.get("object"))

def extract_order_ref(session: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """
    Références posées à la création de la session:
    {order_id, kit_id, plan_type, session_id}; valeurs absentes -> None.
    """
    meta = (session or {}).get("metadata") or {}
    return {
        "order_id": meta.get("order_id") or None,
        "kit_id": meta.get("kit_id") or None,
        "plan_type": meta.get("plan_type") or None,
        "session_id": (session or {}).get("id") or None,
    }
