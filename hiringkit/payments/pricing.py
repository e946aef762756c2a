"""
Tarifs et construction de la requête de session (pur: pas de Stripe, pas de BD).
"""
from typing import Any, Dict, List, Literal, Optional, get_args
from fastapi import HTTPException

CURRENCY = "usd"

# module hiringkit.payments.pricing
PlanType = Literal["solo", "pro"]

PRICING: Dict[str, Dict[str, Any]] = {
    "solo": {
        "amount": 4900,
        "name": "Solo Kit",
        "description": "Complete 9-document hiring kit with instant download",
    },
    "pro": {
        "amount": 12900,
        "name": "Pro Kit + Human Review",
        "description": "Complete hiring kit with expert review in 4 business hours",
    },
}

PLAN_TYPES = get_args(PlanType)

def get_plan(plan_type: str) -> Dict[str, Any]:
    """Retourne {amount, name, description} du plan; 400 si le plan n'existe pas."""
    if plan_type not in PLAN_TYPES:
        raise HTTPException(status_code=400, detail={"code": "INVALID_PLAN", "message": "Plan inconnu"})
    return PRICING[plan_type]

def to_line_items(kit: Dict[str, Any], plan_type: str) -> List[Dict[str, Any]]:
    """
    Une seule ligne Stripe au prix fixe du plan.
    - product_data.name: "<nom du plan> - <titre du kit>"
    - product_data.metadata: kit_id + plan_type (visible dans le dashboard Stripe)
    """
    plan = get_plan(plan_type)
    kit_id = str(kit.get("id") or "")
    title = kit.get("title") or "Hiring Kit"
    return [{
        "quantity": 1,
        "price_data": {
            "currency": CURRENCY,
            "unit_amount": plan["amount"],
            "product_data": {
                "name": f"{plan['name']} - {title}",
                "description": plan["description"],
                "metadata": {"kit_id": kit_id, "plan_type": plan_type},
            },
        },
    }]

def resolve_payer_id(kit: Dict[str, Any], current_user_id: Optional[str]) -> str:
    """Payeur: propriétaire du kit, sinon utilisateur courant, sinon 'guest'."""
    return str(kit.get("user_id") or current_user_id or "guest")

def make_metadata(*, kit_id: str, plan_type: str, payer_id: str, org_id: str, order_id: str) -> Dict[str, str]:
    """Métadonnées de session (Stripe n'accepte que des chaînes)."""
    return {
        "kit_id": str(kit_id),
        "plan_type": str(plan_type),
        "user_id": str(payer_id),
        "org_id": str(org_id),
        "order_id": str(order_id),
    }
