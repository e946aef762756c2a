import pytest
from fastapi import HTTPException

from hiringkit.payments import pricing

def test_plan_amounts():
    assert pricing.get_plan("solo")["amount"] == 4900
    assert pricing.get_plan("pro")["amount"] == 12900
    assert pricing.PLAN_TYPES == ("solo", "pro")

@pytest.mark.parametrize("plan_type", ["enterprise", "", None, "SOLO"])
def test_unknown_plan_rejected(plan_type):
    with pytest.raises(HTTPException) as exc:
        pricing.get_plan(plan_type)
    assert exc.value.status_code == 400
    assert exc.value.detail["code"] == "INVALID_PLAN"

def test_to_line_items_single_line():
    kit = {"id": "k1", "title": "Head of Sales"}
    items = pricing.to_line_items(kit, "pro")
    assert len(items) == 1
    item = items[0]
    assert item["quantity"] == 1
    assert item["price_data"]["currency"] == "usd"
    assert item["price_data"]["unit_amount"] == 12900
    product = item["price_data"]["product_data"]
    assert product["name"] == "Pro Kit + Human Review - Head of Sales"
    assert product["metadata"] == {"kit_id": "k1", "plan_type": "pro"}

def test_to_line_items_default_title():
    items = pricing.to_line_items({"id": "k1"}, "solo")
    assert items[0]["price_data"]["product_data"]["name"] == "Solo Kit - Hiring Kit"

def test_resolve_payer_id_precedence():
    assert pricing.resolve_payer_id({"user_id": "owner"}, "current") == "owner"
    assert pricing.resolve_payer_id({"user_id": None}, "current") == "current"
    assert pricing.resolve_payer_id({}, None) == "guest"

def test_make_metadata_all_strings():
    meta = pricing.make_metadata(kit_id="k1", plan_type="solo", payer_id="guest", org_id="o1", order_id=42)
    assert meta == {"kit_id": "k1", "plan_type": "solo", "user_id": "guest", "org_id": "o1", "order_id": "42"}

def test_plan_types_cover_pricing_table():
    assert set(pricing.PLAN_TYPES) == set(pricing.PRICING)
