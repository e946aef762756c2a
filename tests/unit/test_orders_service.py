import pytest
from fastapi import HTTPException

from hiringkit.orders import service

@pytest.mark.parametrize(
    "total_cents, stored, expected",
    [
        (4900, None, "solo"),
        (12900, None, "pro"),
        (10000, None, "pro"),
        (9999, None, "solo"),
        (None, None, "solo"),
        ("abc", None, "solo"),
        (12900, "solo", "solo"),
        (4900, "pro", "pro"),
        (12900, "unknown", "pro"),
    ],
)
def test_derive_plan_type(total_cents, stored, expected):
    assert service.derive_plan_type(total_cents, stored) == expected

def test_order_status_returns_newest(fake_db):
    fake_db.add_kit("k1", title="Designer")
    first = fake_db.insert_order(org_id="o", user_id=None, kit_id="k1", plan_type="solo", total_cents=4900)
    second = fake_db.insert_order(org_id="o", user_id=None, kit_id="k1", plan_type="pro", total_cents=12900)
    assert first["created_at"] < second["created_at"]

    res = service.get_order_status("k1")
    assert res["id"] == second["id"]
    assert res["plan_type"] == "pro"
    assert res["total_cents"] == 12900
    assert res["status"] == "awaiting_payment"
    assert res["kit"] == {"title": "Designer", "status": "draft", "qa_required": False}
    assert set(res) == {"id", "status", "plan_type", "total_cents", "kit", "created_at"}

def test_order_status_threshold_fallback(monkeypatch):
    row = {"id": "o1", "status": "paid", "total_cents": 10000, "kits": None, "created_at": "2025-01-01T00:00:00+00:00"}
    monkeypatch.setattr("hiringkit.orders.repository.get_latest_order_for_kit", lambda kit_id: row)
    assert service.get_order_status("k1")["plan_type"] == "pro"

def test_order_status_not_found(fake_db):
    with pytest.raises(HTTPException) as exc:
        service.get_order_status("missing")
    assert exc.value.status_code == 404
    assert exc.value.detail["code"] == "ORDER_NOT_FOUND"
