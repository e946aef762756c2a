"""Parcours complets: checkout invité -> statut -> webhook Stripe -> statut final."""
import pytest

from hiringkit.app_setup.factory import create_app
from hiringkit.auth.principal import Authenticated
from fastapi.testclient import TestClient

def _checkout_body(plan_type):
    return {
        "kit_id": "k1",
        "plan_type": plan_type,
        "success_url": "https://app.example.com/kit/k1/success?session_id={CHECKOUT_SESSION_ID}",
        "cancel_url": "https://app.example.com/kit/k1",
    }

def _paid_event(session_id, order_id, plan_type, event_id):
    return {
        "id": event_id,
        "type": "checkout.session.completed",
        "data": {"object": {
            "id": session_id,
            "payment_status": "paid",
            "metadata": {"order_id": order_id, "kit_id": "k1", "plan_type": plan_type},
        }},
    }

def test_guest_solo_checkout_then_status(client, fake_db, fake_stripe):
    fake_db.add_kit("k1", title="Office Manager")

    res = client.post("/api/checkout", json=_checkout_body("solo"))
    assert res.status_code == 200
    assert res.json()["url"].startswith("https://checkout.stripe.test/")

    status = client.get("/api/orders/k1/status").json()
    assert status["status"] == "awaiting_payment"
    assert status["plan_type"] == "solo"
    assert status["total_cents"] == 4900
    assert len(fake_db.organizations) == 1

@pytest.mark.parametrize("plan_type, final_status, qa_required", [("solo", "paid", False), ("pro", "qa_pending", True)])
def test_checkout_then_webhook(client, fake_db, fake_stripe, monkeypatch, plan_type, final_status, qa_required):
    fake_db.add_kit("k1")
    session_id = client.post("/api/checkout", json=_checkout_body(plan_type)).json()["session_id"]
    order_id = fake_stripe.calls[0]["metadata"]["order_id"]

    event = _paid_event(session_id, order_id, plan_type, event_id=f"evt_{plan_type}")
    monkeypatch.setattr("hiringkit.payments.stripe_client.parse_event", lambda payload, sig: event)
    for _ in range(2):
        res = client.post("/api/stripe/webhook", content=b"{}", headers={"Stripe-Signature": "t=1,v1=ok"})
        assert res.status_code == 200

    status = client.get("/api/orders/k1/status").json()
    assert status["status"] == final_status
    assert status["kit"]["qa_required"] is qa_required
    assert fake_db.webhook_events[f"evt_{plan_type}"]["processing_status"] == "completed"

def test_retry_after_stripe_failure(client, fake_db, fake_stripe):
    fake_db.add_kit("k1")
    fake_stripe.fail_with = RuntimeError("api_connection_error")
    assert client.post("/api/checkout", json=_checkout_body("solo")).status_code == 500
    assert client.get("/api/orders/k1/status").json()["status"] == "failed"

    fake_stripe.fail_with = None
    assert client.post("/api/checkout", json=_checkout_body("solo")).status_code == 200
    assert client.get("/api/orders/k1/status").json()["status"] == "awaiting_payment"
    # Une organisation invitée par tentative
    assert len(fake_db.organizations) == 2
    keys = [c["idempotency_key"] for c in fake_stripe.calls]
    assert len(set(keys)) == 2

def test_checkout_rate_limited_with_local_fallback(fake_db, fake_stripe, monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    fake_db.add_kit("k1")
    with TestClient(create_app()) as client:
        codes = [client.post("/api/checkout", json=_checkout_body("solo")).status_code for _ in range(11)]
    assert codes[:10] == [200] * 10
    assert codes[10] == 429

def test_pro_purchase_reviewed_then_ready(client, fake_db, fake_stripe, monkeypatch, as_principal):
    fake_db.add_kit("k1", title="Data Engineer")
    session_id = client.post("/api/checkout", json=_checkout_body("pro")).json()["session_id"]
    order_id = fake_stripe.calls[0]["metadata"]["order_id"]

    event = _paid_event(session_id, order_id, "pro", event_id="evt_review")
    monkeypatch.setattr("hiringkit.payments.stripe_client.parse_event", lambda payload, sig: event)
    assert client.post("/api/stripe/webhook", content=b"{}", headers={"Stripe-Signature": "t=1,v1=ok"}).status_code == 200
    assert client.get("/api/orders/k1/status").json()["status"] == "qa_pending"

    as_principal(Authenticated(user_id="admin-1", email="admin@example.com", role="admin"))
    assert client.post("/api/admin/kits/k1/approve").status_code == 200

    status = client.get("/api/orders/k1/status").json()
    assert status["status"] == "ready"
    assert status["kit"]["status"] == "published"
    assert status["kit"]["qa_required"] is False
