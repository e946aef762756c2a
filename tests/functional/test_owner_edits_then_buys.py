"""Parcours utilisateur connecté: édition de l'intake puis achat Pro du même kit."""

def test_owner_edits_intake_then_checks_out(client, fake_db, fake_stripe, as_user):
    fake_db.add_kit("k1", user_id=as_user.user_id, org_id="org-kit", intake_json={"role_title": "Dev"})

    res = client.patch("/api/kits/k1/inputs", json={"field_updates": {"department": "Engineering"}})
    assert res.status_code == 200
    assert res.json()["intake_data"] == {"role_title": "Dev", "department": "Engineering"}

    kit = client.get("/api/kits/k1").json()
    assert kit["intake_json"]["department"] == "Engineering"

    res = client.post("/api/checkout", json={
        "kit_id": "k1",
        "plan_type": "pro",
        "success_url": "https://app.example.com/ok",
        "cancel_url": "https://app.example.com/ko",
    })
    assert res.status_code == 200

    status = client.get("/api/orders/k1/status").json()
    assert status["plan_type"] == "pro"
    assert status["total_cents"] == 12900
    (order,) = fake_db.orders.values()
    assert order["user_id"] == as_user.user_id
    assert fake_db.organizations == {}
