import itertools
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

# Pas de Redis en tests: le lifespan n'initialise pas fastapi-limiter
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from hiringkit.app_setup.factory import create_app
from hiringkit.auth.principal import GUEST, Authenticated
from hiringkit.utils.security import get_principal, principal_resolver

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)

@pytest.fixture(scope="session")
def app():
    return create_app()

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

# --- Principaux ---

USER = Authenticated(user_id="user-1", email="user@example.com", role="user", org_id="org-user")
ADMIN = Authenticated(user_id="admin-1", email="admin@example.com", role="admin", org_id="org-admin")

@pytest.fixture
def as_principal(app):
    """Force le Principal retourné par get_principal (et son résolveur paresseux) pour les routes."""
    def _set(principal):
        app.dependency_overrides[get_principal] = lambda: principal
        app.dependency_overrides[principal_resolver] = lambda: (lambda: principal)
        return principal
    yield _set
    app.dependency_overrides.pop(get_principal, None)
    app.dependency_overrides.pop(principal_resolver, None)

@pytest.fixture
def as_guest(as_principal):
    return as_principal(GUEST)

@pytest.fixture
def as_user(as_principal):
    return as_principal(USER)

@pytest.fixture
def as_admin(as_principal):
    return as_principal(ADMIN)

# --- Supabase / Stripe neutralisés par défaut ---

@pytest.fixture(scope="function", autouse=True)
def mock_db_dependency(monkeypatch):
    """
    Aucun test n'atteint un vrai projet Supabase: les clients retournent des MagicMock
    (res.data n'est ni liste ni dict -> lecture vide).
    """
    monkeypatch.setattr("hiringkit.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("hiringkit.infra.supabase_client.get_service_supabase", lambda: MagicMock())

@pytest.fixture(autouse=True)
def _block_stripe(monkeypatch):
    def _no_stripe(**kwargs):
        raise RuntimeError("Appel Stripe inattendu en tests")
    monkeypatch.setattr("hiringkit.payments.stripe_client.create_session", _no_stripe)

class FakeStripe:
    """Remplace stripe_client.create_session; mémorise les appels."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.fail_with: Optional[Exception] = None

    def create_session(self, **kwargs):
        self.calls.append(kwargs)
        if self.fail_with:
            raise self.fail_with
        n = len(self.calls)
        return {"id": f"cs_test_{n}", "url": f"https://checkout.stripe.test/pay/cs_test_{n}"}

@pytest.fixture
def fake_stripe(monkeypatch) -> FakeStripe:
    fake = FakeStripe()
    monkeypatch.setattr("hiringkit.payments.stripe_client.create_session", fake.create_session)
    return fake

class FakeDB:
    """
    Tables kits / orders / organizations / webhook_events en mémoire, branchées à la place
    des fonctions des repositories (même signature, même contrat de retour).
    """

    def __init__(self):
        self.kits: Dict[str, dict] = {}
        self.orders: Dict[str, dict] = {}
        self.organizations: Dict[str, dict] = {}
        self.webhook_events: Dict[str, dict] = {}
        self._seq = itertools.count(1)
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _now(self) -> str:
        return (self._clock + timedelta(seconds=next(self._seq))).isoformat()

    def add_kit(self, kit_id: str, user_id: Optional[str] = None, org_id: Optional[str] = None,
                title: str = "Senior Backend Engineer", intake_json: Optional[dict] = None) -> dict:
        self.kits[kit_id] = {
            "id": kit_id,
            "user_id": user_id,
            "org_id": org_id,
            "title": title,
            "status": "draft",
            "qa_required": False,
            "intake_json": intake_json or {},
        }
        return self.kits[kit_id]

    # kits
    def get_accessible_kit(self, kit_id, principal):
        kit = self.kits.get(kit_id)
        if not kit:
            return None
        if isinstance(principal, Authenticated) and not principal.is_admin and kit.get("user_id") != principal.user_id:
            return None
        return dict(kit)

    def update_intake(self, kit_id, intake_json):
        self.kits[kit_id]["intake_json"] = intake_json
        self.kits[kit_id]["edited_at"] = self._now()
        return dict(self.kits[kit_id])

    def flag_kit_for_review(self, kit_id):
        self.kits[kit_id].update({"qa_required": True, "status": "editing"})
        return True

    def publish_reviewed_kit(self, kit_id):
        kit = self.kits.get(kit_id)
        if not kit or not kit.get("qa_required"):
            return None
        kit.update({"status": "published", "qa_required": False})
        return dict(kit)

    def reopen_kit_review(self, kit_id):
        self.kits[kit_id].update({"status": "editing", "qa_required": True})
        return True

    # organizations
    def create_guest_organization(self):
        org_id = f"org-guest-{len(self.organizations) + 1}"
        self.organizations[org_id] = {"id": org_id, "name": "Guest Checkout"}
        return dict(self.organizations[org_id])

    # orders
    def insert_order(self, *, org_id, user_id, kit_id, plan_type, total_cents, stripe_session_id=None):
        order_id = f"order-{len(self.orders) + 1}"
        self.orders[order_id] = {
            "id": order_id,
            "org_id": org_id,
            "user_id": user_id,
            "kit_id": kit_id,
            "status": "awaiting_payment",
            "plan_type": plan_type,
            "total_cents": total_cents,
            "stripe_session_id": stripe_session_id,
            "created_at": self._now(),
        }
        return dict(self.orders[order_id])

    def attach_session(self, order_id, stripe_session_id):
        self.orders[order_id]["stripe_session_id"] = stripe_session_id
        return True

    def update_order_status(self, order_id, status):
        self.orders[order_id]["status"] = status
        return True

    def mark_reviewed_orders_ready(self, kit_id):
        for order in self.orders.values():
            if order["kit_id"] == kit_id and order["status"] == "qa_pending":
                order["status"] = "ready"
        return True

    def _with_kit(self, order):
        kit = self.kits.get(order["kit_id"]) or {}
        return {**order, "kits": {"title": kit.get("title"), "status": kit.get("status"), "qa_required": kit.get("qa_required")}}

    def get_latest_order_for_kit(self, kit_id):
        rows = sorted((o for o in self.orders.values() if o["kit_id"] == kit_id), key=lambda o: o["created_at"], reverse=True)
        return self._with_kit(rows[0]) if rows else None

    def get_order_by_id(self, order_id):
        order = self.orders.get(order_id)
        return dict(order) if order else None

    def get_order_by_session(self, stripe_session_id):
        for order in self.orders.values():
            if order.get("stripe_session_id") == stripe_session_id:
                return dict(order)
        return None

    def list_orders(self, status=None, page=1, limit=20):
        rows = sorted(self.orders.values(), key=lambda o: o["created_at"], reverse=True)
        if status:
            rows = [o for o in rows if o["status"] == status]
        start = (page - 1) * limit
        return [self._with_kit(o) for o in rows[start:start + limit]]

    # webhook_events
    def get_webhook_event(self, event_id):
        return self.webhook_events.get(event_id)

    def record_webhook_event(self, event_id, event_type, metadata):
        self.webhook_events[event_id] = {"event_id": event_id, "event_type": event_type, "processing_status": "processing"}
        return True

    def finish_webhook_event(self, event_id, status, error_message=None):
        self.webhook_events[event_id].update({"processing_status": status, "error_message": error_message})
        return True

    def install(self, monkeypatch):
        for name in ("get_accessible_kit", "update_intake", "flag_kit_for_review", "publish_reviewed_kit", "reopen_kit_review"):
            monkeypatch.setattr(f"hiringkit.kits.repository.{name}", getattr(self, name))
        for name in (
            "insert_order",
            "attach_session",
            "update_order_status",
            "mark_reviewed_orders_ready",
            "get_latest_order_for_kit",
            "get_order_by_id",
            "get_order_by_session",
            "list_orders",
        ):
            monkeypatch.setattr(f"hiringkit.orders.repository.{name}", getattr(self, name))
        for name in ("create_guest_organization", "get_webhook_event", "record_webhook_event", "finish_webhook_event"):
            monkeypatch.setattr(f"hiringkit.payments.repository.{name}", getattr(self, name))
        return self

@pytest.fixture
def fake_db(monkeypatch) -> FakeDB:
    return FakeDB().install(monkeypatch)

