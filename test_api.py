"""
Тесты HTTP API через FastAPI TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from alphaflow.main import app
from alphaflow.models import UserRole
from alphaflow.services.app_state import AppState, reset_app_state
from alphaflow.services.gemini_service import GeminiService
from alphaflow.services.identity_service import IdentityService

ADMIN_HEADERS = {"X-User-Id": "u1"}


@pytest.fixture
def state(monkeypatch):
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS_JSON", raising=False)
    state = AppState(gemini=GeminiService(api_key=""))
    state.identity = IdentityService(state.users.get_by_email, supabase_url="", anon_key="")
    return reset_app_state(state)


@pytest.fixture
def client(state):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def professional_headers(state):
    user = state.add_user(state.users.get_by_id("u1"), {
        "name": "Ana Souza", "email": "ana@alphaflow.com", "password": "123", "role": UserRole.PROFESSIONAL,
    })
    return {"X-User-Id": user.id}


def test_root_and_healthcheck(client):
    assert client.get("/").json()["status"] == "OK"
    health = client.get("/healthcheck").json()
    assert health["status"] == "OK"
    assert health["mode"] in ("BARBER", "CLINIC")


def test_login(client):
    response = client.post("/auth/login", json={"email": "admin@alphaflow.com", "password": "admin"})
    body = response.json()
    assert body["success"] is True
    assert body["user"]["id"] == "u1"
    assert "password" not in body["user"]

    failed = client.post("/auth/login", json={"email": "admin@alphaflow.com", "password": "x"}).json()
    assert failed["success"] is False
    assert failed["message"].startswith("Erro ao entrar")


def test_actor_header_is_required(client):
    assert client.get("/dashboard").status_code == 401
    assert client.get("/dashboard", headers={"X-User-Id": "ghost"}).status_code == 401
    assert client.get("/auth/me", headers=ADMIN_HEADERS).json()["role"] == "ADMIN"


def test_schedule_flow(client):
    created = client.post("/schedule/appointments", headers=ADMIN_HEADERS, json={
        "service_id": "s1", "professional_id": "u1", "date": "2026-10-21", "start_time": "09:00", "duration": 30,
    })
    assert created.status_code == 200
    appointment_id = created.json()["id"]

    day = client.get("/schedule", headers=ADMIN_HEADERS, params={"anchor": "21/10/2026"}).json()
    assert len(day["slots"]) == 13
    assert day["slots"][1]["appointments"][0]["id"] == appointment_id

    moved = client.get("/schedule", headers=ADMIN_HEADERS,
                       params={"anchor": "2026-10-21", "view_mode": "week", "direction": 1}).json()
    assert moved["anchor"] == "2026-10-28"

    form = client.get(f"/schedule/appointments/{appointment_id}/form", headers=ADMIN_HEADERS).json()
    assert form["start_time"] == "09:00"

    done = client.post(f"/schedule/appointments/{appointment_id}/status", headers=ADMIN_HEADERS,
                       json={"status": "COMPLETED"})
    assert done.json()["status"] == "COMPLETED"

    again = client.post(f"/schedule/appointments/{appointment_id}/status", headers=ADMIN_HEADERS,
                        json={"status": "CANCELLED"})
    assert again.status_code == 400

    assert client.delete(f"/schedule/appointments/{appointment_id}", headers=ADMIN_HEADERS).status_code == 200
    assert client.delete(f"/schedule/appointments/{appointment_id}", headers=ADMIN_HEADERS).status_code == 404


def test_invalid_schedule_input(client):
    bad_form = client.post("/schedule/appointments", headers=ADMIN_HEADERS,
                           json={"professional_id": "", "date": "2026-10-21"})
    assert bad_form.status_code == 400
    assert client.get("/schedule", headers=ADMIN_HEADERS, params={"anchor": "ontem"}).status_code == 400


def test_pos_checkout(client, state):
    client.post("/pos/cart/items", headers=ADMIN_HEADERS, json={"item_id": "s1", "item_type": "SERVICE"})
    cart = client.post("/pos/cart/items", headers=ADMIN_HEADERS, json={"item_id": "s1", "item_type": "SERVICE"}).json()
    assert cart["total"] == 100.0

    receipt = client.post("/pos/checkout", headers=ADMIN_HEADERS, json={"payment_method": "PIX"}).json()

    assert receipt["total"] == 100.0
    assert receipt["client"] == "Consumidor Final"
    assert len(state.records) == 1
    assert client.get("/pos/cart", headers=ADMIN_HEADERS).json()["items"] == []
    assert client.post("/pos/checkout", headers=ADMIN_HEADERS, json={"payment_method": "PIX"}).status_code == 400


def test_stock_limit_is_422(client, state):
    stock = state.products.get_by_id("p2").stock
    for _ in range(stock):
        assert client.post("/pos/cart/items", headers=ADMIN_HEADERS,
                           json={"item_id": "p2", "item_type": "PRODUCT"}).status_code == 200

    response = client.post("/pos/cart/items", headers=ADMIN_HEADERS, json={"item_id": "p2", "item_type": "PRODUCT"})

    assert response.status_code == 422
    assert response.json()["detail"] == "Estoque insuficiente!"
    assert state.cart.quantity_of("p2") == stock


def test_financial_by_role(client, professional_headers):
    expense = client.post("/financial/records", headers=ADMIN_HEADERS,
                          json={"description": "Aluguel", "amount": 1800.0, "category": "Infraestrutura"})
    assert expense.status_code == 200

    admin_view = client.get("/financial", headers=ADMIN_HEADERS, params={"period": "month"}).json()
    assert admin_view["summary"]["total_expense"] == 1800.0

    prof_view = client.get("/financial", headers=professional_headers).json()
    assert prof_view["records"] == []
    assert prof_view["show_expenses"] is False

    denied = client.post("/financial/records", headers=professional_headers,
                         json={"description": "Material", "amount": 10.0})
    assert denied.status_code == 403

    invalid = client.post("/financial/records", headers=ADMIN_HEADERS, json={"description": "Zero", "amount": 0})
    assert invalid.status_code == 400


def test_catalog_and_clients(client):
    created = client.post("/catalog/services", headers=ADMIN_HEADERS,
                          json={"name": "Sobrancelha", "duration_minutes": 15, "price": 20.0})
    assert created.status_code == 200
    invalid = client.post("/catalog/services", headers=ADMIN_HEADERS,
                          json={"name": "Nada", "duration_minutes": 0, "price": 20.0})
    assert invalid.status_code == 400

    found = client.get("/catalog/services", headers=ADMIN_HEADERS, params={"q": "sobran"}).json()
    assert [s["name"] for s in found] == ["Sobrancelha"]

    client_response = client.post("/clients", headers=ADMIN_HEADERS, json={"name": "Pedro", "phone": "11988887777"})
    client_id = client_response.json()["id"]
    assert client.get("/clients", headers=ADMIN_HEADERS, params={"q": "8888"}).json()[0]["id"] == client_id

    visagism = client.put(f"/clients/{client_id}/visagism", headers=ADMIN_HEADERS,
                          json={"face_shape": "Oval", "hair_type": "", "beard_style": ""}).json()
    assert [p["id"] for p in visagism["recommendations"]] == ["p4"]
    assert client.get("/clients/missing", headers=ADMIN_HEADERS).status_code == 404


def test_team_and_settings_permissions(client, professional_headers):
    assert client.post("/team", headers=professional_headers,
                       json={"name": "X", "email": "x@alphaflow.com"}).status_code == 403
    assert client.patch("/settings", headers=professional_headers, json={"name": "Outro"}).status_code == 403

    renamed = client.patch("/settings", headers=ADMIN_HEADERS, json={"name": "Barbearia Alpha"}).json()
    assert renamed["name"] == "Barbearia Alpha"

    mode = client.put("/settings/mode", headers=ADMIN_HEADERS, json={"mode": "CLINIC"}).json()
    assert mode["mode"] == "CLINIC"
    assert {s["id"] for s in mode["services"]} == {"c1", "c2", "c3"}

    team = client.get("/team", headers=ADMIN_HEADERS).json()
    assert all("password" not in u for u in team)


def test_assistant_without_key(client):
    pending = client.get("/assistant/financial-analysis", headers=ADMIN_HEADERS).json()
    assert pending["status"] == "PENDING"

    result = client.post("/assistant/financial-analysis", headers=ADMIN_HEADERS).json()
    assert result["status"] == "FAILURE"
    assert result["text"] == "API Key not configured."

    chat = client.post("/assistant/chat", headers=ADMIN_HEADERS, json={"message": "Oi"}).json()
    assert chat["status"] == "FAILURE"


def test_dashboard(client):
    summary = client.get("/dashboard", headers=ADMIN_HEADERS).json()
    assert summary["revenue_label"] == "Faturamento Hoje"
    assert len(summary["weekly_chart"]) == 7


def test_iso_anchor_with_small_day(client):
    client.post("/schedule/appointments", headers=ADMIN_HEADERS, json={
        "professional_id": "u1", "date": "2026-10-05", "start_time": "10:00",
    })

    day = client.get("/schedule", headers=ADMIN_HEADERS, params={"anchor": "2026-10-05"}).json()

    assert day["anchor"] == "2026-10-05"
    assert len(day["slots"][2]["appointments"]) == 1
