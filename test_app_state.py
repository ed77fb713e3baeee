"""
Тесты контейнера состояния: действия, права и атомарность изменений.
"""

import asyncio
import logging
from datetime import date, datetime, timedelta

import pytest

from alphaflow.core.exceptions import (
    CatalogValidationError,
    FinancialValidationError,
    InsufficientStockError,
    NotFoundError,
    PermissionDeniedError,
    PosValidationError,
    ScheduleValidationError,
    ValidationError,
)
from alphaflow.models import (
    AppMode,
    AppointmentStatus,
    CartItemType,
    PaymentMethod,
    Period,
    Product,
    RecordType,
    UserRole,
    ViewMode,
    VisagismProfile,
)
from alphaflow.schemas.schedule import AppointmentForm
from alphaflow.services.app_state import AppState, get_app_state, reset_app_state
from alphaflow.services.gemini_service import CompletionStatus, GeminiService
from alphaflow.services.identity_service import IdentityService

NOW = datetime(2026, 10, 21, 15, 0)


@pytest.fixture
def state(monkeypatch):
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS_JSON", raising=False)
    state = AppState(mode=AppMode.BARBER, clock=lambda: NOW, gemini=GeminiService(api_key=""))
    state.identity = IdentityService(state.users.get_by_email, supabase_url="", anon_key="")
    return state


@pytest.fixture
def admin(state):
    return state.users.get_by_email("admin@alphaflow.com")


@pytest.fixture
def professional(state, admin):
    return state.add_user(admin, {
        "name": "Ana Souza",
        "email": "ana@alphaflow.com",
        "password": "123",
        "role": UserRole.PROFESSIONAL,
    })


def test_initial_state_is_seeded(state, admin):
    assert admin.role == UserRole.ADMIN
    assert {s.id for s in state.services.get_all()} == {"s1", "s2", "s3", "s4"}
    assert len(state.products) == 5
    assert state.system_config.name == "AlphaFlow"
    assert state.cart.items == []


def test_get_app_state_is_singleton():
    reset_app_state()
    assert get_app_state() is get_app_state()


def test_local_login(state):
    result = asyncio.run(state.login("ADMIN@alphaflow.com", "admin"))
    assert result.success
    assert state.current_user.id == "u1"

    failed = asyncio.run(state.login("admin@alphaflow.com", "errada"))
    assert not failed.success
    assert failed.message == "Erro ao entrar: Invalid login credentials"

    state.logout()
    assert state.current_user is None


def test_team_management_requires_admin(state, admin, professional):
    with pytest.raises(PermissionDeniedError):
        state.add_user(professional, {"name": "Novo", "email": "novo@alphaflow.com", "role": UserRole.PROFESSIONAL})

    with pytest.raises(ValidationError):
        state.add_user(admin, {"name": "Outra Ana", "email": "ana@alphaflow.com", "role": UserRole.PROFESSIONAL})

    with pytest.raises(PermissionDeniedError):
        state.update_user(professional, admin.id, {"name": "Hacker"})


def test_self_edit_keeps_role_and_refreshes_current_user(state, professional):
    asyncio.run(state.login("ana@alphaflow.com", "123"))

    updated = state.update_user(professional, professional.id, {"name": "Ana S.", "role": UserRole.ADMIN})

    assert updated.name == "Ana S."
    assert updated.role == UserRole.PROFESSIONAL
    assert state.current_user.name == "Ana S."


def test_catalog_validation_leaves_state_unchanged(state):
    before = state.services.get_all()

    with pytest.raises(CatalogValidationError):
        state.add_service({"name": "Corte Zero", "duration_minutes": 0, "price": 10.0})
    with pytest.raises(CatalogValidationError):
        state.update_service("s1", {"commission_percentage": 150})
    with pytest.raises(CatalogValidationError):
        state.add_product({"name": "Cera", "price": 20.0, "stock": -1})

    assert state.services.get_all() == before


def test_catalog_crud(state):
    service = state.add_service({"name": "Sobrancelha", "duration_minutes": 15, "price": 20.0})
    assert state.services.get_by_id(service.id).price == 20.0

    state.update_service(service.id, {"price": 25.0})
    assert state.services.get_by_id(service.id).price == 25.0

    state.delete_service(service.id)
    with pytest.raises(NotFoundError):
        state.delete_service(service.id)

    assert [p.id for p in state.products.search("barba")] == ["p2", "p5"]


def test_set_mode_reseeds_services(state, admin, professional):
    with pytest.raises(PermissionDeniedError):
        state.set_mode(professional, AppMode.CLINIC)

    state.set_mode(admin, AppMode.CLINIC)

    assert state.mode == AppMode.CLINIC
    assert {s.id for s in state.services.get_all()} == {"c1", "c2", "c3"}


def test_submit_and_edit_appointment(state, professional):
    client = state.add_client({"name": "João Silva", "phone": "11999990000"})
    form = AppointmentForm(client_id=client.id, service_id="s1", professional_id=professional.id,
                           date="2026-10-21", start_time="10:00", duration=30)

    created = state.submit_appointment_form(form)
    assert state.appointments.get_by_id(created.id).price == 50.0

    blocking = form.model_copy(update={"is_blocking": True})
    edited = state.submit_appointment_form(blocking, appointment_id=created.id)
    assert edited.id == created.id
    assert edited.status == AppointmentStatus.BLOCKED
    assert len(state.appointments) == 1


def test_editing_completed_appointment_cannot_reopen_it(state, professional):
    form = AppointmentForm(service_id="s1", professional_id=professional.id, date="2026-10-21")
    created = state.submit_appointment_form(form)
    state.change_appointment_status(created.id, AppointmentStatus.COMPLETED)

    with pytest.raises(ScheduleValidationError):
        state.submit_appointment_form(form, appointment_id=created.id)
    assert state.appointments.get_by_id(created.id).status == AppointmentStatus.COMPLETED


def test_overlap_is_allowed_with_warning(state, professional, caplog):
    form = AppointmentForm(professional_id=professional.id, date="2026-10-21", start_time="10:00", duration=60)
    state.submit_appointment_form(form)

    with caplog.at_level(logging.WARNING):
        state.submit_appointment_form(form.model_copy(update={"start_time": "10:30"}))

    assert len(state.appointments) == 2
    assert any("Пересечение" in r.getMessage() for r in caplog.records)


def test_status_change_and_delete(state, professional):
    created = state.submit_appointment_form(
        AppointmentForm(professional_id=professional.id, date="2026-10-21")
    )

    cancelled = state.change_appointment_status(created.id, AppointmentStatus.CANCELLED)
    assert cancelled.status == AppointmentStatus.CANCELLED

    state.delete_appointment(created.id)
    with pytest.raises(NotFoundError):
        state.change_appointment_status(created.id, AppointmentStatus.COMPLETED)


def test_finalize_sale_applies_all_effects(state):
    old_record = state.add_expense(
        state.users.get_by_id("u1"), "Aluguel", 1800.0, RecordType.EXPENSE, "Infraestrutura"
    )
    client = state.add_client({"name": "João Silva", "phone": "11999990000"})

    state.add_to_cart("p2", CartItemType.PRODUCT)
    state.add_to_cart("p2", CartItemType.PRODUCT)
    state.add_to_cart("s1", CartItemType.SERVICE)
    state.select_cart_client(client.id)

    receipt = state.finalize_sale(PaymentMethod.PIX)

    assert receipt.total == 45.0 * 2 + 50.0
    assert receipt.client == "João Silva"
    assert state.products.get_by_id("p2").stock == 6
    records = state.records.get_all()
    assert records[0].description == "Venda Caixa - João Silva"
    assert records[1].id == old_record.id
    assert state.clients.get_by_id(client.id).total_spent == 140.0
    assert state.clients.get_by_id(client.id).last_visit == date(2026, 10, 21)
    assert state.cart.items == []
    assert state.cart.client_id is None


def test_cart_stock_limit_through_state(state):
    state.products.replace_all([Product(id="px", name="Cera", price=20.0, stock=1)])
    state.add_to_cart("px", CartItemType.PRODUCT)

    with pytest.raises(InsufficientStockError):
        state.add_to_cart("px", CartItemType.PRODUCT)
    with pytest.raises(InsufficientStockError):
        state.update_cart_quantity("px", 1)

    assert state.cart.quantity_of("px") == 1
    assert state.products.get_by_id("px").stock == 1


def test_empty_cart_finalize_changes_nothing(state):
    with pytest.raises(PosValidationError):
        state.finalize_sale(PaymentMethod.CASH)
    assert len(state.records) == 0


def test_professional_cannot_add_expense(state, professional):
    with pytest.raises(PermissionDeniedError):
        state.add_expense(professional, "Material", 10.0)


def test_financial_view_by_role(state, admin, professional):
    state.add_expense(admin, "Luz", 300.0, RecordType.EXPENSE, "Infraestrutura")
    state.add_expense(admin, "Corte avulso", 50.0, RecordType.INCOME, "Serviços", professional_id=professional.id)

    admin_view = state.financial_view(admin, Period.MONTH)
    assert admin_view["summary"].balance == -250.0
    assert admin_view["income_label"] == "Entradas (Faturamento)"

    prof_view = state.financial_view(professional, Period.MONTH, "all")
    assert prof_view["professional_id"] == professional.id
    assert prof_view["show_expenses"] is False
    assert [r.type for r in prof_view["records"]] == [RecordType.INCOME]
    assert prof_view["income_label"] == "Minhas Comissões"


def test_schedule_views(state, admin, professional):
    state.submit_appointment_form(AppointmentForm(professional_id=professional.id, date="2026-10-21",
                                                  start_time="09:00"))
    state.submit_appointment_form(AppointmentForm(professional_id=admin.id, date="2026-10-22",
                                                  start_time="09:00"))

    day = state.schedule_view(admin, date(2026, 10, 21), ViewMode.DAY)
    assert len(day["slots"]) == 13
    assert day["slots"][1]["occupied"] is True
    assert day["slots"][1]["label"] == "09:00"

    week = state.schedule_view(professional, date(2026, 10, 21), ViewMode.WEEK, professional_id="all")
    assert week["professional_id"] == professional.id
    assert sum(len(d["appointments"]) for d in week["days"]) == 1
    assert week["days"][3]["is_today"] is True

    month = state.schedule_view(admin, date(2026, 10, 21), ViewMode.MONTH)
    filled = [c for c in month["cells"] if c is not None]
    assert len(filled) == 31
    assert sum(c["count"] for c in filled) == 2


def test_dashboard_view(state, admin):
    summary = state.dashboard_view(admin)
    assert summary.revenue_label == "Faturamento Hoje"
    assert summary.appointments_count == 0


def test_visagism_profile(state):
    client = state.add_client({"name": "Pedro", "phone": "11988887777"})
    profile = VisagismProfile(face_shape="Quadrado", beard_style="Barba Cheia")

    saved = state.save_visagism_profile(client.id, profile)

    assert state.clients.get_by_id(client.id).visagism_profile == profile
    assert saved.visagism_profile.face_shape == "Quadrado"
    assert {p.id for p in state.visagism_recommendations(profile)} == {"p2", "p4", "p5"}


def test_ai_analysis_without_key(state, admin):
    result = asyncio.run(state.financial_analysis(admin))

    assert result.status == CompletionStatus.FAILURE
    assert result.text == "API Key not configured."
    assert state.last_ai_analysis is result


def test_demo_seed_uses_actions(state):
    from scripts.seed_demo_data import seed_demo_data

    counts = seed_demo_data(state, days=2, seed=42)

    assert counts["users"] == 5
    assert counts["clients"] == 15
    assert counts["records"] == 3
    statuses = {a.status for a in state.appointments.get_all()}
    assert AppointmentStatus.BLOCKED in statuses
    assert AppointmentStatus.SCHEDULED in statuses


def test_lowering_stock_trims_cart_before_sale(state):
    for _ in range(3):
        state.add_to_cart("p1", CartItemType.PRODUCT)

    state.update_product("p1", {"stock": 1})
    assert state.cart.quantity_of("p1") == 1

    receipt = state.finalize_sale(PaymentMethod.CASH)

    assert state.products.get_by_id("p1").stock == 0
    assert receipt.total == state.products.get_by_id("p1").price


def test_ledger_records_cannot_be_edited(state, admin):
    record = state.add_expense(admin, "Luz", 300.0)

    with pytest.raises(FinancialValidationError):
        state.records.update(record.model_copy(update={"amount": 1.0}))
    assert state.records.get_by_id(record.id).amount == 300.0


def test_default_clock_uses_configured_timezone(monkeypatch):
    monkeypatch.setattr("alphaflow.services.app_state.settings.TIMEZONE", "Asia/Tokyo")
    tokyo = AppState(gemini=GeminiService(api_key=""))
    monkeypatch.setattr("alphaflow.services.app_state.settings.TIMEZONE", "America/Sao_Paulo")
    sao_paulo = AppState(gemini=GeminiService(api_key=""))

    assert tokyo.now().tzinfo is None
    assert abs(tokyo.now() - sao_paulo.now() - timedelta(hours=12)) < timedelta(minutes=1)
