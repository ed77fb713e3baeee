"""
Тесты правил агенды: форма записи, блокировки, группировка и навигация.
"""

from datetime import date, datetime, timedelta

import pytest

from alphaflow.core.exceptions import ScheduleValidationError
from alphaflow.models import Appointment, AppointmentStatus, Client, Service, ViewMode
from alphaflow.schemas.schedule import AppointmentForm
from alphaflow.services import schedule_service
from alphaflow.utils.date_utils import (
    combine_form_datetime,
    local_now,
    parse_date_string,
    period_window,
    start_of_week,
)

CLIENTS = [Client(id="c1", name="João Silva", phone="11999990000")]
SERVICES = [Service(id="s1", name="Corte Masculino", duration_minutes=30, price=50.0, commission_percentage=40)]


def make_appointment(id, start, minutes=30, status=AppointmentStatus.SCHEDULED, professional_id="X"):
    return Appointment(
        id=id,
        client_name="Cliente",
        professional_id=professional_id,
        service_name="Corte",
        start_time=start,
        end_time=start + timedelta(minutes=minutes),
        status=status,
        price=50.0,
    )


def test_blocking_form_builds_blocked_period():
    """Блокировка: статус BLOCKED, цена 0, без клиента и услуги"""
    form = AppointmentForm(
        professional_id="X",
        date="2026-10-21",
        start_time="09:00",
        duration=30,
        is_blocking=True,
        client_id="c1",
        service_id="s1",
        notes="Almoço",
    )

    appointment = schedule_service.build_from_form(form, CLIENTS, SERVICES)

    assert appointment.status == AppointmentStatus.BLOCKED
    assert appointment.price == 0
    assert appointment.client_id is None
    assert appointment.service_id is None
    assert appointment.client_name == schedule_service.BLOCK_CLIENT_NAME
    assert appointment.service_name == schedule_service.BLOCK_SERVICE_NAME
    assert appointment.start_time == datetime(2026, 10, 21, 9, 0)
    assert appointment.end_time == datetime(2026, 10, 21, 9, 30)
    assert appointment.notes == "Almoço"


def test_regular_form_snapshots_service_price():
    form = AppointmentForm(client_id="c1", service_id="s1", professional_id="X", date="2026-10-21",
                           start_time="14:30", duration=45)

    appointment = schedule_service.build_from_form(form, CLIENTS, SERVICES)

    assert appointment.status == AppointmentStatus.SCHEDULED
    assert appointment.client_name == "João Silva"
    assert appointment.service_name == "Corte Masculino"
    assert appointment.price == 50.0
    assert appointment.duration_minutes == 45


def test_unresolved_references_use_placeholders():
    form = AppointmentForm(client_id="ghost", service_id=None, professional_id="X", date="2026-10-21")

    appointment = schedule_service.build_from_form(form, CLIENTS, SERVICES)

    assert appointment.client_id is None
    assert appointment.client_name == schedule_service.WALK_IN_CLIENT_NAME
    assert appointment.service_name == schedule_service.CUSTOM_SERVICE_NAME
    assert appointment.price == 0


def test_blocked_status_requires_blocking_form():
    form = AppointmentForm(professional_id="X", date="2026-10-21", status=AppointmentStatus.BLOCKED)
    appointment = schedule_service.build_from_form(form, CLIENTS, SERVICES)
    assert appointment.status == AppointmentStatus.SCHEDULED


@pytest.mark.parametrize("form_data", [
    {"professional_id": "", "date": "2026-10-21"},
    {"professional_id": "X", "date": "2026-10-21", "duration": 0},
    {"professional_id": "X", "date": "não é data"},
    {"professional_id": "X", "date": "2026-10-21", "start_time": "25:99"},
])
def test_invalid_form_is_rejected(form_data):
    with pytest.raises(ScheduleValidationError):
        schedule_service.build_from_form(AppointmentForm(**form_data), CLIENTS, SERVICES)


def test_form_round_trip_for_editing():
    form = AppointmentForm(client_id="c1", service_id="s1", professional_id="X", date="2026-10-21",
                           start_time="10:00", duration=30, notes="VIP")
    appointment = schedule_service.build_from_form(form, CLIENTS, SERVICES)

    restored = schedule_service.form_from_appointment(appointment)

    assert restored.date == "2026-10-21"
    assert restored.start_time == "10:00"
    assert restored.duration == 30
    assert restored.is_blocking is False
    assert restored.notes == "VIP"


def test_status_transitions():
    appointment = make_appointment("a1", datetime(2026, 10, 21, 9, 0))

    completed = schedule_service.change_status(appointment, AppointmentStatus.COMPLETED)
    assert completed.status == AppointmentStatus.COMPLETED
    assert appointment.status == AppointmentStatus.SCHEDULED

    with pytest.raises(ScheduleValidationError):
        schedule_service.change_status(completed, AppointmentStatus.SCHEDULED)

    blocked = make_appointment("b1", datetime(2026, 10, 21, 12, 0), status=AppointmentStatus.BLOCKED)
    with pytest.raises(ScheduleValidationError):
        schedule_service.change_status(blocked, AppointmentStatus.COMPLETED)


def test_block_toggle_only_when_resubmitting_form():
    with pytest.raises(ScheduleValidationError):
        schedule_service.validate_transition(AppointmentStatus.SCHEDULED, AppointmentStatus.BLOCKED)
    schedule_service.validate_transition(
        AppointmentStatus.SCHEDULED, AppointmentStatus.BLOCKED, allow_block_toggle=True
    )
    schedule_service.validate_transition(
        AppointmentStatus.BLOCKED, AppointmentStatus.SCHEDULED, allow_block_toggle=True
    )


def test_day_grid_has_thirteen_hour_slots():
    day = [
        make_appointment("a1", datetime(2026, 10, 21, 9, 0)),
        make_appointment("a2", datetime(2026, 10, 21, 9, 30)),
        make_appointment("a3", datetime(2026, 10, 21, 7, 0)),
        make_appointment("a4", datetime(2026, 10, 21, 20, 0), status=AppointmentStatus.CANCELLED),
    ]

    slots = schedule_service.group_by_hour(day)

    assert list(slots) == list(range(8, 21))
    assert [a.id for a in slots[9]] == ["a1", "a2"]
    assert slots[20][0].id == "a4"
    assert schedule_service.is_slot_occupied(day, 20)
    assert not schedule_service.is_slot_occupied(day, 10)


def test_for_date_compares_calendar_day_and_sorts():
    appointments = [
        make_appointment("late", datetime(2026, 10, 21, 23, 0)),
        make_appointment("early", datetime(2026, 10, 21, 8, 0)),
        make_appointment("other", datetime(2026, 10, 22, 0, 30)),
    ]
    assert [a.id for a in schedule_service.for_date(appointments, date(2026, 10, 21))] == ["early", "late"]


def test_filter_by_professional():
    appointments = [
        make_appointment("a1", datetime(2026, 10, 21, 9, 0), professional_id="X"),
        make_appointment("a2", datetime(2026, 10, 21, 9, 0), professional_id="Y"),
    ]
    assert len(schedule_service.filter_by_professional(appointments, "all")) == 2
    assert [a.id for a in schedule_service.filter_by_professional(appointments, "Y")] == ["a2"]


def test_overlaps_are_reported_not_prevented():
    existing = [
        make_appointment("a1", datetime(2026, 10, 21, 9, 0), minutes=60),
        make_appointment("a2", datetime(2026, 10, 21, 9, 0), status=AppointmentStatus.CANCELLED),
        make_appointment("a3", datetime(2026, 10, 21, 9, 0), professional_id="Y"),
    ]
    candidate = make_appointment("new", datetime(2026, 10, 21, 9, 30))

    assert [a.id for a in schedule_service.find_overlaps(existing, candidate)] == ["a1"]


def test_is_blocked():
    appointments = [make_appointment("b1", datetime(2026, 10, 21, 12, 0), minutes=60, status=AppointmentStatus.BLOCKED)]
    assert schedule_service.is_blocked(appointments, "X", datetime(2026, 10, 21, 12, 30))
    assert not schedule_service.is_blocked(appointments, "X", datetime(2026, 10, 21, 13, 0))
    assert not schedule_service.is_blocked(appointments, "Y", datetime(2026, 10, 21, 12, 30))


def test_occupancy_rate_ignores_blocks():
    day = [
        make_appointment("a1", datetime(2026, 10, 21, 9, 0)),
        make_appointment("a2", datetime(2026, 10, 21, 10, 0), status=AppointmentStatus.COMPLETED),
        make_appointment("b1", datetime(2026, 10, 21, 12, 0), status=AppointmentStatus.BLOCKED),
    ]
    assert schedule_service.occupancy_rate(day) == round(100 * 2 / 13)


def test_week_starts_on_sunday():
    days = schedule_service.week_days(date(2026, 10, 21))
    assert days[0] == date(2026, 10, 18)
    assert days[-1] == date(2026, 10, 24)
    assert start_of_week(date(2026, 10, 18)) == date(2026, 10, 18)


def test_month_grid_pads_until_first_weekday():
    # 1 октября 2026 - четверг
    grid = schedule_service.month_grid(date(2026, 10, 15))
    assert grid[:4] == [None, None, None, None]
    assert grid[4] == date(2026, 10, 1)
    assert grid[-1] == date(2026, 10, 31)
    assert len(grid) == 4 + 31


def test_navigate():
    anchor = date(2026, 1, 31)
    assert schedule_service.navigate(anchor, ViewMode.DAY, 1) == date(2026, 2, 1)
    assert schedule_service.navigate(anchor, ViewMode.WEEK, -1) == date(2026, 1, 24)
    assert schedule_service.navigate(anchor, ViewMode.MONTH, 1) == date(2026, 2, 28)
    assert schedule_service.navigate(anchor, ViewMode.MONTH, 0) == anchor


def test_week_period_is_inclusive_of_saturday():
    start, end = period_window("week", date(2026, 10, 21))
    assert (start, end) == (date(2026, 10, 18), date(2026, 10, 24))


def test_combine_form_datetime():
    assert combine_form_datetime("2026-10-21", "09:05") == datetime(2026, 10, 21, 9, 5)
    assert combine_form_datetime("", "09:00") is None
    assert combine_form_datetime("2026-10-21", "nove") is None


def test_parse_date_string_keeps_iso_month():
    assert parse_date_string("2026-10-05") == date(2026, 10, 5)
    assert parse_date_string("2026-03-01") == date(2026, 3, 1)
    assert parse_date_string("05/10/2026") == date(2026, 10, 5)
    assert parse_date_string("ontem") is None


def test_local_now_is_naive_and_follows_timezone():
    now = local_now("America/Sao_Paulo")
    assert now.tzinfo is None
    assert abs(local_now("Asia/Tokyo") - now - timedelta(hours=12)) < timedelta(minutes=1)
