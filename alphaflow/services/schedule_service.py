"""
Правила агенды: фильтрация и группировка записей, блокировки, построение
записи из формы и переходы статусов.

Все функции чистые: принимают снимок коллекций и возвращают новые значения,
состояние меняет только контейнер приложения.
"""

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Union

from alphaflow.core.exceptions import ScheduleValidationError
from alphaflow.models import (
    Appointment,
    AppointmentStatus,
    Client,
    Service,
    ViewMode,
)
from alphaflow.repositories.base import generate_id
from alphaflow.schemas.schedule import AppointmentForm
from alphaflow.services.access_policy import ALL_PROFESSIONALS
from alphaflow.utils.date_utils import (
    DateLike,
    add_months,
    combine_form_datetime,
    days_range,
    last_day_of_month,
    same_day,
    start_of_week,
    sunday_based_weekday,
    to_date,
)

# Сетка дня: слоты с 08:00 до 20:00 включительно
BUSINESS_HOURS = range(8, 21)

BLOCK_CLIENT_NAME = "Bloqueio de Agenda"
BLOCK_SERVICE_NAME = "Indisponível"
WALK_IN_CLIENT_NAME = "Cliente Avulso"
CUSTOM_SERVICE_NAME = "Serviço Personalizado"

# Обычные переходы статуса записи
ALLOWED_TRANSITIONS = {
    AppointmentStatus.SCHEDULED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED},
    AppointmentStatus.COMPLETED: set(),
    AppointmentStatus.CANCELLED: set(),
    AppointmentStatus.BLOCKED: set(),
}


def filter_by_professional(appointments: Iterable[Appointment], professional_id: Optional[str]) -> List[Appointment]:
    """Точное совпадение по мастеру; "all" (или пустое значение) пропускает все"""
    if not professional_id or professional_id == ALL_PROFESSIONALS:
        return list(appointments)
    return [a for a in appointments if a.professional_id == professional_id]


def for_date(appointments: Iterable[Appointment], day: DateLike) -> List[Appointment]:
    """Записи, начинающиеся в указанный календарный день, по времени начала"""
    return sorted(
        (a for a in appointments if same_day(a.start_time, day)),
        key=lambda a: a.start_time
    )


def group_by_hour(day_appointments: Iterable[Appointment]) -> Dict[int, List[Appointment]]:
    """
    Раскладывает записи дня по часовым слотам сетки.

    В результате всегда 13 ключей (8..20); записи вне рабочих часов
    в сетку не попадают.
    """
    slots: Dict[int, List[Appointment]] = {hour: [] for hour in BUSINESS_HOURS}
    for appointment in sorted(day_appointments, key=lambda a: a.start_time):
        hour = appointment.start_time.hour
        if hour in slots:
            slots[hour].append(appointment)
    return slots


def is_slot_occupied(day_appointments: Iterable[Appointment], hour: int) -> bool:
    """Есть ли в часовом слоте хотя бы одна запись (любого статуса)"""
    return any(a.start_time.hour == hour for a in day_appointments)


def blocked_periods(appointments: Iterable[Appointment]) -> List[Appointment]:
    return [a for a in appointments if a.status == AppointmentStatus.BLOCKED]


def is_blocked(appointments: Iterable[Appointment], professional_id: str, moment: datetime) -> bool:
    """Попадает ли момент времени в блокировку агенды мастера"""
    return any(
        a.professional_id == professional_id and a.start_time <= moment < a.end_time
        for a in blocked_periods(appointments)
    )


def find_overlaps(appointments: Iterable[Appointment], candidate: Appointment) -> List[Appointment]:
    """
    Записи того же мастера, пересекающиеся по времени с кандидатом.

    Только для информации: пересечения не запрещены.
    """
    return [
        a for a in appointments
        if a.id != candidate.id
        and a.professional_id == candidate.professional_id
        and a.status != AppointmentStatus.CANCELLED
        and a.start_time < candidate.end_time
        and candidate.start_time < a.end_time
    ]


def occupancy_rate(day_appointments: Iterable[Appointment]) -> int:
    """Процент часовых слотов сетки, занятых записями клиентов"""
    busy_hours = {
        a.start_time.hour for a in day_appointments
        if a.status in (AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED)
        and a.start_time.hour in BUSINESS_HOURS
    }
    return round(100 * len(busy_hours) / len(BUSINESS_HOURS))


def week_days(anchor: DateLike) -> List[date]:
    """Семь дат недели (воскресенье..суббота), содержащей anchor"""
    return days_range(start_of_week(anchor), 7)


def month_grid(anchor: DateLike) -> List[Optional[date]]:
    """
    Ячейки календаря месяца: пустые ячейки до первого числа (None),
    затем все дни месяца.
    """
    first = to_date(anchor).replace(day=1)
    padding: List[Optional[date]] = [None] * sunday_based_weekday(first)
    return padding + days_range(first, last_day_of_month(first).day)


def group_by_day(appointments: Iterable[Appointment], days: Iterable[Optional[date]]) -> Dict[date, List[Appointment]]:
    appointments = list(appointments)
    return {day: for_date(appointments, day) for day in days if day is not None}


def navigate(anchor: DateLike, view_mode: Union[ViewMode, str], direction: int) -> DateLike:
    """Сдвиг текущей даты агенды: день, неделя или месяц назад/вперед"""
    view_mode = ViewMode(view_mode)
    if direction == 0:
        return anchor
    step = 1 if direction > 0 else -1
    if view_mode == ViewMode.DAY:
        return anchor + timedelta(days=step)
    if view_mode == ViewMode.WEEK:
        return anchor + timedelta(days=7 * step)
    return add_months(anchor, step)


def validate_form(form: AppointmentForm) -> datetime:
    """Проверяет форму и возвращает время начала"""
    if not form.professional_id:
        raise ScheduleValidationError("Selecione um profissional")
    if form.duration <= 0:
        raise ScheduleValidationError("A duração deve ser maior que zero")
    start = combine_form_datetime(form.date, form.start_time)
    if start is None:
        raise ScheduleValidationError(f"Data ou horário inválido: {form.date} {form.start_time}")
    return start


def build_from_form(
    form: AppointmentForm,
    clients: Iterable[Client],
    services: Iterable[Service],
    appointment_id: Optional[str] = None
) -> Appointment:
    """
    Строит запись из формы агенды.

    Блокировка: статус всегда BLOCKED, цена 0, без клиента и услуги,
    сохраняются только мастер, интервал и заметки.
    Обычная запись: клиент и услуга ищутся по id (с подстановкой имен по
    умолчанию), цена копируется из услуги на момент сохранения.
    """
    start = validate_form(form)
    end = start + timedelta(minutes=form.duration)
    appointment_id = appointment_id or generate_id()

    if form.is_blocking:
        return Appointment(
            id=appointment_id,
            client_name=BLOCK_CLIENT_NAME,
            professional_id=form.professional_id,
            service_name=BLOCK_SERVICE_NAME,
            start_time=start,
            end_time=end,
            status=AppointmentStatus.BLOCKED,
            price=0.0,
            notes=form.notes,
        )

    client = next((c for c in clients if form.client_id and c.id == form.client_id), None)
    service = next((s for s in services if form.service_id and s.id == form.service_id), None)

    # Статус BLOCKED возможен только через форму блокировки
    status = form.status
    if status == AppointmentStatus.BLOCKED:
        status = AppointmentStatus.SCHEDULED

    return Appointment(
        id=appointment_id,
        client_id=client.id if client else None,
        client_name=client.name if client else WALK_IN_CLIENT_NAME,
        professional_id=form.professional_id,
        service_id=service.id if service else None,
        service_name=service.name if service else CUSTOM_SERVICE_NAME,
        start_time=start,
        end_time=end,
        status=status,
        price=service.price if service else 0.0,
        notes=form.notes,
    )


def form_from_appointment(appointment: Appointment) -> AppointmentForm:
    """Заполняет форму для редактирования существующей записи"""
    return AppointmentForm(
        client_id=appointment.client_id,
        service_id=appointment.service_id,
        professional_id=appointment.professional_id,
        date=appointment.start_time.strftime("%Y-%m-%d"),
        start_time=appointment.start_time.strftime("%H:%M"),
        duration=appointment.duration_minutes,
        notes=appointment.notes or "",
        status=appointment.status,
        is_blocking=appointment.is_blocked,
    )


def validate_transition(current: AppointmentStatus, new: AppointmentStatus, allow_block_toggle: bool = False) -> None:
    """
    Проверяет переход статуса.

    allow_block_toggle разрешает превращение записи в блокировку и обратно,
    что возможно только при пересохранении формы.
    """
    if current == new:
        return
    if allow_block_toggle and {current, new} == {AppointmentStatus.SCHEDULED, AppointmentStatus.BLOCKED}:
        return
    if new not in ALLOWED_TRANSITIONS[current]:
        raise ScheduleValidationError(
            f"Transição de status inválida: {current.value} -> {new.value}"
        )


def change_status(appointment: Appointment, new_status: AppointmentStatus) -> Appointment:
    """Возвращает копию записи с новым статусом"""
    new_status = AppointmentStatus(new_status)
    validate_transition(appointment.status, new_status)
    return appointment.model_copy(update={"status": new_status})
