"""
Расчет комиссий мастеров и агрегирование выручки.

Чистые функции без состояния: на вход снимок коллекций, на выход число.
"""

from datetime import date
from typing import Iterable, Mapping, Tuple, Union

from alphaflow.models import Appointment, AppointmentStatus, Period, Service, UserRole
from alphaflow.services import access_policy
from alphaflow.utils.date_utils import DateLike, is_date_in_period, same_day

ServicesLike = Union[Mapping[str, Service], Iterable[Service]]


def index_services(services: ServicesLike) -> Mapping[str, Service]:
    """Приводит список услуг к словарю id -> услуга"""
    if isinstance(services, Mapping):
        return services
    return {s.id: s for s in services}


def commission_for(appointment: Appointment, services: ServicesLike) -> float:
    """
    Комиссия мастера за запись.

    Если услуга не найдена или у нее не задан процент комиссии, возвращает 0,
    без исключения.

    Examples:
        price=100.00, commission_percentage=15 -> 15.00
    """
    service = index_services(services).get(appointment.service_id) if appointment.service_id else None
    if service is None or service.commission_percentage is None:
        return 0.0
    return appointment.price * service.commission_percentage / 100


def total_for(appointments: Iterable[Appointment], services: ServicesLike, actor_role: UserRole) -> float:
    """
    Сумма, которую видит пользователь: комиссии для мастера, выручка для остальных.
    """
    services_index = index_services(services)
    if access_policy.uses_commission_view(actor_role):
        return sum(commission_for(a, services_index) for a in appointments)
    return sum(a.price for a in appointments)


def professional_commission(
    appointments: Iterable[Appointment],
    services: ServicesLike,
    professional_id: str,
    period: Period,
    today: date
) -> Tuple[float, int]:
    """
    Комиссия мастера за период по завершенным записям.

    Returns:
        (сумма комиссии, количество выполненных услуг)
    """
    services_index = index_services(services)
    completed = [
        a for a in appointments
        if a.professional_id == professional_id
        and a.status == AppointmentStatus.COMPLETED
        and is_date_in_period(a.start_time, period, today)
    ]
    total_commission = sum(commission_for(a, services_index) for a in completed)
    return total_commission, len(completed)


def daily_total(
    appointments: Iterable[Appointment],
    services: ServicesLike,
    actor_role: UserRole,
    day: DateLike
) -> float:
    """Выручка или комиссия по завершенным записям за один календарный день"""
    completed = [
        a for a in appointments
        if a.status == AppointmentStatus.COMPLETED and same_day(a.start_time, day)
    ]
    return total_for(completed, services, actor_role)
