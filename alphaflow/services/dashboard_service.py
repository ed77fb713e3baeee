"""
Показатели дашборда: выручка или комиссии за сегодня, число записей,
загрузка, недельный график и популярные услуги.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from alphaflow.models import Appointment, AppointmentStatus, Client, Service, User
from alphaflow.services import access_policy
from alphaflow.services.commission_service import daily_total, index_services
from alphaflow.services.schedule_service import (
    filter_by_professional,
    for_date,
    occupancy_rate,
    week_days,
)

WEEKDAY_LABELS = ['Dom', 'Seg', 'Ter', 'Qua', 'Qui', 'Sex', 'Sáb']
POPULAR_SERVICES_LIMIT = 5


@dataclass
class DashboardSummary:
    revenue_label: str
    today_total: float
    appointments_count: int
    new_clients: int
    occupancy_rate: int
    weekly_chart: List[Dict[str, object]] = field(default_factory=list)
    popular_services: List[Dict[str, object]] = field(default_factory=list)
    today_appointments: List[Appointment] = field(default_factory=list)


def weekly_chart(
    appointments: Iterable[Appointment],
    services: Dict[str, Service],
    actor: User,
    today: date
) -> List[Dict[str, object]]:
    """Сумма по завершенным записям для каждого дня текущей недели (Вс..Сб)"""
    appointments = list(appointments)
    return [
        {"name": WEEKDAY_LABELS[i], "date": day.isoformat(), "valor": daily_total(appointments, services, actor.role, day)}
        for i, day in enumerate(week_days(today))
    ]


def popular_services(appointments: Iterable[Appointment], limit: int = POPULAR_SERVICES_LIMIT) -> List[Dict[str, object]]:
    """Топ услуг по числу запланированных и выполненных записей"""
    counts = Counter(
        a.service_name for a in appointments
        if a.status in (AppointmentStatus.COMPLETED, AppointmentStatus.SCHEDULED)
    )
    return [{"name": name, "qtd": qtd} for name, qtd in counts.most_common(limit)]


def dashboard_summary(
    appointments: Iterable[Appointment],
    services: Iterable[Service],
    clients: Iterable[Client],
    actor: User,
    selected_professional_id: Optional[str],
    today: date
) -> DashboardSummary:
    services_index = index_services(services)
    filtered = filter_by_professional(appointments, selected_professional_id)
    today_appointments = for_date(filtered, today)

    commission_view = access_policy.uses_commission_view(actor.role)

    return DashboardSummary(
        revenue_label="Minhas Comissões Hoje" if commission_view else "Faturamento Hoje",
        today_total=daily_total(filtered, services_index, actor.role, today),
        appointments_count=len(today_appointments),
        new_clients=sum(1 for c in clients if c.last_visit is None),
        occupancy_rate=occupancy_rate(today_appointments),
        weekly_chart=weekly_chart(filtered, services_index, actor, today),
        popular_services=popular_services(filtered),
        today_appointments=today_appointments,
    )
