"""
Финансовый раздел: видимость записей кассовой книги по роли, периоду
и мастеру, итоги и отчет по комиссиям.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional

from alphaflow.core.exceptions import FinancialValidationError
from alphaflow.models import (
    Appointment,
    FinancialRecord,
    Period,
    RecordType,
    Service,
    User,
    UserRole,
)
from alphaflow.repositories.base import generate_id
from alphaflow.services import access_policy
from alphaflow.services.commission_service import professional_commission
from alphaflow.utils.date_utils import is_date_in_period, period_window

# Реэкспорт для потребителей финансового раздела
__all__ = [
    "FinancialSummary",
    "CommissionRow",
    "period_window",
    "is_date_in_period",
    "visible_records",
    "summarize",
    "commission_report",
    "build_manual_record",
]


@dataclass(frozen=True)
class FinancialSummary:
    total_income: float
    total_expense: float
    balance: float


@dataclass(frozen=True)
class CommissionRow:
    professional_id: str
    professional_name: str
    avatar_url: Optional[str]
    total_services: int
    total_commission: float


def _passes_role_gate(record: FinancialRecord, actor_role: UserRole) -> bool:
    if record.type == RecordType.EXPENSE and not access_policy.can_see_expenses(actor_role):
        return False
    return True


def _passes_professional_gate(record: FinancialRecord, selected_professional_id: Optional[str]) -> bool:
    if not selected_professional_id or selected_professional_id == access_policy.ALL_PROFESSIONALS:
        return True
    if record.professional_id:
        return record.professional_id == selected_professional_id
    # Неатрибутированный доход считается общим, а общие расходы видны всем
    return record.type == RecordType.EXPENSE


def visible_records(
    records: Iterable[FinancialRecord],
    actor_role: UserRole,
    actor_id: str,
    period: Period,
    selected_professional_id: Optional[str],
    today: date
) -> List[FinancialRecord]:
    """
    Записи кассовой книги, видимые пользователю.

    Должны пройти все три проверки:
    1. роль - мастер не видит расходы;
    2. период - дата записи в окне day/week/month относительно today;
    3. мастер - при выбранном мастере неатрибутированный доход скрыт,
       атрибутированные записи должны совпасть по id,
       неатрибутированные расходы проходят.
    Мастер всегда смотрит на себя, независимо от выбранного фильтра.
    """
    if actor_role == UserRole.PROFESSIONAL:
        selected_professional_id = actor_id

    return [
        r for r in records
        if _passes_role_gate(r, actor_role)
        and is_date_in_period(r.date, period, today)
        and _passes_professional_gate(r, selected_professional_id)
    ]


def summarize(records: Iterable[FinancialRecord]) -> FinancialSummary:
    records = list(records)
    total_income = sum(r.amount for r in records if r.type == RecordType.INCOME)
    total_expense = sum(r.amount for r in records if r.type == RecordType.EXPENSE)
    return FinancialSummary(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
    )


def commission_report(
    users: Iterable[User],
    appointments: Iterable[Appointment],
    services: Iterable[Service],
    period: Period,
    selected_professional_id: Optional[str],
    today: date
) -> List[CommissionRow]:
    """
    Отчет по комиссиям мастеров и администраторов за период.

    Считается по завершенным записям агенды, а не по кассовой книге:
    комиссии не являются проводками. При фильтре "all" строки без
    выполненных услуг пропускаются.
    """
    appointments = list(appointments)
    services_index = {s.id: s for s in services}
    show_all = not selected_professional_id or selected_professional_id == access_policy.ALL_PROFESSIONALS

    rows = []
    for user in users:
        if user.role not in (UserRole.PROFESSIONAL, UserRole.ADMIN):
            continue
        if not show_all and user.id != selected_professional_id:
            continue
        total_commission, total_services = professional_commission(
            appointments, services_index, user.id, period, today
        )
        if total_services == 0 and show_all:
            continue
        rows.append(CommissionRow(
            professional_id=user.id,
            professional_name=user.name,
            avatar_url=user.avatar_url,
            total_services=total_services,
            total_commission=total_commission,
        ))
    return rows


def build_manual_record(
    description: str,
    amount: float,
    record_type: RecordType,
    category: str,
    professional_id: Optional[str] = None,
    when: Optional[datetime] = None
) -> FinancialRecord:
    """Ручная проводка (например, оплата аренды или поставщика)"""
    if not description or not description.strip():
        raise FinancialValidationError("Descrição é obrigatória")
    if amount is None or amount <= 0:
        raise FinancialValidationError("O valor deve ser maior que zero")
    return FinancialRecord(
        id=generate_id(),
        date=when or datetime.now(),
        description=description.strip(),
        amount=amount,
        type=RecordType(record_type),
        category=category or "Geral",
        professional_id=professional_id or None,
    )
