"""
Единая политика доступа по ролям.

Все представления, которые показывают деньги или фильтруют данные по мастеру,
берут правила только отсюда: мастер видит свои комиссии вместо выручки
и никогда не видит расходы.
"""

from alphaflow.models import User, UserRole

# Значение фильтра "все мастера"
ALL_PROFESSIONALS = "all"


def uses_commission_view(role: UserRole) -> bool:
    """Мастер видит комиссии, остальные роли - валовую выручку"""
    return role == UserRole.PROFESSIONAL


def can_see_expenses(role: UserRole) -> bool:
    return role != UserRole.PROFESSIONAL


def can_filter_professionals(role: UserRole) -> bool:
    """Выбор мастера в фильтрах доступен только администратору"""
    return role == UserRole.ADMIN


def can_manage_team(role: UserRole) -> bool:
    return role == UserRole.ADMIN


def can_edit_system(role: UserRole) -> bool:
    return role == UserRole.ADMIN


def can_edit_user(actor: User, target: User) -> bool:
    """Администратор редактирует всех, остальные - только свой профиль"""
    return actor.role == UserRole.ADMIN or actor.id == target.id


def default_professional_filter(user: User) -> str:
    """Фильтр агенды и дашборда по умолчанию"""
    return ALL_PROFESSIONALS if user.role == UserRole.ADMIN else user.id


def default_financial_filter(user: User) -> str:
    """Фильтр финансового раздела по умолчанию"""
    return user.id if user.role == UserRole.PROFESSIONAL else ALL_PROFESSIONALS


def resolve_professional_filter(user: User, requested: str = None) -> str:
    """
    Применяет запрошенный фильтр мастера с учетом роли.

    Администратор может выбрать любого мастера или "all";
    для остальных ролей запрошенное значение игнорируется.
    """
    if can_filter_professionals(user.role):
        return requested or ALL_PROFESSIONALS
    return default_professional_filter(user)


def resolve_financial_filter(user: User, requested: str = None) -> str:
    """То же для финансового раздела: мастер всегда привязан к себе"""
    if can_filter_professionals(user.role):
        return requested or ALL_PROFESSIONALS
    return default_financial_filter(user)
