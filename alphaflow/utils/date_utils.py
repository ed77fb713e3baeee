"""
Утилиты для работы с датами агенды и финансовых периодов.

Все вычисления идут в локальном времени заведения: дата записи сравнивается
по календарному дню (год, месяц, день), а не по усечению UTC.
Неделя начинается в воскресенье.
"""

import calendar
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from dateutil import parser
from dateutil.relativedelta import relativedelta

from alphaflow.models.enums import Period

DateLike = Union[date, datetime]


def to_date(value: DateLike) -> date:
    """Усекает datetime до календарного дня"""
    if isinstance(value, datetime):
        return value.date()
    return value


def same_day(left: DateLike, right: DateLike) -> bool:
    return to_date(left) == to_date(right)


def start_of_week(value: DateLike) -> date:
    """
    Возвращает воскресенье недели, содержащей дату.

    Examples:
        >>> start_of_week(date(2026, 10, 21))  # среда
        datetime.date(2026, 10, 18)
    """
    day = to_date(value)
    # weekday(): понедельник=0 ... воскресенье=6
    days_since_sunday = (day.weekday() + 1) % 7
    return day - timedelta(days=days_since_sunday)


def end_of_week(value: DateLike) -> date:
    return start_of_week(value) + timedelta(days=6)


def first_day_of_month(value: DateLike) -> date:
    return to_date(value).replace(day=1)


def last_day_of_month(value: DateLike) -> date:
    day = to_date(value)
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def sunday_based_weekday(value: DateLike) -> int:
    """День недели, где воскресенье=0, суббота=6"""
    return (to_date(value).weekday() + 1) % 7


def add_months(value: DateLike, months: int) -> DateLike:
    """Сдвигает дату на N месяцев, прижимая день к концу короткого месяца"""
    return value + relativedelta(months=months)


def combine_form_datetime(date_str: str, time_str: str) -> Optional[datetime]:
    """
    Собирает локальный datetime из полей формы "YYYY-MM-DD" и "HH:MM".

    Returns:
        datetime без таймзоны или None, если строку не удалось распарсить
    """
    if not date_str or not time_str:
        return None
    try:
        parsed_date = parser.isoparse(date_str).date()
        parsed_time = datetime.strptime(time_str.strip(), "%H:%M").time()
    except (ValueError, TypeError, OverflowError):
        return None
    return datetime.combine(parsed_date, parsed_time)


def parse_date_string(date_str: str) -> Optional[date]:
    """
    Парсит строку с датой в свободном формате (DD/MM/YYYY, YYYY-MM-DD и т.д.).

    Examples:
        >>> parse_date_string("19/10/2026")
        datetime.date(2026, 10, 19)
        >>> parse_date_string("2026-10-05")
        datetime.date(2026, 10, 5)
        >>> parse_date_string("invalid_date") is None
        True
    """
    if not date_str or not isinstance(date_str, str):
        return None
    try:
        return parser.isoparse(date_str.strip()).date()
    except (ValueError, TypeError, OverflowError):
        pass
    # Не ISO: день идет первым, как в DD/MM/YYYY
    try:
        return parser.parse(date_str, dayfirst=True).date()
    except (ValueError, TypeError, OverflowError):
        return None


def period_window(period: Period, today: DateLike) -> Tuple[date, date]:
    """
    Границы периода относительно "сегодня", обе включительно.

    day - сегодняшний день, week - воскресенье..суббота текущей недели,
    month - с первого по последнее число текущего месяца.
    """
    current = to_date(today)
    period = Period(period)
    if period == Period.DAY:
        return current, current
    if period == Period.WEEK:
        return start_of_week(current), end_of_week(current)
    return first_day_of_month(current), last_day_of_month(current)


def is_date_in_period(value: DateLike, period: Period, today: DateLike) -> bool:
    """Попадает ли дата (усеченная до дня) в окно периода"""
    start, end = period_window(period, today)
    return start <= to_date(value) <= end


def format_hour_slot(hour: int) -> str:
    return f"{hour:02d}:00"


def days_range(start: date, count: int) -> List[date]:
    return [start + timedelta(days=i) for i in range(count)]


def midnight(day: date) -> datetime:
    return datetime.combine(day, time.min)


def local_now(tz_name: str) -> datetime:
    """Текущее время заведения в его таймзоне, без tzinfo (все даты в системе наивные)"""
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
