from enum import Enum


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    PROFESSIONAL = "PROFESSIONAL"
    RECEPTIONIST = "RECEPTIONIST"


class AppMode(str, Enum):
    BARBER = "BARBER"
    CLINIC = "CLINIC"


class AppointmentStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    BLOCKED = "BLOCKED"


class RecordType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Period(str, Enum):
    """Окно фильтрации финансовых отчетов относительно текущей даты"""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class ViewMode(str, Enum):
    """Режим отображения агенды"""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class CartItemType(str, Enum):
    PRODUCT = "PRODUCT"
    SERVICE = "SERVICE"


class PaymentMethod(str, Enum):
    PIX = "PIX"
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    CASH = "CASH"
