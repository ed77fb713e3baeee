from .enums import (
    AppMode,
    AppointmentStatus,
    CartItemType,
    PaymentMethod,
    Period,
    RecordType,
    UserRole,
    ViewMode,
)
from .user import User
from .client import Address, Client, VisagismProfile
from .catalog import Product, Service
from .appointment import Appointment
from .financial import FinancialRecord, SystemConfig
from .cart import CartItem
