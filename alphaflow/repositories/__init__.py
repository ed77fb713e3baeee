from .base import BaseRepository, generate_id
from .user_repository import UserRepository
from .client_repository import ClientRepository
from .catalog_repository import ProductRepository, ServiceRepository
from .appointment_repository import AppointmentRepository
from .financial_repository import FinancialRecordRepository
