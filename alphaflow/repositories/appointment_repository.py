"""
Репозиторий для работы с записями агенды
"""

from datetime import datetime
from typing import List

from alphaflow.models import Appointment
from .base import BaseRepository


class AppointmentRepository(BaseRepository[Appointment]):
    """Репозиторий для работы с записями агенды"""

    def __init__(self, items=None):
        super().__init__("Agendamento", items)

    def get_appointments_by_date_range(self, start: datetime, end: datetime) -> List[Appointment]:
        """Получить записи, начинающиеся в полуинтервале [start, end)"""
        return sorted(
            (a for a in self._items.values() if start <= a.start_time < end),
            key=lambda a: a.start_time
        )
