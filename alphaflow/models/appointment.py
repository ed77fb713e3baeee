from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .enums import AppointmentStatus


class Appointment(BaseModel):
    """
    Запись в агенде.

    client_id и service_id - необязательные ссылки: у блокировки их нет,
    а для "клиента с улицы" ссылка может не разрешиться.
    """

    id: str
    client_id: Optional[str] = None
    client_name: str
    professional_id: str
    service_id: Optional[str] = None
    service_name: str
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    price: float = Field(default=0.0, ge=0)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _check_time_range(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time deve ser posterior a start_time")
        return self

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)

    @property
    def is_blocked(self) -> bool:
        return self.status == AppointmentStatus.BLOCKED
