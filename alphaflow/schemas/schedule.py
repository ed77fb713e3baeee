from typing import Optional

from pydantic import BaseModel

from alphaflow.models import AppointmentStatus


class AppointmentForm(BaseModel):
    """Данные формы записи или блокировки агенды"""

    client_id: Optional[str] = None
    service_id: Optional[str] = None
    professional_id: str = ""
    date: str                       # "YYYY-MM-DD"
    start_time: str = "09:00"       # "HH:MM"
    duration: int = 30              # минуты
    notes: str = ""
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    is_blocking: bool = False


class StatusChange(BaseModel):
    status: AppointmentStatus

