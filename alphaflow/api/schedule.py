from typing import Optional

from fastapi import APIRouter, Depends

from alphaflow.api.deps import get_actor, get_state
from alphaflow.core.exceptions import ScheduleValidationError
from alphaflow.models import User, ViewMode
from alphaflow.schemas.schedule import AppointmentForm, StatusChange
from alphaflow.services import schedule_service
from alphaflow.services.app_state import AppState
from alphaflow.utils.date_utils import parse_date_string

router = APIRouter()


@router.get("")
def get_schedule(
    anchor: Optional[str] = None,
    view_mode: ViewMode = ViewMode.DAY,
    professional_id: Optional[str] = None,
    direction: int = 0,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    """
    Агенда: день, неделя или месяц.
    anchor принимает "YYYY-MM-DD" или "DD/MM/YYYY"; direction сдвигает его на один шаг.
    """
    anchor_date = parse_date_string(anchor) if anchor else state.today()
    if anchor_date is None:
        raise ScheduleValidationError(f"Data inválida: {anchor}")
    if direction:
        anchor_date = schedule_service.navigate(anchor_date, view_mode, direction)
    return state.schedule_view(actor, anchor_date, view_mode, professional_id)


@router.post("/appointments")
def create_appointment(form: AppointmentForm, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return state.submit_appointment_form(form)


@router.get("/appointments/{appointment_id}/form", response_model=AppointmentForm)
def get_appointment_form(appointment_id: str, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    """Форма редактирования, заполненная данными записи"""
    return schedule_service.form_from_appointment(state.appointments.get_or_raise(appointment_id))


@router.put("/appointments/{appointment_id}")
def update_appointment(
    appointment_id: str,
    form: AppointmentForm,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    return state.submit_appointment_form(form, appointment_id=appointment_id)


@router.post("/appointments/{appointment_id}/status")
def change_status(
    appointment_id: str,
    body: StatusChange,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    return state.change_appointment_status(appointment_id, body.status)


@router.delete("/appointments/{appointment_id}")
def delete_appointment(appointment_id: str, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    state.delete_appointment(appointment_id)
    return {"status": "ok"}
