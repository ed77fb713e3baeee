from typing import Optional

from fastapi import APIRouter, Depends

from alphaflow.api.deps import get_actor, get_state
from alphaflow.models import Period, User
from alphaflow.schemas.financial import ExpenseCreate
from alphaflow.services.app_state import AppState

router = APIRouter()


@router.get("")
def get_financial(
    period: Period = Period.MONTH,
    professional_id: Optional[str] = None,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    return state.financial_view(actor, period, professional_id)


@router.post("/records")
def add_expense(body: ExpenseCreate, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return state.add_expense(
        actor,
        description=body.description,
        amount=body.amount,
        record_type=body.type,
        category=body.category,
        professional_id=body.professional_id
    )
