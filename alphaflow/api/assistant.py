import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from alphaflow.api.deps import get_actor, get_state
from alphaflow.models import Period, User
from alphaflow.schemas.assistant import ChatRequest, CompletionOut
from alphaflow.services.app_state import AppState

# Получаем логгер для этого модуля
logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/financial-analysis", response_model=CompletionOut)
async def financial_analysis(
    period: Period = Period.MONTH,
    professional_id: Optional[str] = None,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    result = await state.financial_analysis(actor, period, professional_id)
    logger.info(f"🤖 [ASSISTANT] Анализ финансов: status={result.status.value}")
    return CompletionOut(status=result.status, text=result.text, error=result.error)


@router.get("/financial-analysis", response_model=CompletionOut)
def last_financial_analysis(actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    """Последний результат анализа (PENDING, пока запрос выполняется)"""
    result = state.last_ai_analysis
    if result is None:
        return CompletionOut(status="PENDING")
    return CompletionOut(status=result.status, text=result.text, error=result.error)


@router.post("/scheduling-suggestion", response_model=CompletionOut)
async def scheduling_suggestion(
    day: Optional[date] = None,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    result = await state.scheduling_suggestion(actor, day)
    return CompletionOut(status=result.status, text=result.text, error=result.error)


@router.post("/chat", response_model=CompletionOut)
async def chat(body: ChatRequest, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    result = await state.chat(actor, body.message)
    return CompletionOut(status=result.status, text=result.text, error=result.error)
