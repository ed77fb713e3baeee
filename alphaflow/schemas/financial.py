from typing import Optional

from pydantic import BaseModel

from alphaflow.models import RecordType


class ExpenseCreate(BaseModel):
    """Ручная проводка; сумму проверяет финансовый раздел"""

    description: str
    amount: float
    category: str = "Geral"
    type: RecordType = RecordType.EXPENSE
    professional_id: Optional[str] = None
