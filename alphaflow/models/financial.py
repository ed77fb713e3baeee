from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .enums import RecordType


class FinancialRecord(BaseModel):
    """Запись в кассовой книге. Сумма всегда положительная, знак задает type."""

    id: str
    date: datetime
    description: str
    amount: float = Field(ge=0)
    type: RecordType
    category: str
    professional_id: Optional[str] = None


class SystemConfig(BaseModel):
    name: str = "AlphaFlow"
    logo_url: Optional[str] = None
