from typing import List, Optional

from pydantic import BaseModel, Field


class Service(BaseModel):
    """Услуга из прайс-листа"""

    id: str
    name: str
    duration_minutes: int = Field(gt=0)
    price: float = Field(ge=0)
    category: str = ""
    commission_percentage: Optional[float] = Field(default=None, ge=0, le=100)


class Product(BaseModel):
    """Товар для продажи на кассе"""

    id: str
    name: str
    price: float = Field(ge=0)
    stock: int = Field(ge=0)
    category: str = ""
    commission_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    recommended_for: List[str] = Field(default_factory=list)
