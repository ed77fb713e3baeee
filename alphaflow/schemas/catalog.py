from typing import List, Optional

from pydantic import BaseModel

# Ограничения (цена >= 0, длительность > 0 и т.д.) проверяют модели каталога,
# чтобы ошибка пришла как CatalogValidationError


class ServiceCreate(BaseModel):
    name: str
    duration_minutes: int
    price: float
    category: str = ""
    commission_percentage: Optional[float] = None


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    duration_minutes: Optional[int] = None
    price: Optional[float] = None
    category: Optional[str] = None
    commission_percentage: Optional[float] = None


class ProductCreate(BaseModel):
    name: str
    price: float
    stock: int = 0
    category: str = ""
    commission_percentage: Optional[float] = None
    recommended_for: List[str] = []


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    stock: Optional[int] = None
    category: Optional[str] = None
    commission_percentage: Optional[float] = None
    recommended_for: Optional[List[str]] = None
