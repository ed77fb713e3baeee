"""
Репозитории каталога: услуги и товары
"""

from typing import List

from alphaflow.models import Product, Service
from .base import BaseRepository


class ServiceRepository(BaseRepository[Service]):
    """Репозиторий для работы с услугами"""

    def __init__(self, items=None):
        super().__init__("Serviço", items)

    def search_by_name(self, search_term: str) -> List[Service]:
        """Ищет услуги по названию"""
        lowered = (search_term or "").lower()
        return [s for s in self._items.values() if lowered in s.name.lower()]


class ProductRepository(BaseRepository[Product]):
    """Репозиторий для работы с товарами"""

    def __init__(self, items=None):
        super().__init__("Produto", items)

    def search(self, search_term: str) -> List[Product]:
        """Ищет товары по названию или категории"""
        lowered = (search_term or "").lower()
        return [
            p for p in self._items.values()
            if lowered in p.name.lower() or lowered in p.category.lower()
        ]
