"""
Репозиторий для работы с клиентами
"""

from typing import List

from alphaflow.models import Client
from .base import BaseRepository


class ClientRepository(BaseRepository[Client]):

    def __init__(self, items=None):
        super().__init__("Cliente", items)

    def search(self, term: str) -> List[Client]:
        """Ищет клиентов по имени (без учета регистра) или по части телефона"""
        if not term:
            return self.get_all()
        lowered = term.lower()
        return [
            c for c in self._items.values()
            if lowered in c.name.lower() or term in c.phone
        ]
