"""
Базовый репозиторий для хранения записей в памяти процесса
"""

import uuid
from typing import Dict, Generic, Iterable, List, Optional, TypeVar

from pydantic import BaseModel

from alphaflow.core.exceptions import NotFoundError

ModelT = TypeVar("ModelT", bound=BaseModel)


def generate_id() -> str:
    """Короткий случайный идентификатор записи"""
    return uuid.uuid4().hex[:9]


class BaseRepository(Generic[ModelT]):
    """Базовый репозиторий: коллекция моделей, упорядоченная по вставке"""

    def __init__(self, entity_name: str, items: Optional[Iterable[ModelT]] = None):
        self.entity_name = entity_name
        self._items: Dict[str, ModelT] = {}
        for item in items or []:
            self._items[item.id] = item

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, id: str) -> bool:
        return id in self._items

    def get_by_id(self, id: Optional[str]) -> Optional[ModelT]:
        """Получает запись по ID"""
        if not id:
            return None
        return self._items.get(id)

    def get_or_raise(self, id: str) -> ModelT:
        item = self.get_by_id(id)
        if item is None:
            raise NotFoundError(self.entity_name, id)
        return item

    def get_all(self, skip: int = 0, limit: Optional[int] = None) -> List[ModelT]:
        """Получает все записи с пагинацией"""
        items = list(self._items.values())
        if limit is None:
            return items[skip:]
        return items[skip:skip + limit]

    def create(self, item: ModelT) -> ModelT:
        """Добавляет новую запись"""
        self._items[item.id] = item
        return item

    def update(self, item: ModelT) -> ModelT:
        """Заменяет существующую запись"""
        if item.id not in self._items:
            raise NotFoundError(self.entity_name, item.id)
        self._items[item.id] = item
        return item

    def delete(self, id: str) -> bool:
        """Удаляет запись по ID"""
        return self._items.pop(id, None) is not None

    def replace_all(self, items: Iterable[ModelT]) -> None:
        self._items = {item.id: item for item in items}
