"""
Репозиторий кассовой книги
"""

from alphaflow.core.exceptions import FinancialValidationError
from alphaflow.models import FinancialRecord
from .base import BaseRepository


class FinancialRecordRepository(BaseRepository[FinancialRecord]):
    """Записи кассовой книги неизменяемы: новые записи идут в начало списка"""

    def __init__(self, items=None):
        super().__init__("Registro financeiro", items)

    def create(self, item: FinancialRecord) -> FinancialRecord:
        self._items = {item.id: item, **self._items}
        return item

    def update(self, item: FinancialRecord) -> FinancialRecord:
        raise FinancialValidationError("Registros financeiros não podem ser editados")
