"""
Репозиторий для работы с сотрудниками
"""

from typing import List, Optional

from alphaflow.models import User, UserRole
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Репозиторий для работы с сотрудниками"""

    def __init__(self, items=None):
        super().__init__("Usuário", items)

    def get_by_email(self, email: str) -> Optional[User]:
        """Получает сотрудника по e-mail (без учета регистра)"""
        normalized = email.strip().lower()
        return next((u for u in self._items.values() if u.email.lower() == normalized), None)

    def get_staff(self) -> List[User]:
        """Сотрудники, которые ведут агенду: мастера и администраторы"""
        return [
            u for u in self._items.values()
            if u.role in (UserRole.PROFESSIONAL, UserRole.ADMIN)
        ]
