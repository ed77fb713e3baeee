from typing import Optional

from pydantic import BaseModel

from .enums import UserRole


class User(BaseModel):
    """Сотрудник заведения: администратор, мастер или ресепшн"""

    id: str
    name: str
    email: str
    password: Optional[str] = None  # непрозрачный секрет, наружу не отдается
    role: UserRole
    avatar_url: Optional[str] = None

    @property
    def short_name(self) -> str:
        return self.name.split(" ")[0] if self.name else "Prof."
