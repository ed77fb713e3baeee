from typing import Optional

from pydantic import BaseModel

from alphaflow.models import User, UserRole


class UserOut(BaseModel):
    """Сотрудник без пароля"""

    id: str
    name: str
    email: str
    role: UserRole
    avatar_url: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(**user.model_dump(exclude={"password"}))


class UserCreate(BaseModel):
    name: str
    email: str
    password: Optional[str] = None
    role: UserRole = UserRole.PROFESSIONAL
    avatar_url: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None
    avatar_url: Optional[str] = None
