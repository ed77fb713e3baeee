from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class Address(BaseModel):
    street: str = ""
    number: str = ""
    neighborhood: str = ""
    city: str = ""
    zip_code: str = ""


class VisagismProfile(BaseModel):
    """Профиль визажизма клиента (форма лица, тип волос, стиль бороды)"""

    face_shape: str = ""
    hair_type: str = ""
    beard_style: str = ""
    notes: str = ""

    def traits(self) -> list:
        return [t for t in (self.face_shape, self.hair_type, self.beard_style) if t]


class Client(BaseModel):
    id: str
    name: str
    phone: str
    email: Optional[str] = None
    cpf: Optional[str] = None
    address: Optional[Address] = None
    total_spent: float = Field(default=0.0, ge=0)
    last_visit: Optional[date] = None
    notes: Optional[str] = None
    medical_record: Optional[str] = None  # только в режиме клиники
    visagism_profile: Optional[VisagismProfile] = None
