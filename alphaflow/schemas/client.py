from typing import Optional

from pydantic import BaseModel

from alphaflow.models import Address


class ClientCreate(BaseModel):
    name: str
    phone: str
    email: Optional[str] = None
    cpf: Optional[str] = None
    address: Optional[Address] = None
    notes: Optional[str] = None
    medical_record: Optional[str] = None


class ClientUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    cpf: Optional[str] = None
    address: Optional[Address] = None
    notes: Optional[str] = None
    medical_record: Optional[str] = None
