from typing import Optional

from pydantic import BaseModel

from alphaflow.schemas.team import UserOut


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    success: bool
    message: str = ""
    user: Optional[UserOut] = None
