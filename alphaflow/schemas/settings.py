from typing import Optional

from pydantic import BaseModel

from alphaflow.models import AppMode


class SystemConfigUpdate(BaseModel):
    name: Optional[str] = None
    logo_url: Optional[str] = None


class ModeChange(BaseModel):
    mode: AppMode
