from typing import Optional

from pydantic import BaseModel

from alphaflow.services.gemini_service import CompletionStatus


class ChatRequest(BaseModel):
    message: str


class CompletionOut(BaseModel):
    status: CompletionStatus
    text: str = ""
    error: Optional[str] = None
