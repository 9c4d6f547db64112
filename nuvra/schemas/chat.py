"""
Esquemas do chat.
"""

from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    history: List[ChatTurn] = Field(default_factory=list, description="Turnos anteriores")
    message: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    message: str
    limit_reached: bool = False
    remaining_uses: Optional[int] = None
