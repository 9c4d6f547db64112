"""
Esquemas Pydantic da Nuvra AI.
"""

from nuvra.schemas.analysis import (
    Suggestion,
    StructuredScore,
    RawText,
    AnalysisResult,
    AnalyzeRequest,
    AnalyzeResponse,
)
from nuvra.schemas.user import UserRegister, UserResponse, SessionResponse
from nuvra.schemas.chat import ChatTurn, ChatRequest, ChatResponse

__all__ = [
    "Suggestion",
    "StructuredScore",
    "RawText",
    "AnalysisResult",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "UserRegister",
    "UserResponse",
    "SessionResponse",
    "ChatTurn",
    "ChatRequest",
    "ChatResponse",
]
