"""
Endpoints do chat com a IA da Nuvra.
"""

from fastapi import APIRouter, Depends, HTTPException, status
import openai
import structlog

from nuvra.core.security import require_user_session
from nuvra.schemas.chat import ChatRequest, ChatResponse
from nuvra.services.heuristics import CHAT_GREETING
from nuvra.services.orchestrator import process_chat
from nuvra.services.session_service import UserSession

router = APIRouter()
logger = structlog.get_logger()


@router.get("/greeting", response_model=ChatResponse)
async def greeting():
    """Primeira mensagem da conversa."""
    return ChatResponse(message=CHAT_GREETING)


@router.post("", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    session: UserSession = Depends(require_user_session)
):
    try:
        return await process_chat(session, payload.history, payload.message)
    except openai.OpenAIError as e:
        logger.error("chat_llm_error", error=str(e))
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Falha ao consultar a IA")
