"""
Orquestrador - Coordena cota, análise/chat e registro de uso.
"""

import time
from typing import List, Union
import structlog

from nuvra.schemas.analysis import RawText, StructuredScore
from nuvra.schemas.chat import ChatResponse, ChatTurn
from nuvra.services.ai_service import analyze_with_ai, chat_with_ai
from nuvra.services.heuristics import CHAT_LIMIT_MESSAGE
from nuvra.services.session_service import UserSession

logger = structlog.get_logger()


class UsageLimitExceeded(Exception):
    """A cota gratuita do usuário acabou."""

    def __init__(self, user_id: str, total_uses: int):
        super().__init__(f"Usage limit reached for user {user_id} ({total_uses} uses)")
        self.user_id = user_id
        self.total_uses = total_uses


def classify_analysis_type(result: Union[StructuredScore, RawText]) -> str:
    """
    Tipo registrado no log: relatórios em texto que falam de código
    contam como `code`, o resto como `marketing`.
    """
    if isinstance(result, RawText) and ("Código" in result.content or "função" in result.content):
        return "code"
    return "marketing"


async def process_analysis(session: UserSession, text: str) -> Union[StructuredScore, RawText]:
    """
    Verifica a cota, analisa o texto e registra o uso.
    O uso só é registrado depois que a análise terminou.
    """
    if not session.check_usage_limit():
        logger.info("usage_limit_reached", user_id=session.user_id, total_uses=session.user.total_uses)
        raise UsageLimitExceeded(session.user_id, session.user.total_uses)

    start_time = time.time()
    logger.info("processing_analysis", user_id=session.user_id, text_preview=text[:50])

    try:
        result = await analyze_with_ai(text)
    except Exception as e:
        logger.error("process_analysis_error", user_id=session.user_id, error=str(e))
        raise

    analysis_type = classify_analysis_type(result)
    await session.log_usage(text, analysis_type)

    logger.info(
        "analysis_generated",
        user_id=session.user_id,
        kind=result.kind,
        analysis_type=analysis_type,
        response_time_ms=int((time.time() - start_time) * 1000)
    )
    return result


async def process_chat(
    session: UserSession,
    history: List[ChatTurn],
    message: str
) -> ChatResponse:
    """
    Responde a uma mensagem do chat considerando os turnos anteriores.
    Com a cota esgotada devolve a mensagem de limite, sem erro.
    """
    if not session.check_usage_limit():
        logger.info("chat_limit_reached", user_id=session.user_id)
        return ChatResponse(message=CHAT_LIMIT_MESSAGE, limit_reached=True, remaining_uses=0)

    messages = [{"role": turn.role, "content": turn.content} for turn in history]
    messages.append({"role": "user", "content": message})

    logger.info("processing_chat", user_id=session.user_id, history_length=len(history))

    try:
        reply = await chat_with_ai(messages)
    except Exception as e:
        logger.error("process_chat_error", user_id=session.user_id, error=str(e))
        raise

    await session.log_usage(message, "chat")

    return ChatResponse(message=reply, remaining_uses=session.remaining_uses)
