"""
Endpoint de análise de textos de marketing e código.
"""

from fastapi import APIRouter, Depends, HTTPException, status
import openai
import structlog

from nuvra.core.security import require_user_session
from nuvra.schemas.analysis import AnalyzeRequest, AnalyzeResponse
from nuvra.services.orchestrator import UsageLimitExceeded, classify_analysis_type, process_analysis
from nuvra.services.session_service import UserSession
from nuvra.services.user_service import build_upgrade_url

router = APIRouter()
logger = structlog.get_logger()


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    payload: AnalyzeRequest,
    session: UserSession = Depends(require_user_session)
):
    """
    Analisa o texto e consome um uso da cota.

    Com a cota esgotada responde 402 com o link para falar com a Nuvra.
    """
    try:
        result = await process_analysis(session, payload.text)
    except UsageLimitExceeded as e:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail={
                "message": "Você atingiu o limite gratuito!",
                "used": e.total_uses,
                "upgrade_url": build_upgrade_url(),
            },
        )
    except openai.OpenAIError as e:
        logger.error("analyze_llm_error", error=str(e))
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Falha ao consultar a IA")

    return AnalyzeResponse(
        result=result,
        analysis_type=classify_analysis_type(result),
        remaining_uses=session.remaining_uses,
    )
