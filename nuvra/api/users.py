"""
Endpoints de cadastro e sessão.
"""

from fastapi import APIRouter, Depends
import structlog

from nuvra.core.security import get_user_session, require_user_session
from nuvra.schemas.user import SessionResponse, UserRegister, UserResponse
from nuvra.services.session_service import UserSession

router = APIRouter()
logger = structlog.get_logger()


def _session_response(session: UserSession) -> SessionResponse:
    return SessionResponse(
        user=UserResponse.model_validate(session.user),
        remaining_uses=session.remaining_uses,
        can_use=session.check_usage_limit(),
    )


@router.post("/register", response_model=SessionResponse)
async def register(
    payload: UserRegister,
    session: UserSession = Depends(get_user_session)
):
    """
    Cadastra um usuário ou recupera o existente pelo telefone.
    O cliente deve guardar `user.id` e enviá-lo em X-User-Id.
    """
    await session.register(payload.name, payload.phone, payload.email)
    logger.info("user_registered", user_id=session.user_id)
    return _session_response(session)


@router.get("/me", response_model=SessionResponse)
async def me(session: UserSession = Depends(require_user_session)):
    return _session_response(session)


@router.post("/logout")
async def logout(session: UserSession = Depends(get_user_session)):
    """
    Encerra a sessão. O cliente deve apagar o id guardado.
    """
    session.logout()
    return {"status": "ok"}
