"""
Resolução da sessão do usuário.
O cliente guarda o id do usuário e o envia no header X-User-Id.
"""

from fastapi import HTTPException, Security, Depends, status
from fastapi.security import APIKeyHeader
from typing import Optional

from nuvra.services.session_service import UserSession


user_id_header = APIKeyHeader(
    name="X-User-Id",
    auto_error=False,
    description="Id do usuário guardado pelo cliente após o cadastro"
)


async def get_user_session(
    user_id: Optional[str] = Security(user_id_header)
) -> UserSession:
    """
    Restaura a sessão; sem header ou com id desconhecido, a sessão vem vazia.

    Uso:
        @router.get("/endpoint")
        async def endpoint(session: UserSession = Depends(get_user_session)):
            ...
    """
    return await UserSession.restore(user_id)


async def require_user_session(
    session: UserSession = Depends(get_user_session)
) -> UserSession:
    """
    Igual a get_user_session, mas exige um usuário cadastrado.
    """
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Cadastro necessário. Incluir header 'X-User-Id'",
            headers={"WWW-Authenticate": "ApiKey"},
        )
    return session
