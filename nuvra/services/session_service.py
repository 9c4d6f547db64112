"""
Sessão do usuário.

A sessão é um objeto explícito: é restaurada a partir do id guardado
pelo cliente, pode ser criada pelo cadastro e é encerrada no logout.
Quem precisa do usuário atual recebe a sessão como parâmetro.
"""

from typing import Optional
import structlog

from nuvra.models import User
from nuvra.services import user_service

logger = structlog.get_logger()


class UserSession:
    """
    Usuário atual e a cota de uso dele.
    """
    def __init__(self, user: Optional[User] = None):
        self.user = user

    @classmethod
    async def restore(cls, user_id: Optional[str]) -> "UserSession":
        """
        Restaura a sessão a partir do id persistido.
        Id ausente ou que não existe mais resulta numa sessão vazia.
        """
        if not user_id:
            return cls()

        user = await user_service.get_user(user_id)
        if user is None:
            logger.info("session_dangling_user_id", user_id=user_id)
        return cls(user)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    @property
    def remaining_uses(self) -> Optional[int]:
        return user_service.remaining_uses(self.user)

    async def register(self, name: str, phone: str, email: Optional[str] = None) -> User:
        self.user = await user_service.get_or_create_user(name, phone, email)
        return self.user

    def check_usage_limit(self) -> bool:
        return user_service.check_usage_limit(self.user)

    async def log_usage(self, input_text: str, analysis_type: str) -> User:
        if self.user is None:
            raise PermissionError("User not authenticated")
        self.user = await user_service.log_usage(self.user.id, input_text, analysis_type)
        return self.user

    def logout(self):
        logger.info("session_closed", user_id=self.user_id)
        self.user = None

    def __repr__(self):
        return f"<UserSession {self.user_id or 'anonymous'}>"
