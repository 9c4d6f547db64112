"""
Serviço de Usuários - Cadastro, cota gratuita e registro de uso.
"""

from typing import Optional
from urllib.parse import quote
from sqlalchemy import select, update
import structlog

from nuvra.core.config import settings
from nuvra.core.database import async_session_maker
from nuvra.models import User, UsageLog, LeadStage, LeadSource, LeadQualification
from nuvra.models.usage import MAX_LOGGED_INPUT

logger = structlog.get_logger()


DEFAULT_LEAD_SOURCE = "Site"

UPGRADE_MESSAGE = (
    "Olá! Gostaria de saber mais sobre os planos da Nuvra AI "
    "e como posso continuar usando a plataforma."
)


async def get_user(user_id: str) -> Optional[User]:
    async with async_session_maker() as session:
        result = await session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()


async def get_or_create_user(
    name: str,
    phone: str,
    email: Optional[str] = None
) -> User:
    """
    Obtém o usuário pelo telefone ou cria um novo.

    Um usuário novo começa no plano gratuito, sem usos, e entra no
    primeiro estágio do pipeline.
    """
    async with async_session_maker() as session:
        result = await session.execute(select(User).where(User.phone == phone))
        user = result.scalar_one_or_none()

        if user:
            logger.info("user_found", user_id=user.id)
            return user

        user = User(
            name=name,
            phone=phone,
            email=email,
            subscription_status="free",
            total_uses=0,
            lead_source=DEFAULT_LEAD_SOURCE,
        )
        session.add(user)
        await session.flush()

        stage = (await session.execute(
            select(LeadStage).order_by(LeadStage.order_position).limit(1)
        )).scalar_one_or_none()
        source = (await session.execute(
            select(LeadSource).where(LeadSource.name == DEFAULT_LEAD_SOURCE)
        )).scalar_one_or_none()

        session.add(LeadQualification(
            user_id=user.id,
            score=0,
            interest_level="medio",
            stage_id=stage.id if stage else None,
            source_id=source.id if source else None,
        ))

        await session.commit()
        await session.refresh(user)

        logger.info("user_created", user_id=user.id)
        return user


def check_usage_limit(user: Optional[User]) -> bool:
    """
    Indica se o usuário ainda pode usar a plataforma.
    Planos active/client não têm limite.
    """
    if user is None:
        return False
    if user.has_unlimited_usage:
        return True
    return user.total_uses < settings.free_usage_limit


def remaining_uses(user: Optional[User]) -> Optional[int]:
    """Usos restantes; None significa ilimitado."""
    if user is None:
        return 0
    if user.has_unlimited_usage:
        return None
    return max(0, settings.free_usage_limit - user.total_uses)


async def log_usage(user_id: str, input_text: str, analysis_type: str) -> User:
    """
    Registra um uso e devolve o usuário com o contador atualizado.

    O incremento é feito pelo banco; o valor devolvido é o que ficou
    gravado, não uma estimativa local.
    """
    async with async_session_maker() as session:
        session.add(UsageLog(
            user_id=user_id,
            input_text=input_text[:MAX_LOGGED_INPUT],
            analysis_type=analysis_type,
        ))
        await session.execute(
            update(User)
            .where(User.id == user_id)
            .values(total_uses=User.total_uses + 1)
            .execution_options(synchronize_session=False)
        )
        await session.commit()

        result = await session.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        user = result.scalar_one()

    logger.info(
        "usage_logged",
        user_id=user_id,
        analysis_type=analysis_type,
        total_uses=user.total_uses
    )
    return user


def build_upgrade_url() -> str:
    """Link do WhatsApp para falar com a Nuvra sobre planos."""
    return f"https://wa.me/{settings.contact_whatsapp_number}?text={quote(UPGRADE_MESSAGE)}"
