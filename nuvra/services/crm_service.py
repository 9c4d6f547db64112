"""
Serviço do CRM - Leads, qualificação e pipeline.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import selectinload
import structlog

from nuvra.core.database import async_session_maker
from nuvra.models import User, LeadStage, LeadSource, LeadQualification, Interaction
from nuvra.models.lead import DEFAULT_STAGES, DEFAULT_SOURCES
from nuvra.schemas.crm import (
    InteractionResponse,
    LeadDetail,
    LeadSummary,
    PipelineColumn,
    PipelineLead,
    QualificationDetail,
    QualificationSummary,
    QualificationUpdate,
    StageInfo,
)

logger = structlog.get_logger()


RECENT_INTERACTIONS = 10

STAGE_CHANGE_SUBJECT = "Mudança de estágio"

REQUIRED_FIELDS = ("score", "interest_level")


class UnknownStageError(ValueError):
    pass


async def seed_pipeline():
    """
    Garante que os estágios e fontes padrão existem.
    Pode ser chamado várias vezes.
    """
    async with async_session_maker() as session:
        existing_stages = set((await session.execute(select(LeadStage.name))).scalars().all())
        for position, (name, color) in enumerate(DEFAULT_STAGES, 1):
            if name not in existing_stages:
                session.add(LeadStage(name=name, order_position=position, color=color))

        existing_sources = set((await session.execute(select(LeadSource.name))).scalars().all())
        for name in DEFAULT_SOURCES:
            if name not in existing_sources:
                session.add(LeadSource(name=name))

        await session.commit()

    logger.info("pipeline_seeded", stages=len(DEFAULT_STAGES), sources=len(DEFAULT_SOURCES))


def _matches_search(user: User, search: str) -> bool:
    if not search:
        return True
    term = search.lower()
    return (
        term in user.name.lower()
        or search in user.phone
        or bool(user.email and term in user.email.lower())
    )


def _matches_stage(user: User, stage: str) -> bool:
    if stage == "all":
        return True
    if stage == "qualified":
        return user.is_qualified
    qualification = user.qualification
    return bool(qualification and qualification.stage and qualification.stage.name == stage)


def _summarize(user: User) -> LeadSummary:
    qualification = None
    if user.qualification:
        stage = user.qualification.stage
        qualification = QualificationSummary(
            score=user.qualification.score,
            interest_level=user.qualification.interest_level,
            stage_name=stage.name if stage else None,
            stage_color=stage.color if stage else None,
        )

    return LeadSummary(
        id=user.id,
        name=user.name,
        phone=user.phone,
        email=user.email,
        total_uses=user.total_uses,
        created_at=user.created_at,
        last_contact_at=user.last_contact_at,
        is_qualified=user.is_qualified,
        qualification=qualification,
    )


async def list_leads(search: str = "", stage: str = "all") -> List[LeadSummary]:
    """
    Lista os leads, mais recentes primeiro.

    `search` procura no nome, telefone ou email. `stage` aceita "all",
    "qualified" ou o nome de um estágio.
    """
    async with async_session_maker() as session:
        query = select(User).options(
            selectinload(User.qualification).selectinload(LeadQualification.stage)
        ).order_by(User.created_at.desc())

        result = await session.execute(query)
        users = result.scalars().all()

    leads = [
        _summarize(user)
        for user in users
        if _matches_search(user, search) and _matches_stage(user, stage)
    ]
    logger.info("leads_listed", total=len(users), matched=len(leads), stage=stage)
    return leads


async def get_lead_details(user_id: str) -> Optional[LeadDetail]:
    """
    Detalhes de um lead: dados, qualificação, últimas interações e estágios.
    """
    async with async_session_maker() as session:
        result = await session.execute(
            select(User).where(User.id == user_id).options(
                selectinload(User.qualification).selectinload(LeadQualification.stage),
                selectinload(User.qualification).selectinload(LeadQualification.source),
            )
        )
        user = result.scalar_one_or_none()
        if user is None:
            return None

        interactions = (await session.execute(
            select(Interaction)
            .where(Interaction.user_id == user_id)
            .order_by(Interaction.created_at.desc())
            .limit(RECENT_INTERACTIONS)
        )).scalars().all()

        stages = (await session.execute(
            select(LeadStage).order_by(LeadStage.order_position)
        )).scalars().all()

    qualification = None
    q = user.qualification
    if q:
        qualification = QualificationDetail(
            id=q.id,
            score=q.score,
            company_name=q.company_name,
            company_size=q.company_size,
            industry=q.industry,
            job_title=q.job_title,
            interest_level=q.interest_level,
            notes=q.notes,
            estimated_value=q.estimated_value,
            stage_id=q.stage_id,
            stage_name=q.stage.name if q.stage else None,
            source_name=q.source.name if q.source else None,
        )

    return LeadDetail(
        id=user.id,
        name=user.name,
        phone=user.phone,
        email=user.email,
        created_at=user.created_at,
        total_uses=user.total_uses,
        subscription_status=user.subscription_status,
        is_qualified=user.is_qualified,
        qualification=qualification,
        interactions=[InteractionResponse.model_validate(i) for i in interactions],
        stages=[StageInfo.model_validate(s) for s in stages],
    )


async def update_qualification(user_id: str, changes: QualificationUpdate) -> Optional[LeadDetail]:
    """
    Atualiza a qualificação de um lead.

    Textos vazios viram null; score e interest_level nulos ficam como
    estão. Mudança de estágio gera uma interação no
    histórico do lead. Retorna None se o lead não tem qualificação.
    """
    data = changes.model_dump(exclude_unset=True)
    for key, value in data.items():
        if isinstance(value, str) and not value.strip():
            data[key] = None
    # Colunas NOT NULL: null significa "não alterar"
    for key in REQUIRED_FIELDS:
        if key in data and data[key] is None:
            del data[key]

    async with async_session_maker() as session:
        result = await session.execute(
            select(LeadQualification).where(LeadQualification.user_id == user_id)
        )
        qualification = result.scalar_one_or_none()
        if qualification is None:
            return None

        previous_stage_id = qualification.stage_id
        new_stage = None
        if data.get("stage_id"):
            new_stage = await session.get(LeadStage, data["stage_id"])
            if new_stage is None:
                raise UnknownStageError(data["stage_id"])

        for key, value in data.items():
            setattr(qualification, key, value)
        qualification.updated_at = datetime.utcnow()

        if "stage_id" in data and data["stage_id"] != previous_stage_id:
            session.add(Interaction(
                user_id=user_id,
                interaction_type="other",
                subject=STAGE_CHANGE_SUBJECT,
                description=f"Lead movido para {new_stage.name if new_stage else 'nenhum estágio'}",
            ))
            logger.info(
                "lead_stage_changed",
                user_id=user_id,
                stage=new_stage.name if new_stage else None
            )

        await session.commit()

    logger.info("qualification_updated", user_id=user_id, fields=sorted(data))
    return await get_lead_details(user_id)


async def qualify_lead(user_id: str) -> bool:
    """
    Marca o lead como qualificado. Retorna False se o lead não existe.
    """
    async with async_session_maker() as session:
        user = await session.get(User, user_id)
        if user is None:
            return False

        user.is_qualified = True
        user.updated_at = datetime.utcnow()
        await session.commit()

    logger.info("lead_qualified", user_id=user_id)
    return True


async def get_pipeline() -> List[PipelineColumn]:
    """
    Pipeline em colunas: cada estágio com seus leads e o valor somado.
    """
    async with async_session_maker() as session:
        stages = (await session.execute(
            select(LeadStage).order_by(LeadStage.order_position)
        )).scalars().all()

        qualifications = (await session.execute(
            select(LeadQualification)
            .where(LeadQualification.stage_id.isnot(None))
            .options(selectinload(LeadQualification.user))
            .order_by(LeadQualification.created_at)
        )).scalars().all()

    by_stage = {stage.id: [] for stage in stages}
    for q in qualifications:
        if q.stage_id in by_stage:
            by_stage[q.stage_id].append(PipelineLead(
                id=q.user.id,
                name=q.user.name,
                phone=q.user.phone,
                estimated_value=q.estimated_value,
                score=q.score,
            ))

    return [
        PipelineColumn(
            stage=StageInfo.model_validate(stage),
            leads=by_stage[stage.id],
            total_value=sum(lead.estimated_value or 0 for lead in by_stage[stage.id]),
        )
        for stage in stages
    ]
