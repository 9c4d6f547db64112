"""
Serviço de Analytics - Números do dashboard e relatórios do CRM.
"""

import math
from collections import Counter
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
import structlog

from nuvra.core.database import async_session_maker
from nuvra.models import User, LeadStage, LeadQualification
from nuvra.models.lead import ACTIVE_DEAL_STAGES
from nuvra.schemas.crm import (
    AnalyticsReport,
    DashboardStats,
    DayCount,
    FunnelStep,
    SourceCount,
)

logger = structlog.get_logger()


DAYS_SHOWN = 7
TOP_SOURCES = 5


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


async def get_dashboard_stats() -> DashboardStats:
    """
    Totais do topo do dashboard.
    """
    async with async_session_maker() as session:
        total_leads = (await session.execute(
            select(func.count(User.id))
        )).scalar() or 0

        qualified_leads = (await session.execute(
            select(func.count(User.id)).where(User.is_qualified.is_(True))
        )).scalar() or 0

        active_deals = (await session.execute(
            select(func.count(LeadQualification.id))
            .join(LeadStage, LeadQualification.stage_id == LeadStage.id)
            .where(LeadStage.name.in_(ACTIVE_DEAL_STAGES))
        )).scalar() or 0

    conversion_rate = qualified_leads / total_leads * 100 if total_leads else 0

    return DashboardStats(
        total_leads=total_leads,
        qualified_leads=qualified_leads,
        active_deals=active_deals,
        conversion_rate=round_half_up(conversion_rate),
    )


async def get_analytics() -> AnalyticsReport:
    """
    Relatório do CRM: leads por dia, principais fontes, funil e score médio.
    """
    async with async_session_maker() as session:
        created = (await session.execute(
            select(User.created_at).order_by(User.created_at)
        )).scalars().all()

        qualifications = (await session.execute(
            select(LeadQualification).options(
                selectinload(LeadQualification.stage),
                selectinload(LeadQualification.source),
            )
        )).scalars().all()

    # Dias em ordem cronológica, formato pt-BR
    per_day = Counter()
    for created_at in created:
        if created_at:
            per_day[created_at.strftime("%d/%m/%Y")] += 1
    leads_per_day = [DayCount(date=day, count=count) for day, count in per_day.items()][-DAYS_SHOWN:]

    sources = Counter(q.source.name for q in qualifications if q.source)
    top_sources = [
        SourceCount(name=name, count=count)
        for name, count in sorted(sources.items(), key=lambda item: -item[1])[:TOP_SOURCES]
    ]

    staged = sorted(
        (q for q in qualifications if q.stage),
        key=lambda q: q.stage.order_position
    )
    funnel = {}
    for q in staged:
        step = funnel.setdefault(q.stage.name, FunnelStep(stage=q.stage.name, count=0, color=q.stage.color))
        step.count += 1

    average = sum(q.score for q in qualifications) / len(qualifications) if qualifications else 0

    logger.info(
        "analytics_generated",
        users=len(created),
        qualifications=len(qualifications)
    )

    return AnalyticsReport(
        leads_per_day=leads_per_day,
        top_sources=top_sources,
        conversion_funnel=list(funnel.values()),
        average_score=round_half_up(average),
    )
