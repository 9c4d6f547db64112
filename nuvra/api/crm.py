"""
Endpoints do CRM: leads, pipeline e analytics.
"""

from typing import List
from fastapi import APIRouter, HTTPException, Query, status

from nuvra.schemas.crm import (
    AnalyticsReport,
    DashboardStats,
    LeadDetail,
    LeadSummary,
    PipelineColumn,
    QualificationUpdate,
)
from nuvra.services import analytics_service, crm_service

router = APIRouter()


def _not_found(lead_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Lead {lead_id} não encontrado"
    )


@router.get("/stats", response_model=DashboardStats)
async def stats():
    return await analytics_service.get_dashboard_stats()


@router.get("/leads", response_model=List[LeadSummary])
async def list_leads(
    search: str = Query("", description="Nome, telefone ou email"),
    stage: str = Query("all", description="all, qualified ou nome do estágio")
):
    return await crm_service.list_leads(search=search, stage=stage)


@router.get("/leads/{lead_id}", response_model=LeadDetail)
async def lead_details(lead_id: str):
    lead = await crm_service.get_lead_details(lead_id)
    if lead is None:
        raise _not_found(lead_id)
    return lead


@router.patch("/leads/{lead_id}/qualification", response_model=LeadDetail)
async def update_qualification(lead_id: str, payload: QualificationUpdate):
    try:
        lead = await crm_service.update_qualification(lead_id, payload)
    except crm_service.UnknownStageError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Estágio {e} não existe"
        )
    if lead is None:
        raise _not_found(lead_id)
    return lead


@router.post("/leads/{lead_id}/qualify", response_model=LeadDetail)
async def qualify(lead_id: str):
    if not await crm_service.qualify_lead(lead_id):
        raise _not_found(lead_id)
    return await crm_service.get_lead_details(lead_id)


@router.get("/pipeline", response_model=List[PipelineColumn])
async def pipeline():
    return await crm_service.get_pipeline()


@router.get("/analytics", response_model=AnalyticsReport)
async def analytics():
    return await analytics_service.get_analytics()
