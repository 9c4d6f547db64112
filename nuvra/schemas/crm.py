"""
Esquemas do CRM.
"""

from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import datetime


class StageInfo(BaseModel):
    id: str
    name: str
    order_position: int
    color: str

    class Config:
        from_attributes = True


class DashboardStats(BaseModel):
    total_leads: int
    qualified_leads: int
    active_deals: int
    conversion_rate: int


class QualificationSummary(BaseModel):
    score: int
    interest_level: str
    stage_name: Optional[str] = None
    stage_color: Optional[str] = None


class LeadSummary(BaseModel):
    id: str
    name: str
    phone: str
    email: Optional[str]
    total_uses: int
    created_at: datetime
    last_contact_at: Optional[datetime] = None
    is_qualified: bool
    qualification: Optional[QualificationSummary] = None


class QualificationDetail(BaseModel):
    id: str
    score: int
    company_name: Optional[str] = None
    company_size: Optional[str] = None
    industry: Optional[str] = None
    job_title: Optional[str] = None
    interest_level: str
    notes: Optional[str] = None
    estimated_value: Optional[float] = None
    stage_id: Optional[str] = None
    stage_name: Optional[str] = None
    source_name: Optional[str] = None


class InteractionResponse(BaseModel):
    id: str
    interaction_type: str
    subject: str
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class LeadDetail(BaseModel):
    id: str
    name: str
    phone: str
    email: Optional[str]
    created_at: datetime
    total_uses: int
    subscription_status: str
    is_qualified: bool
    qualification: Optional[QualificationDetail] = None
    interactions: List[InteractionResponse] = Field(default_factory=list)
    stages: List[StageInfo] = Field(default_factory=list)


class QualificationUpdate(BaseModel):
    """Campos editáveis da qualificação. Strings vazias viram null."""
    company_name: Optional[str] = None
    company_size: Optional[str] = None
    industry: Optional[str] = None
    job_title: Optional[str] = None
    interest_level: Optional[Literal["baixo", "medio", "alto"]] = None
    estimated_value: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    stage_id: Optional[str] = None
    score: Optional[int] = Field(None, ge=0, le=100)


class PipelineLead(BaseModel):
    id: str
    name: str
    phone: str
    estimated_value: Optional[float] = None
    score: int


class PipelineColumn(BaseModel):
    stage: StageInfo
    leads: List[PipelineLead] = Field(default_factory=list)
    total_value: float = 0


class DayCount(BaseModel):
    date: str
    count: int


class SourceCount(BaseModel):
    name: str
    count: int


class FunnelStep(BaseModel):
    stage: str
    count: int
    color: str


class AnalyticsReport(BaseModel):
    leads_per_day: List[DayCount] = Field(default_factory=list)
    top_sources: List[SourceCount] = Field(default_factory=list)
    conversion_funnel: List[FunnelStep] = Field(default_factory=list)
    average_score: int = 0
