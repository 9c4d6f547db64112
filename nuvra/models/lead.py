"""
Modelos do CRM: estágios, fontes, qualificação e interações.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer, Float
from sqlalchemy.orm import relationship
import uuid

from nuvra.core.database import Base


# Vocabulário fixo do funil: (nome, cor)
DEFAULT_STAGES = [
    ("Novo Lead", "#3B82F6"),
    ("Contato Inicial", "#8B5CF6"),
    ("Qualificado", "#10B981"),
    ("Proposta Enviada", "#F59E0B"),
    ("Negociação", "#EF4444"),
    ("Fechado", "#22C55E"),
]

DEFAULT_SOURCES = ["Site", "WhatsApp", "Indicação", "Redes Sociais", "Outro"]

# Estágios que contam como negócio ativo no dashboard
ACTIVE_DEAL_STAGES = ("Proposta Enviada", "Negociação")


class LeadStage(Base):
    """
    Um passo ordenado do pipeline de vendas.
    """
    __tablename__ = "lead_stages"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), unique=True, nullable=False)
    order_position = Column(Integer, nullable=False)
    color = Column(String(20), nullable=False, default="#6B7280")

    qualifications = relationship("LeadQualification", back_populates="stage")

    def __repr__(self):
        return f"<LeadStage {self.order_position}:{self.name}>"


class LeadSource(Base):
    __tablename__ = "lead_sources"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), unique=True, nullable=False)

    qualifications = relationship("LeadQualification", back_populates="source")


class LeadQualification(Base):
    """
    Dados comerciais de um lead. No máximo uma por usuário.
    """
    __tablename__ = "lead_qualifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)

    score = Column(Integer, nullable=False, default=0)  # 0-100
    company_name = Column(String(255), nullable=True)
    company_size = Column(String(50), nullable=True, default="medio")
    industry = Column(String(100), nullable=True)
    job_title = Column(String(100), nullable=True)
    interest_level = Column(String(20), nullable=False, default="medio")  # baixo, medio, alto
    estimated_value = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)

    stage_id = Column(String(36), ForeignKey("lead_stages.id"), nullable=True)
    source_id = Column(String(36), ForeignKey("lead_sources.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="qualification")
    stage = relationship("LeadStage", back_populates="qualifications")
    source = relationship("LeadSource", back_populates="qualifications")


class Interaction(Base):
    """
    Histórico de ações do CRM sobre um lead. Somente inserção.
    """
    __tablename__ = "interactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    interaction_type = Column(String(30), nullable=False, default="other")  # call, email, meeting, other
    subject = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="interactions")
