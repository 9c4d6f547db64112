"""
Modelo User - Usuários cadastrados na Nuvra AI.

Cada usuário é também um lead do CRM. A identidade é o telefone:
cadastrar de novo o mesmo número devolve o registro existente.
"""

from sqlalchemy import Column, String, DateTime, Integer, Boolean
from sqlalchemy.orm import relationship, validates
from datetime import datetime
import uuid

from nuvra.core.database import Base


SUBSCRIPTION_STATUSES = ("free", "trial", "active", "client")

# Planos sem limite de uso
UNLIMITED_STATUSES = ("active", "client")


class User(Base):
    """
    Representa um usuário/lead.
    """
    __tablename__ = "users"

    # === Identificação ===
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    phone = Column(String(20), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=True)

    # === Assinatura e uso ===
    subscription_status = Column(String(20), nullable=False, default="free")
    total_uses = Column(Integer, nullable=False, default=0)

    # === CRM ===
    is_qualified = Column(Boolean, nullable=False, default=False)
    lead_source = Column(String(100), nullable=True)
    last_contact_at = Column(DateTime, nullable=True)

    # === Timestamps ===
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # === Relações ===
    usage_logs = relationship("UsageLog", back_populates="user", cascade="all, delete-orphan")
    qualification = relationship(
        "LeadQualification",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan"
    )
    interactions = relationship("Interaction", back_populates="user", cascade="all, delete-orphan")

    @validates("subscription_status")
    def validate_subscription_status(self, key, value):
        if value not in SUBSCRIPTION_STATUSES:
            raise ValueError(f"Unknown subscription status: {value}")
        return value

    @property
    def has_unlimited_usage(self) -> bool:
        return self.subscription_status in UNLIMITED_STATUSES

    def __repr__(self):
        return f"<User {self.name} ({self.phone})>"
