"""
Modelo UsageLog - Registro de cada análise ou mensagem de chat.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship, validates
import uuid

from nuvra.core.database import Base


ANALYSIS_TYPES = ("marketing", "code", "chat")

# Tamanho máximo do texto guardado no log
MAX_LOGGED_INPUT = 500


class UsageLog(Base):
    """
    Um uso da plataforma. Somente inserção.
    """
    __tablename__ = "usage_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    input_text = Column(Text, nullable=False)
    analysis_type = Column(String(20), nullable=False)  # marketing, code, chat
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="usage_logs")

    @validates("analysis_type")
    def validate_analysis_type(self, key, value):
        if value not in ANALYSIS_TYPES:
            raise ValueError(f"Unknown analysis type: {value}")
        return value
