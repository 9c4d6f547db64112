"""
Modelos do banco de dados.
"""

from nuvra.models.user import User
from nuvra.models.usage import UsageLog
from nuvra.models.lead import LeadStage, LeadSource, LeadQualification, Interaction

__all__ = [
    "User",
    "UsageLog",
    "LeadStage",
    "LeadSource",
    "LeadQualification",
    "Interaction",
]
