"""
Esquemas de cadastro e sessão.
"""

import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


MIN_PHONE_DIGITS = 10


def normalize_phone(value: str) -> str:
    """Mantém só os dígitos: "(11) 98765-4321" -> "11987654321"."""
    return re.sub(r"\D", "", value or "")


class UserRegister(BaseModel):
    """Para cadastrar (ou recuperar) um usuário pelo telefone."""
    name: str = Field(..., max_length=255)
    phone: str = Field(..., max_length=30)
    email: Optional[str] = Field(None, max_length=255)

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Nome e telefone são obrigatórios")
        return v

    @field_validator("phone")
    @classmethod
    def phone_digits(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Nome e telefone são obrigatórios")
        digits = normalize_phone(v)
        if len(digits) < MIN_PHONE_DIGITS:
            raise ValueError("Telefone inválido")
        return digits

    @field_validator("email")
    @classmethod
    def blank_email_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Maria Silva",
                "phone": "(11) 98765-4321",
                "email": "maria@exemplo.com.br",
            }
        }


class UserResponse(BaseModel):
    id: str
    name: str
    phone: str
    email: Optional[str]
    subscription_status: str
    total_uses: int
    created_at: datetime

    class Config:
        from_attributes = True


class SessionResponse(BaseModel):
    """Estado da sessão atual."""
    user: UserResponse
    remaining_uses: Optional[int] = Field(None, description="None = ilimitado")
    can_use: bool
