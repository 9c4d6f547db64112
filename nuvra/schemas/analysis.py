"""
Esquemas do resultado de análise.

O resultado é uma variante com tag: `StructuredScore` quando há
pontuação, `RawText` quando a resposta é texto livre (análise de
código ou saída do LLM que não pôde ser interpretada).
"""

from pydantic import BaseModel, Field, field_validator
from typing import Annotated, List, Literal, Optional, Union


class Suggestion(BaseModel):
    title: str
    description: str


class StructuredScore(BaseModel):
    """Pontuação de um texto de marketing."""
    kind: Literal["structured"] = "structured"
    score: int = Field(..., ge=0, le=100)
    engagement: int = Field(..., ge=0, le=100)
    conversion: int = Field(..., ge=0, le=100)
    suggestions: List[Suggestion] = Field(default_factory=list)
    optimized_text: str = ""

    class Config:
        json_schema_extra = {
            "example": {
                "kind": "structured",
                "score": 80,
                "engagement": 85,
                "conversion": 90,
                "suggestions": [
                    {
                        "title": "Incluir Dados Concretos",
                        "description": "Use números específicos e estatísticas.",
                    }
                ],
                "optimized_text": "Compre agora nosso produto revolucionário!",
            }
        }


class RawText(BaseModel):
    """Resposta em texto livre."""
    kind: Literal["raw"] = "raw"
    content: str


AnalysisResult = Annotated[Union[StructuredScore, RawText], Field(discriminator="kind")]


class AnalyzeRequest(BaseModel):
    text: str = Field(..., description="Texto de marketing ou código")

    @field_validator("text")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("O texto não pode estar vazio")
        return v


class AnalyzeResponse(BaseModel):
    result: AnalysisResult
    analysis_type: Literal["marketing", "code"]
    remaining_uses: Optional[int] = Field(None, description="None = ilimitado")
