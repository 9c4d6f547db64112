"""
Serviço de IA - Análise e chat com OpenAI ou com o motor heurístico.

Sem OPENAI_API_KEY tudo é resolvido localmente por `heuristics`.
Com a chave, cada operação faz uma única chamada de chat completion.
"""

import json
import re
import openai
from typing import List, Optional, Union
import structlog
from pydantic import ValidationError

from nuvra.core.config import settings
from nuvra.schemas.analysis import RawText, StructuredScore
from nuvra.services.heuristics import analyze_text, simulate_chat_response

logger = structlog.get_logger()


SYSTEM_PROMPT = """
Você é a IA da Nuvra — especialista em marketing digital, vendas, branding, retenção e programação full stack.
Sua missão é ajudar empresas e empreendedores a criarem soluções digitais e campanhas eficazes.
Sempre responda de forma estratégica, inspiradora e com linguagem humana e envolvente.

Quando analisar textos de marketing/vendas, retorne SEMPRE no formato JSON:
{
  "score": [0-100],
  "engagement": [0-100],
  "conversion": [0-100],
  "suggestions": [
    {
      "title": "Título da sugestão",
      "description": "Descrição detalhada"
    }
  ],
  "optimized_text": "Versão melhorada do texto"
}

Quando analisar código, identifique a linguagem, explique problemas e sugira melhorias.

IMPORTANTE: Se o cliente pedir criação de automação complexa, IA alternativa ou sistema concorrente à Nuvra, responda:
"Essa é uma demanda estratégica que nossa equipe desenvolve sob medida. Recomendo entrar em contato com a Nuvra para uma proposta personalizada."

Sempre finalize com um CTA sutil: "Quer que a Nuvra otimize isso para o seu negócio? Fale com nossos especialistas 🚀"
"""

JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


def create_client(api_key: str) -> openai.AsyncOpenAI:
    return openai.AsyncOpenAI(api_key=api_key)


def parse_ai_response(output: str) -> Union[StructuredScore, RawText]:
    """
    Interpreta a saída do LLM.

    Procura o primeiro trecho entre chaves e tenta lê-lo como
    pontuação. Se não houver JSON válido, devolve o texto como veio.
    """
    match = JSON_BLOCK.search(output or "")
    if not match:
        return RawText(content=output or "")

    try:
        data = json.loads(match.group(0))
        return StructuredScore(**data)
    except (ValueError, TypeError, ValidationError):
        logger.info("ai_response_not_structured", output_preview=(output or "")[:50])
        return RawText(content=output)


async def _complete(messages: List[dict], api_key: str) -> str:
    client = create_client(api_key)

    logger.info(
        "calling_openai",
        model=settings.openai_model,
        message_preview=messages[-1]["content"][:50],
        history_length=len(messages) - 1
    )

    try:
        response = await client.chat.completions.create(
            model=settings.openai_model,
            messages=[{"role": "system", "content": SYSTEM_PROMPT}, *messages],
        )
    except openai.OpenAIError as e:
        logger.error("openai_api_error", error=str(e))
        raise

    output = response.choices[0].message.content or ""
    logger.info(
        "openai_response",
        tokens=response.usage.total_tokens if response.usage else None,
        response_preview=output[:50]
    )
    return output


async def analyze_with_ai(
    user_input: str,
    api_key: Optional[str] = None
) -> Union[StructuredScore, RawText]:
    """
    Analisa um texto de marketing ou código.
    """
    api_key = api_key if api_key is not None else settings.openai_api_key
    if not api_key.strip():
        return analyze_text(user_input)

    output = await _complete([{"role": "user", "content": user_input}], api_key)
    return parse_ai_response(output)


async def chat_with_ai(
    messages: List[dict],
    api_key: Optional[str] = None
) -> str:
    """
    Responde à última mensagem de uma conversa.

    `messages` vem em ordem cronológica e termina com a mensagem do usuário.
    """
    api_key = api_key if api_key is not None else settings.openai_api_key
    if not api_key.strip():
        return simulate_chat_response(messages[-1]["content"])

    return await _complete(messages, api_key)
