"""
Motor heurístico - Pontuação e otimização de textos sem LLM.

Regras determinísticas: detecção de características por regex,
pontuação com pesos fixos e reescrita do texto por modelos prontos.
Todas as listas de palavras e ordens de prioridade ficam nas tabelas
abaixo para que a classificação possa ser auditada e testada.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from nuvra.schemas.analysis import RawText, StructuredScore, Suggestion


CLOSING_CTA = "Quer que a Nuvra otimize isso para o seu negócio? Fale com nossos especialistas 🚀"

# ===========================================
# CÓDIGO
# ===========================================

CODE_MARKERS = ("function", "const", "import", "class", "return", "=>", "var ", "let ")

# (marcadores, linguagem) - vence o primeiro grupo presente
LANGUAGE_HINTS = [
    (("function", "=>"), "JavaScript"),
    (("const", "let"), "TypeScript/JavaScript"),
    (("class",), "POO"),
    (("import",), "ES6+"),
]

CODE_IMPROVEMENTS = [
    "Adicionar tipagem TypeScript para maior segurança de tipos",
    "Implementar tratamento de erros com try/catch",
    "Considerar otimização de performance e modularização",
    "Documentar funções com JSDoc para melhor manutenibilidade",
]

# ===========================================
# MARKETING
# ===========================================

MIN_WORDS = 3
LONG_TEXT_WORDS = 20
EXPAND_BELOW_WORDS = 15
SOCIAL_PROOF_BELOW_WORDS = 30
URGENCY_FROM_WORDS = 10
MAX_SCORE = 95
MAX_SUGGESTIONS = 3

BASE_SCORES = (40, 35, 30)  # score, engagement, conversion

FEATURE_PATTERNS = {
    "emotional": re.compile(
        r"transformar|exclusivo|revolucionar|inovador|único|garantido|comprovado", re.IGNORECASE
    ),
    "cta": re.compile(
        r"clique|acesse|compre|adquira|entre em contato|saiba mais|descubra|aproveite", re.IGNORECASE
    ),
    "social_proof": re.compile(
        r"cliente|depoimento|avaliação|resultado|testemunho|pessoas|empresas", re.IGNORECASE
    ),
    "urgency": re.compile(
        r"agora|hoje|limitado|últimas|vagas|promoção|oferta|desconto", re.IGNORECASE
    ),
    "numbers": re.compile(
        r"[0-9]+%|[0-9]+ pessoas|[0-9]+ empresas|[0-9]+ clientes", re.IGNORECASE
    ),
}

# Incrementos (score, engagement, conversion) por característica presente
FEATURE_WEIGHTS = [
    ("long_text", (15, 15, 10)),
    ("emotional", (15, 20, 15)),
    ("cta", (10, 10, 20)),
    ("social_proof", (10, 15, 15)),
    ("urgency", (5, 5, 10)),
    ("numbers", (5, 10, 10)),
]

# Sugestão emitida quando a característica falta, em ordem de prioridade
MISSING_FEATURE_SUGGESTIONS = [
    ("emotional", Suggestion(
        title="Adicionar Gatilhos Emocionais",
        description='Use palavras poderosas como "transformar", "exclusivo", "revolucionar" e "inovador" '
                    "para criar conexão emocional com o público.",
    )),
    ("social_proof", Suggestion(
        title="Incluir Prova Social",
        description="Mencione resultados comprovados, número de clientes satisfeitos, avaliações ou "
                    "depoimentos reais para aumentar a credibilidade.",
    )),
    ("cta", Suggestion(
        title="Fortalecer a Chamada para Ação",
        description='Adicione um CTA claro e direto como "Clique aqui", "Entre em contato agora" ou '
                    '"Aproveite hoje" para guiar o usuário.',
    )),
    ("urgency", Suggestion(
        title="Criar Senso de Urgência",
        description='Adicione elementos de escassez ou tempo limitado como "últimas vagas", '
                    '"oferta por tempo limitado" ou "apenas hoje".',
    )),
    ("numbers", Suggestion(
        title="Incluir Dados Concretos",
        description="Use números específicos e estatísticas para tornar sua mensagem mais confiável e "
                    'tangível. Ex: "Mais de 500 clientes", "Aumento de 87%".',
    )),
]

EXPAND_SUGGESTION = Suggestion(
    title="Expandir o Conteúdo",
    description="Textos mais elaborados têm melhor performance. Desenvolva mais sua mensagem "
                "explicando benefícios e diferenciais.",
)

EXCELLENT_SUGGESTION = Suggestion(
    title="Excelente Texto!",
    description="Seu texto já possui os principais elementos de persuasão. Continue mantendo essa qualidade!",
)

SHORT_TEXT_SCORES = (15, 20, 10)

SHORT_TEXT_SUGGESTIONS = [
    Suggestion(
        title="Conteúdo Insuficiente",
        description="Textos muito curtos não transmitem valor. Adicione mais contexto e informações relevantes.",
    ),
    Suggestion(
        title="Desenvolva a Mensagem",
        description="Crie uma narrativa completa que guie o leitor do problema à solução.",
    ),
    Suggestion(
        title="Adicione Chamada para Ação",
        description="Inclua um CTA claro que direcione o usuário para o próximo passo.",
    ),
]

SHORT_TEXT_APPENDIX = (
    " - Descubra como nossa solução inovadora pode transformar seu negócio. "
    "Entre em contato agora e receba uma consultoria gratuita!"
)

# ===========================================
# OTIMIZAÇÃO CONTEXTUAL
# ===========================================

GENERIC = "generic"

# Domínio do texto: vence o primeiro padrão que casar
DOMAIN_PATTERNS = [
    ("product", re.compile(r"produto|vend|compra|promo|oferta|preço", re.IGNORECASE)),
    ("service", re.compile(r"serviço|consultoria|atendimento|solução|ajud", re.IGNORECASE)),
    ("course", re.compile(r"curso|treinamento|aula|aprend|ensino", re.IGNORECASE)),
    ("event", re.compile(r"evento|workshop|palestra|encontro|webinar", re.IGNORECASE)),
]

# Primeiros 50 caracteres da primeira linha; \r, \u2028 e \u2029 também quebram linha
OPENING_PREFIX = re.compile(r"^([^\n\r\u2028\u2029]{1,50})")

# Domínios sem abertura própria recebem "Descubra como " no texto inteiro
EMOTIONAL_OPENERS = {
    "product": "Transforme sua experiência: ",
    "service": "Revolucione seus resultados com ",
    "course": "Domine novas habilidades: ",
}
FALLBACK_OPENER = "Descubra como "

SOCIAL_PROOF_CLAUSES = {
    "product": " — já conquistou a confiança de milhares de clientes satisfeitos",
    "service": " — mais de 500 empresas já transformaram seus resultados conosco",
    "course": " — aprovado por mais de 1.000 alunos com resultados comprovados",
    GENERIC: " — solução validada por centenas de profissionais da área",
}

CTA_SENTENCES = {
    "product": ". Garanta o seu agora e aproveite condições especiais!",
    "service": ". Entre em contato e receba uma análise gratuita!",
    "course": ". Inscreva-se hoje e comece sua jornada de transformação!",
    "event": ". Reserve sua vaga agora!",
    GENERIC: ". Saiba mais e descubra como podemos te ajudar!",
}

URGENCY_SENTENCES = {
    "product": " Últimas unidades disponíveis.",
    "service": " Vagas limitadas para este mês.",
    "course": " Últimas vagas disponíveis!",
    "event": " Últimas vagas disponíveis!",
    GENERIC: " Oferta válida por tempo limitado.",
}


@dataclass(frozen=True)
class TextFeatures:
    has_emotional_triggers: bool
    has_cta: bool
    has_social_proof: bool
    has_urgency: bool
    has_numbers: bool
    word_count: int

    def present(self, name: str) -> bool:
        if name == "long_text":
            return self.word_count >= LONG_TEXT_WORDS
        return {
            "emotional": self.has_emotional_triggers,
            "cta": self.has_cta,
            "social_proof": self.has_social_proof,
            "urgency": self.has_urgency,
            "numbers": self.has_numbers,
        }[name]


def count_words(text: str) -> int:
    """Quantidade de pedaços ao dividir por espaços ("" conta como 1)."""
    return len(re.split(r"\s+", text))


def is_code(text: str) -> bool:
    return any(marker in text for marker in CODE_MARKERS)


def detect_language(text: str) -> str:
    for markers, language in LANGUAGE_HINTS:
        if any(marker in text for marker in markers):
            return language
    return "Linguagem desconhecida"


def build_code_report(text: str) -> str:
    bullets = "\n".join(f"- {item}" for item in CODE_IMPROVEMENTS)
    return (
        "Análise de Código Detectada\n"
        "\n"
        f"Linguagem identificada: {detect_language(text)}\n"
        f"Linhas de código: {len(text.split(chr(10)))}\n"
        "\n"
        "Sugestões de Melhoria:\n"
        f"{bullets}\n"
        "\n"
        f"{CLOSING_CTA}"
    )


def extract_features(text: str) -> TextFeatures:
    return TextFeatures(
        has_emotional_triggers=bool(FEATURE_PATTERNS["emotional"].search(text)),
        has_cta=bool(FEATURE_PATTERNS["cta"].search(text)),
        has_social_proof=bool(FEATURE_PATTERNS["social_proof"].search(text)),
        has_urgency=bool(FEATURE_PATTERNS["urgency"].search(text)),
        has_numbers=bool(FEATURE_PATTERNS["numbers"].search(text)),
        word_count=count_words(text),
    )


def compute_scores(features: TextFeatures) -> Tuple[int, int, int]:
    score, engagement, conversion = BASE_SCORES
    for name, (d_score, d_engagement, d_conversion) in FEATURE_WEIGHTS:
        if features.present(name):
            score += d_score
            engagement += d_engagement
            conversion += d_conversion
    return min(MAX_SCORE, score), min(MAX_SCORE, engagement), min(MAX_SCORE, conversion)


def build_suggestions(features: TextFeatures) -> List[Suggestion]:
    suggestions = [
        suggestion
        for name, suggestion in MISSING_FEATURE_SUGGESTIONS
        if not features.present(name)
    ]
    if features.word_count < EXPAND_BELOW_WORDS:
        suggestions.append(EXPAND_SUGGESTION)

    suggestions = suggestions[:MAX_SUGGESTIONS]
    return suggestions or [EXCELLENT_SUGGESTION]


def classify_domain(text: str) -> str:
    for domain, pattern in DOMAIN_PATTERNS:
        if pattern.search(text):
            return domain
    return GENERIC


def generate_contextual_optimization(text: str, features: TextFeatures) -> str:
    """
    Reescreve o texto conforme o domínio e as características ausentes.

    As regras são aplicadas nesta ordem e se acumulam: abertura
    emocional, prova social, chamada para ação e urgência.
    """
    domain = classify_domain(text)
    optimized = text.strip()

    if not features.has_emotional_triggers:
        opener = EMOTIONAL_OPENERS.get(domain)
        if opener:
            optimized = OPENING_PREFIX.sub(lambda m: opener + m.group(1).lower(), optimized, count=1)
        else:
            optimized = FALLBACK_OPENER + optimized.lower()

    if not features.has_social_proof and features.word_count < SOCIAL_PROOF_BELOW_WORDS:
        optimized += SOCIAL_PROOF_CLAUSES.get(domain, SOCIAL_PROOF_CLAUSES[GENERIC])

    if not features.has_cta:
        optimized += CTA_SENTENCES.get(domain, CTA_SENTENCES[GENERIC])

    if not features.has_urgency and features.word_count >= URGENCY_FROM_WORDS:
        optimized += URGENCY_SENTENCES.get(domain, URGENCY_SENTENCES[GENERIC])

    return optimized


def analyze_text(text: str):
    """
    Analisa um texto sem LLM.

    Retorna `RawText` com um relatório quando o texto parece código e
    `StructuredScore` para textos de marketing. Função pura.
    """
    if is_code(text):
        return RawText(content=build_code_report(text))

    features = extract_features(text)

    if features.word_count < MIN_WORDS:
        score, engagement, conversion = SHORT_TEXT_SCORES
        return StructuredScore(
            score=score,
            engagement=engagement,
            conversion=conversion,
            suggestions=list(SHORT_TEXT_SUGGESTIONS),
            optimized_text=f"{text}{SHORT_TEXT_APPENDIX}",
        )

    score, engagement, conversion = compute_scores(features)
    return StructuredScore(
        score=score,
        engagement=engagement,
        conversion=conversion,
        suggestions=build_suggestions(features),
        optimized_text=generate_contextual_optimization(text, features),
    )


# ===========================================
# CHAT
# ===========================================

CHAT_GREETING = "Olá! Sou a IA da Nuvra. Como posso ajudar você hoje?"

CHAT_LIMIT_MESSAGE = (
    "Você atingiu o limite de uso gratuito. Para continuar usando o chat, "
    "entre em contato com a Nuvra para conhecer nossos planos!"
)


def _marketing_reply(message: str, lower: str) -> str:
    intro = "Vejo que você tem uma dúvida específica." if len(message) > 50 else "Vou te ajudar com isso!"
    return (
        "Sobre marketing e vendas, aqui estão minhas recomendações baseadas na sua mensagem:\n"
        "\n"
        f"{intro}\n"
        "\n"
        "Para estratégias de marketing digital eficazes, é fundamental:\n"
        "- Conhecer profundamente seu público-alvo\n"
        "- Criar conteúdo relevante e envolvente\n"
        "- Usar dados para otimizar campanhas\n"
        "- Testar diferentes abordagens (A/B testing)\n"
        "\n"
        f"{CLOSING_CTA}"
    )


def _coding_reply(message: str, lower: str) -> str:
    intro = "Entendo sua questão técnica." if len(message) > 50 else "Vou te orientar!"
    return (
        "Sobre programação e desenvolvimento:\n"
        "\n"
        f"{intro}\n"
        "\n"
        "Para um código limpo e eficiente, recomendo:\n"
        "- Seguir princípios SOLID\n"
        "- Escrever testes unitários\n"
        "- Documentar funções complexas\n"
        "- Manter funções pequenas e focadas\n"
        "\n"
        "Precisa de ajuda com desenvolvimento? A Nuvra pode criar a solução ideal! 🚀"
    )


def _conversion_reply(message: str, lower: str) -> str:
    topic = "engajamento" if "engajamento" in lower else "conversão"
    remark = "Sua questão é bem específica!" if len(message) > 30 else ""
    return (
        f"Para melhorar {topic}:\n"
        "\n"
        f"Analise os elementos que você mencionou. {remark}\n"
        "\n"
        "Estratégias comprovadas:\n"
        "- Use storytelling para conectar emocionalmente\n"
        "- Adicione CTAs claros e diretos\n"
        "- Implemente prova social (depoimentos, números)\n"
        "- Crie senso de urgência quando apropriado\n"
        "\n"
        "Quer implementar isso profissionalmente? Fale com a Nuvra! 🚀"
    )


def _help_reply(message: str, lower: str) -> str:
    remark = "Vou responder sua pergunta." if "?" in message else ""
    return (
        f"Entendo que você precisa de orientação! {remark}\n"
        "\n"
        "Baseado no que você mencionou, posso ajudar com:\n"
        "- Análise e otimização de textos de marketing\n"
        "- Revisão e melhoria de código\n"
        "- Estratégias de conversão e engajamento\n"
        "- Consultoria técnica e estratégica\n"
        "\n"
        "A Nuvra tem expertise em todas essas áreas. Vamos conversar? 🚀"
    )


def _generic_reply(message: str, lower: str) -> str:
    remark = "Vejo que você compartilhou bastante contexto." if len(message) > 40 else ""
    return (
        f"Obrigado por sua mensagem! {remark}\n"
        "\n"
        "Posso ajudar você com:\n"
        "- Marketing digital e copywriting\n"
        "- Desenvolvimento de software\n"
        "- Estratégias de crescimento\n"
        "- Otimização de processos\n"
        "\n"
        "Cada projeto é único. Quer que a Nuvra desenvolva uma solução personalizada para você? 🚀"
    )


# Grupos de palavras-chave em ordem de despacho: vence o primeiro que casar
CHAT_TOPICS: List[Tuple[str, Tuple[str, ...], Callable[[str, str], str]]] = [
    ("marketing", ("marketing", "vendas"), _marketing_reply),
    ("coding", ("código", "programação", "função"), _coding_reply),
    ("conversion", ("engajamento", "conversão"), _conversion_reply),
    ("help", ("ajuda", "como", "?"), _help_reply),
]


def match_chat_topic(message: str) -> Optional[str]:
    lower = message.lower()
    for topic, keywords, _ in CHAT_TOPICS:
        if any(keyword in lower for keyword in keywords):
            return topic
    return None


def simulate_chat_response(message: str) -> str:
    """Resposta pronta para a mensagem, escolhida pelo tema."""
    lower = message.lower()
    for _, keywords, reply in CHAT_TOPICS:
        if any(keyword in lower for keyword in keywords):
            return reply(message, lower)
    return _generic_reply(message, lower)
