# FILE: agents/response_agent.py
import json
import logging
from typing import Optional

from agents.completion import CompletionService
from core.intent import IntentAnalysis
from models.report import Report
from services.utils import deep_serialize

logger = logging.getLogger("response_agent")
logger.setLevel(logging.INFO)
if not logger.handlers:
    fh = logging.FileHandler("response_agent.log")
    fh.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)

ASSISTANT_PROMPT = (
    "Você é o MeuBolso.AI, um assistente financeiro inteligente e amigável especializado em "
    "português brasileiro. Gere respostas naturais, contextualizadas e úteis para o usuário."
)
ANALYST_PROMPT = (
    "Você é um especialista em análise financeira pessoal. Analise dados reais de despesas e "
    "forneça insights valiosos, recomendações práticas e seja encorajador. "
    "Use português brasileiro natural."
)
CONVERSATION_PROMPT = (
    "Você é o MeuBolso.AI, um assistente financeiro conversacional, amigável e útil. "
    "Mantenha conversas naturais e informativas em português brasileiro, sempre com foco "
    "em finanças pessoais."
)

QUESTION_FALLBACK = "Vou ajudar você com isso!"
ANALYSIS_FALLBACK = "Vou analisar seus dados financeiros para você! 📊"
CONVERSATION_FALLBACK = "Olá! Como posso ajudar você com suas finanças hoje? 😊"


def _context(analysis: IntentAnalysis) -> str:
    params = analysis.parameters.model_dump(by_alias=True, exclude_none=True)
    return (
        f"- Tipo: {analysis.type.value}\n"
        f"- Intenção: {analysis.intent}\n"
        f"- Parâmetros: {json.dumps(deep_serialize(params), ensure_ascii=False)}"
    )


def build_question_prompt(message: str, analysis: IntentAnalysis) -> str:
    return f"""
Responda de forma natural e útil à seguinte pergunta do usuário.

Pergunta: "{message}"

Contexto:
{_context(analysis)}

Responda de forma natural, breve e em português brasileiro. Os números serão enviados
logo em seguida, então apenas confirme o que vai verificar.

Exemplo para "quanto gastei hoje": "Vou verificar seus gastos de hoje para você! 📊"
Exemplo para "qual minha maior despesa": "Vou analisar suas despesas para encontrar a maior! 🔍"
""".strip()


def build_analysis_prompt(message: str, analysis: IntentAnalysis, report: Report) -> str:
    data = json.dumps(deep_serialize(report), ensure_ascii=False, indent=2)
    return f"""
Analise os dados financeiros fornecidos e responda à pergunta do usuário.

Pergunta do usuário: "{message}"

Dados agregados das despesas:
{data}

Contexto da análise:
{_context(analysis)}

Inclua: resumo dos gastos no período, principais categorias, padrões identificados,
recomendações específicas e dicas práticas de economia baseadas nos dados.
Seja específico e encorajador. Use emojis com moderação.
""".strip()


def build_conversation_prompt(message: str, analysis: IntentAnalysis) -> str:
    return f"""
Mensagem do usuário: "{message}"

Contexto:
{_context(analysis)}

Se o usuário cumprimentar, responda de forma calorosa.
Se perguntar sobre gastos, sugira relatórios ou análises.
Se for uma conversa geral, mantenha o foco em finanças pessoais.
""".strip()


class FinanceResponder:
    """
    Free-text replies for question, analysis and conversation intents.
    Every method returns a usable sentence; a failed call yields the fallback.
    """

    def __init__(self, completion: Optional[CompletionService]):
        self.completion = completion

    async def _ask(
        self,
        kind: str,
        instructions: str,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        fallback: str,
    ) -> str:
        if self.completion is None:
            return fallback
        try:
            text = await self.completion.complete(
                instructions, prompt, max_tokens=max_tokens, temperature=temperature,
            )
        except Exception as e:
            logger.warning("[RESPONSE] %s completion failed: %s", kind, e)
            return fallback
        if not text or not text.strip():
            logger.info("[RESPONSE] %s empty completion", kind)
            return fallback
        return text.strip()

    async def acknowledge_question(self, message: str, analysis: IntentAnalysis) -> str:
        return await self._ask(
            "question",
            ASSISTANT_PROMPT,
            build_question_prompt(message, analysis),
            max_tokens=150,
            temperature=0.7,
            fallback=QUESTION_FALLBACK,
        )

    async def analyze(
        self,
        message: str,
        analysis: IntentAnalysis,
        report: Report,
        fallback: Optional[str] = None,
    ) -> str:
        return await self._ask(
            "analysis",
            ANALYST_PROMPT,
            build_analysis_prompt(message, analysis, report),
            max_tokens=500,
            temperature=0.7,
            fallback=fallback or ANALYSIS_FALLBACK,
        )

    async def converse(self, message: str, analysis: IntentAnalysis) -> str:
        return await self._ask(
            "conversation",
            CONVERSATION_PROMPT,
            build_conversation_prompt(message, analysis),
            max_tokens=200,
            temperature=0.8,
            fallback=CONVERSATION_FALLBACK,
        )
