# FILE: agents/intent_agent.py
from typing import Iterable

from core.intent import ALL_INTENT_TYPES, IntentType

# -----------------------------
# Intent Classification: System Prompt
# -----------------------------
SYSTEM_PROMPT = (
    "Você é um assistente especializado em análise de intenções de mensagens financeiras "
    "em português brasileiro. Identifique com precisão a intenção do usuário. "
    "Retorne apenas JSON válido."
)

INTENT_DESCRIPTIONS = {
    IntentType.EXPENSE: 'registrar despesa ("gastei 50 no mercado")',
    IntentType.REPORT: 'relatório/consulta ("quanto gastei hoje", "relatório mês", "gastos de 15/01")',
    IntentType.QUESTION: 'pergunta específica ("qual minha maior despesa")',
    IntentType.ANALYSIS: 'análise financeira ("analise meus gastos", "como está minha saúde financeira")',
    IntentType.CONVERSATION: 'conversa geral ("oi", "como você está", "me conte sobre meus gastos")',
    IntentType.HELP: 'pedido de ajuda ("ajuda", "help")',
    IntentType.UNKNOWN: "não conseguiu identificar",
}

MAX_TOKENS = 300
TEMPERATURE = 0.1


def build_intent_prompt(message: str, enabled_types: Iterable[IntentType] = ALL_INTENT_TYPES) -> str:
    enabled = [t for t in IntentType if t in set(enabled_types)]
    type_names = ", ".join(t.value for t in enabled)
    taxonomy = "\n".join(f"- {t.value}: {INTENT_DESCRIPTIONS[t]}" for t in enabled)

    return f"""
Analise a seguinte mensagem e determine a intenção do usuário.
Retorne APENAS um JSON válido com as seguintes chaves:

- type: string ({type_names})
- intent: string (descrição da intenção)
- parameters: objeto com:
  - period: string (today, week, month, year, custom)
  - startDate: string (formato YYYY-MM-DD se especificado)
  - endDate: string (formato YYYY-MM-DD se especificado)
  - specificDate: string (formato YYYY-MM-DD, data específica mencionada: "gastos de 15/01", "despesas de ontem")
  - category: string (se mencionada)
  - amount: number (se mencionado)
  - description: string (se mencionada)
  - analysisType: string (health, trends, categories, comparison)
- confidence: number (0-1, confiança na análise)

TIPOS DE INTENÇÃO:
{taxonomy}

Mensagem: "{message}"

Exemplo de resposta:
{{
  "type": "report",
  "intent": "consultar gastos do mês atual",
  "parameters": {{
    "period": "month"
  }},
  "confidence": 0.9
}}
"""
