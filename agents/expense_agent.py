from datetime import date
from typing import Sequence

# -----------------------------
# Expense Extraction Agent
# -----------------------------
SYSTEM_PROMPT = (
    "Você é um assistente especializado em extrair informações de despesas de mensagens "
    "em português brasileiro. Retorne apenas JSON válido."
)

MAX_TOKENS = 200
TEMPERATURE = 0.1


def build_expense_prompt(
    message: str,
    *,
    today: date,
    categories: Sequence[str],
    usd_rate: float,
) -> str:
    today_iso = today.isoformat()
    category_list = ", ".join(categories)

    return f"""
Analise a seguinte mensagem e extraia informações sobre uma despesa.
Retorne APENAS um JSON válido com as seguintes chaves:
- amount: número (valor da despesa em reais)
- category: string (categoria mais apropriada: {category_list})
- description: string (descrição da despesa formatada e corrigida)
- date: string (data no formato YYYY-MM-DD, SEMPRE use a data de hoje: {today_iso})
- isValid: boolean (true se conseguiu extrair informações válidas)

IMPORTANTE:
- A data deve SEMPRE ser {today_iso} (data de hoje). NUNCA use datas antigas.
- Se o valor estiver em dólares (USD, $, dollar), converta para reais (multiplicar por {usd_rate})
- Formate a descrição corretamente, corrigindo erros de digitação
- Use português brasileiro correto

Categorias disponíveis: {category_list}

Mensagem: "{message}"

Exemplo de resposta:
{{
  "amount": 50,
  "category": "Alimentação",
  "description": "mercado",
  "date": "{today_iso}",
  "isValid": true
}}
"""
