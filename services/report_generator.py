# FILE: services/report_generator.py
"""
Report generation over a list of expenses.

build_report() aggregates (total, per-category breakdown, top 3, insights).
render_report() / render_answer() turn the aggregates into the WhatsApp text.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence

from core.intent import IntentParameters
from models.expense import Expense
from models.report import CategoryBreakdownEntry, Report, TopExpense
from services.date_resolver import get_today
from services.utils import format_brl

TOP_N = 3
RECENT_WINDOW_DAYS = 7
ANSWER_DAY_DIVISOR = 30

EMPTY_REPORT_MESSAGE = "📊 Nenhuma despesa encontrada no período especificado."
EMPTY_ANSWER_MESSAGE = "📊 Nenhuma despesa registrada ainda."

CATEGORY_EMOJI = {
    "Alimentação": "🍽️",
    "Transporte": "🚗",
    "Moradia": "🏠",
    "Lazer": "🎉",
    "Saúde": "💊",
    "Outros": "📦",
}
DEFAULT_EMOJI = "🏷️"

PERIOD_LABELS = {
    "today": "de hoje",
    "week": "da semana",
    "month": "do mês",
    "year": "do ano",
}


def _pct(value: float) -> str:
    return f"{value:.1f}".replace(".", ",")


def category_emoji(name: str) -> str:
    return CATEGORY_EMOJI.get(name, DEFAULT_EMOJI)


# -----------------------------
# Aggregation
# -----------------------------
def summarize_by_category(expenses: Sequence[Expense], total: Decimal) -> List[CategoryBreakdownEntry]:
    sums: Dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for e in expenses:
        sums[e.category_name] += e.amount

    entries = [
        CategoryBreakdownEntry(
            category=name,
            amount=amount,
            percentage=float(amount / total * 100) if total > 0 else 0.0,
        )
        for name, amount in sums.items()
    ]
    entries.sort(key=lambda c: c.amount, reverse=True)
    return entries


def top_expenses(expenses: Sequence[Expense], n: int = TOP_N) -> List[TopExpense]:
    ranked = sorted(expenses, key=lambda e: e.amount, reverse=True)[:n]
    return [TopExpense(description=e.description, amount=e.amount, date=e.date) for e in ranked]


def generate_insights(
    expenses: Sequence[Expense],
    by_category: Sequence[CategoryBreakdownEntry],
    total: Decimal,
    today: date,
    user_name: Optional[str] = None,
) -> List[str]:
    """
    Threshold rules, each evaluated independently.
    """
    insights: List[str] = []
    if not expenses:
        return insights

    if by_category:
        top = by_category[0]
        if top.percentage > 50:
            who = f"{user_name}, " if user_name else ""
            insights.append(
                f"⚠️ {who}{top.category} representa {_pct(top.percentage)}% dos seus gastos. "
                "Vale a pena ficar de olho nessa categoria."
            )
        elif top.percentage > 30:
            insights.append(
                f"📌 Sua principal categoria é {top.category}, com {_pct(top.percentage)}% dos gastos."
            )

    recent = [e for e in expenses if 0 <= (today - e.date).days <= RECENT_WINDOW_DAYS]
    if len(recent) > 5:
        insights.append(f"🔄 Você fez {len(recent)} despesas nos últimos 7 dias.")

    average = total / len(expenses)
    if average > 200:
        insights.append(f"💸 Suas despesas estão altas em média ({format_brl(average)} por despesa).")
    elif average < 50:
        insights.append("✅ Suas despesas têm valores baixos em média. Bom controle!")

    shares = {c.category: c.percentage for c in by_category}
    if shares.get("Alimentação", 0) > 40:
        insights.append("🍳 Alimentação pesa bastante: cozinhar em casa pode ajudar a economizar.")
    if shares.get("Transporte", 0) > 30:
        insights.append("🚌 Transporte pesa bastante: considere usar transporte público.")

    return insights


class ReportGenerator:
    def __init__(self, today: Optional[Callable[[], date]] = None):
        self.today = today or get_today

    def build_report(self, expenses: Sequence[Expense], user_name: Optional[str] = None) -> Report:
        if not expenses:
            return Report()

        total = sum((e.amount for e in expenses), Decimal("0"))
        by_category = summarize_by_category(expenses, total)
        return Report(
            total=total,
            by_category=by_category,
            top_expenses=top_expenses(expenses),
            insights=generate_insights(expenses, by_category, total, self.today(), user_name),
        )

    # -----------------------------
    # Rendering
    # -----------------------------
    def render_report(
        self,
        expenses: Sequence[Expense],
        params: Optional[IntentParameters] = None,
        user_name: Optional[str] = None,
        report: Optional[Report] = None,
    ) -> str:
        report = report or self.build_report(expenses, user_name)
        if report.is_empty:
            if user_name:
                return f"📊 {user_name}, nenhuma despesa encontrada no período especificado."
            return EMPTY_REPORT_MESSAGE

        period = PERIOD_LABELS.get(params.period) if params and params.period else None
        header = "📊 Relatório Financeiro" + (f" {period}" if period else "")
        if user_name:
            header += f" de {user_name}"

        lines = [header, "", f"💰 Total gasto: {format_brl(report.total)}", "", "📂 Por categoria:"]
        for c in report.by_category:
            lines.append(
                f"{category_emoji(c.category)} {c.category}: {format_brl(c.amount)} ({_pct(c.percentage)}%)"
            )

        if report.top_expenses:
            lines += ["", f"🔝 Top {TOP_N} maiores despesas:"]
            for i, t in enumerate(report.top_expenses, start=1):
                lines.append(f"{i}. {t.description} - {format_brl(t.amount)}")

        if report.insights:
            lines += ["", "💡 Insights:"]
            lines += report.insights

        return "\n".join(lines)

    def render_answer(self, expenses: Sequence[Expense]) -> str:
        """Non-personalized summary used to answer free questions."""
        report = self.build_report(expenses)
        if report.is_empty:
            return EMPTY_ANSWER_MESSAGE

        largest = max(expenses, key=lambda e: e.amount)
        daily = report.total / ANSWER_DAY_DIVISOR
        top = report.by_category[0]

        lines = [
            "📊 Resumo dos seus gastos:",
            "",
            f"💰 Total: {format_brl(report.total)}",
            f"📈 Média diária: {format_brl(daily)}",
            f"🔝 Maior despesa: {largest.description} - {format_brl(largest.amount)}",
            f"📂 Categoria principal: {top.category} ({format_brl(top.amount)})",
        ]
        if report.insights:
            lines += ["", "💡 Insights:"]
            lines += report.insights
        return "\n".join(lines)
