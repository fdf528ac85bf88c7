from datetime import date, timedelta
from decimal import Decimal

import pytest

from core.intent import IntentParameters
from models.expense import Expense
from services.report_generator import (
    EMPTY_ANSWER_MESSAGE,
    EMPTY_REPORT_MESSAGE,
    ReportGenerator,
    category_emoji,
)

TODAY = date(2025, 3, 15)
reports = ReportGenerator(today=lambda: TODAY)


def _expense(amount, category, days_ago=20, description=None):
    return Expense(
        id=f"e-{amount}-{category}-{days_ago}",
        user_id="u1",
        description=description or f"{category.lower()} {amount}",
        category_id=f"c-{category}",
        category_name=category,
        amount=Decimal(str(amount)),
        date=TODAY - timedelta(days=days_ago),
    )


MIXED = [
    _expense("120.00", "Alimentação"),
    _expense("35.50", "Transporte"),
    _expense("80", "Alimentação"),
    _expense("1500", "Moradia"),
    _expense("64.90", "Lazer"),
]


def test_empty_list_returns_fixed_message():
    assert reports.build_report([]).is_empty
    assert reports.render_report([]) == EMPTY_REPORT_MESSAGE
    assert reports.render_answer([]) == EMPTY_ANSWER_MESSAGE


def test_empty_message_personalized():
    assert "Ana" in reports.render_report([], user_name="Ana")


def test_breakdown_sums_to_total():
    report = reports.build_report(MIXED)
    assert report.total == Decimal("1800.40")
    assert sum(c.amount for c in report.by_category) == report.total
    assert sum(c.percentage for c in report.by_category) == pytest.approx(100.0)


def test_breakdown_sorted_descending():
    report = reports.build_report(MIXED)
    amounts = [c.amount for c in report.by_category]
    assert amounts == sorted(amounts, reverse=True)
    assert report.by_category[0].category == "Moradia"


@pytest.mark.parametrize("count", [1, 2, 3, 5])
def test_top_expenses_length_and_order(count):
    report = reports.build_report(MIXED[:count])
    assert len(report.top_expenses) == min(3, count)
    amounts = [t.amount for t in report.top_expenses]
    assert amounts == sorted(amounts, reverse=True)


def test_dominant_category_warning_uses_name():
    report = reports.build_report(MIXED, user_name="Ana")
    assert any("Ana" in i and "Moradia" in i for i in report.insights)


def test_main_category_note_between_30_and_50():
    expenses = [_expense(40, "Lazer"), _expense(30, "Moradia"), _expense(30, "Outros")]
    insights = reports.build_report(expenses).insights
    assert any("principal categoria é Lazer" in i for i in insights)


def test_many_transactions_this_week():
    expenses = [_expense(60, "Outros", days_ago=d) for d in range(6)]
    insights = reports.build_report(expenses).insights
    assert any("6 despesas" in i for i in insights)


def test_old_expenses_do_not_count_as_this_week():
    expenses = [_expense(60, "Outros", days_ago=30 + d) for d in range(6)]
    insights = reports.build_report(expenses).insights
    assert not any("últimos 7 dias" in i for i in insights)


def test_high_and_low_average():
    high = reports.build_report([_expense(500, "Moradia")]).insights
    low = reports.build_report([_expense(10, "Outros"), _expense(20, "Lazer")]).insights
    assert any("altas em média" in i for i in high)
    assert any("Bom controle" in i for i in low)


def test_food_and_transport_suggestions():
    expenses = [_expense(50, "Alimentação"), _expense(45, "Transporte"), _expense(5, "Outros")]
    insights = reports.build_report(expenses).insights
    assert any("cozinhar em casa" in i for i in insights)
    assert any("transporte público" in i for i in insights)


def test_render_report_sections_in_order():
    text = reports.render_report(MIXED, IntentParameters(period="month"), "Ana")
    header = text.index("📊 Relatório Financeiro do mês de Ana")
    total = text.index("💰 Total gasto: R$ 1.800,40")
    categories = text.index("📂 Por categoria:")
    top = text.index("🔝 Top 3 maiores despesas:")
    insights = text.index("💡 Insights:")
    assert header < total < categories < top < insights
    assert "🏠 Moradia: R$ 1.500,00" in text


def test_unknown_category_gets_default_emoji():
    assert category_emoji("Pets") == "🏷️"
    assert category_emoji("Saúde") == "💊"


def test_render_answer_uses_fixed_30_day_divisor():
    text = reports.render_answer([_expense(300, "Moradia", description="conta de luz")])
    assert "💰 Total: R$ 300,00" in text
    assert "📈 Média diária: R$ 10,00" in text
    assert "🔝 Maior despesa: conta de luz - R$ 300,00" in text
    assert "📂 Categoria principal: Moradia (R$ 300,00)" in text
