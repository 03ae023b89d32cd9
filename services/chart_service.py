"""Report charts as matplotlib Figures. No GUI backend is touched;
callers embed the figure or call savefig themselves."""
from matplotlib.figure import Figure

from utils.constants import EXPENSE_COLOR, INCOME_COLOR


def _no_data(ax, text: str):
    ax.text(0.5, 0.5, text, ha="center", va="center",
            transform=ax.transAxes, color="gray")
    ax.set_xticks([])
    ax.set_yticks([])


def _short_amount(v, _pos=None) -> str:
    return f"{v/1000:.0f}k" if abs(v) >= 1000 else f"{v:.0f}"


def monthly_bar_chart(data: list[dict], title: str = "Monthly Income vs Expenses") -> Figure:
    """Grouped income/expense bars from ReportService.get_monthly_chart_data()."""
    fig = Figure(figsize=(5, 3), dpi=80, tight_layout=True)
    ax = fig.add_subplot(111)
    ax.set_title(title, fontsize=10)

    if not data or not any(d["income"] or d["expense"] for d in data):
        _no_data(ax, "No data")
        return fig

    labels = [d["label"] for d in data]
    incomes = [float(d["income"]) for d in data]
    expenses = [float(d["expense"]) for d in data]
    x = list(range(len(labels)))
    w = 0.35
    ax.bar([i - w / 2 for i in x], incomes, w, color=INCOME_COLOR, label="Income")
    ax.bar([i + w / 2 for i in x], expenses, w, color=EXPENSE_COLOR, label="Expenses")
    ax.set_xticks(x)
    ax.set_xticklabels(labels)
    ax.yaxis.set_major_formatter(_short_amount)
    ax.legend(fontsize=8)
    return fig


def category_pie_chart(breakdown: list[dict], title: str = "Expense Breakdown") -> Figure:
    """Pie of ReportService.get_category_breakdown() rows."""
    fig = Figure(figsize=(3, 3), dpi=80, tight_layout=True)
    ax = fig.add_subplot(111)
    ax.set_title(title, fontsize=10)

    total = sum(float(d["total"]) for d in breakdown) if breakdown else 0
    if not breakdown or total == 0:
        _no_data(ax, "No expense data")
        return fig

    ax.pie(
        [float(d["total"]) for d in breakdown],
        labels=[d["name"] for d in breakdown],
        colors=[d["color_hex"] for d in breakdown],
        startangle=90,
    )
    ax.set_aspect("equal")
    return fig
