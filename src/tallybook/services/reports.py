"""Reporting utilities for Tallybook.

Figures are built from the aggregation helpers so the charts always agree with
the numbers shown in summaries.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Protocol, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
from matplotlib.figure import Figure

from ..constants import TransactionType
from .aggregation import MonthBucket, category_breakdown
from .trends import BalancePoint

_COLORS = {
    TransactionType.INCOME.value: "#10B981",
    TransactionType.EXPENSE.value: "#EF4444",
    TransactionType.SAVINGS.value: "#3B82F6",
}


class ReportRenderer(Protocol):
    """Protocol describing renderer behavior."""

    def render(self, figure: Figure, *, output_path: Path) -> None:  # pragma: no cover - interface
        ...


def _placeholder(message: str, figsize=(8, 5)) -> Figure:
    fig, ax = plt.subplots(figsize=figsize)
    ax.text(0.5, 0.5, message, ha="center", va="center", fontsize=14, color="#666")
    ax.axis("off")
    return fig


def build_category_chart(
    *,
    transactions: Iterable[Any],
    txn_type: str = TransactionType.EXPENSE.value,
    currency_symbol: str = "₹",
    max_legend_items: int = 12,
) -> Figure:
    """Donut chart of one transaction type split by category label."""

    shares = category_breakdown(transactions, txn_type)
    if not shares:
        return _placeholder(f"No {txn_type} data", figsize=(10, 7))

    sizes = [share.amount for share in shares]
    grand_total = sum(sizes)

    fig, ax = plt.subplots(figsize=(10, 7))
    cmap = plt.get_cmap("tab20c")
    colors = [cmap(i / max(len(sizes), 1)) for i in range(len(sizes))]
    wedges, _, autotexts = ax.pie(
        sizes,
        labels=None,
        autopct=lambda pct: f"{pct:.1f}%" if pct > 4 else "",
        wedgeprops=dict(width=0.45, edgecolor="white", linewidth=1.5),
        startangle=90,
        colors=colors,
        pctdistance=0.78,
    )
    for autotext in autotexts:
        autotext.set_fontsize(9)
        autotext.set_fontweight("bold")
        autotext.set_color("white")

    ax.text(0, 0.08, f"Total {txn_type.title()}", ha="center", va="center", fontsize=11, color="#666")
    ax.text(
        0, -0.08, f"{currency_symbol}{grand_total:,.0f}",
        ha="center", va="center", fontsize=18, fontweight="bold", color="#1F2937",
    )

    shown = shares[:max_legend_items]
    legend_labels = [
        f"{share.name}: {currency_symbol}{share.amount:,.0f} ({share.percentage:.1f}%)"
        for share in shown
    ]
    handles = list(wedges[: len(shown)])
    if len(shares) > max_legend_items:
        rest = shares[max_legend_items:]
        legend_labels.append(
            f"Other ({len(rest)} more): {currency_symbol}{sum(s.amount for s in rest):,.0f}"
            f" ({sum(s.percentage for s in rest):.1f}%)"
        )
        handles.append(wedges[-1])

    ax.legend(
        handles,
        legend_labels,
        title="Categories",
        title_fontsize=11,
        loc="center left",
        bbox_to_anchor=(1.02, 0.5),
        fontsize=9,
        framealpha=0.9,
    )
    ax.axis("equal")
    ax.set_title(f"{txn_type.title()} by Category", fontsize=16, fontweight="bold", pad=20)
    plt.tight_layout()
    return fig


def build_monthly_chart(*, buckets: Sequence[MonthBucket], currency_symbol: str = "₹") -> Figure:
    """Grouped income/expense/savings bars per month with the monthly balance as a line."""

    if not buckets:
        return _placeholder("No transaction data yet\nAdd transactions to see monthly totals")

    labels = [bucket.label for bucket in buckets]
    positions = list(range(len(buckets)))
    width = 0.27

    fig, ax = plt.subplots(figsize=(max(8, len(buckets) * 0.9), 5))
    series = (
        (TransactionType.INCOME.value, -width),
        (TransactionType.EXPENSE.value, 0.0),
        (TransactionType.SAVINGS.value, width),
    )
    for txn_type, offset in series:
        values = [getattr(bucket, txn_type) for bucket in buckets]
        ax.bar(
            [p + offset for p in positions],
            values,
            width=width,
            label=txn_type.title(),
            color=_COLORS[txn_type],
            alpha=0.85,
        )

    ax.plot(
        positions,
        [bucket.balance for bucket in buckets],
        marker="o",
        linewidth=2,
        color="#1F2937",
        label="Balance",
    )
    ax.axhline(0, color="#9CA3AF", linewidth=0.8)
    ax.set_xticks(positions)
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda v, _: f"{currency_symbol}{v:,.0f}"))
    ax.set_title("Monthly Overview", fontsize=14, fontweight="bold")
    ax.legend(loc="upper left", fontsize=9)
    ax.grid(axis="y", alpha=0.3)
    plt.tight_layout()
    return fig


def build_balance_chart(*, points: Sequence[BalancePoint], currency_symbol: str = "₹") -> Figure:
    """Running balance over time."""

    if not points:
        return _placeholder("No transaction data yet")

    fig, ax = plt.subplots(figsize=(8, 5))
    dates = [point.date for point in points]
    balances = [point.balance for point in points]
    ax.plot(dates, balances, marker="o", markersize=3, linewidth=2, color="#3B82F6")
    ax.fill_between(dates, balances, 0, alpha=0.12, color="#3B82F6")
    ax.axhline(0, color="#9CA3AF", linewidth=0.8)
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda v, _: f"{currency_symbol}{v:,.0f}"))
    ax.set_title("Running Balance", fontsize=14, fontweight="bold")
    ax.grid(alpha=0.3)
    fig.autofmt_xdate()
    plt.tight_layout()
    return fig


def export_chart_png(
    figure: Figure,
    *,
    output_path: Path,
    renderer: ReportRenderer | None = None,
) -> Path:
    """Render a figure to PNG, close it and return the path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        if renderer is not None:
            renderer.render(figure, output_path=output_path)
        else:
            figure.savefig(output_path, bbox_inches="tight", dpi=120)
    finally:
        plt.close(figure)
    return output_path
