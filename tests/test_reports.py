"""Chart rendering tests."""

from __future__ import annotations

from pathlib import Path

from matplotlib.figure import Figure

from tallybook.services import aggregation, reports, trends


def test_category_chart_exports_png(tmp_path, make_txn):
    txns = [make_txn(100, category=f"Cat {i}") for i in range(15)]
    fig = reports.build_category_chart(transactions=txns)
    assert isinstance(fig, Figure)

    path = reports.export_chart_png(fig, output_path=tmp_path / "charts" / "cats.png")
    assert path.exists()
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_monthly_and_balance_charts(tmp_path, make_txn):
    txns = [
        make_txn(1000, "income", "Salary", "2024-01-01"),
        make_txn(300, "expense", "Food", "2024-03-01"),
    ]
    monthly = reports.build_monthly_chart(buckets=aggregation.by_month(txns))
    balance = reports.build_balance_chart(points=trends.running_balance(txns))
    assert len(monthly.axes[0].patches) == 9  # 3 months x 3 series

    reports.export_chart_png(monthly, output_path=tmp_path / "monthly.png")
    reports.export_chart_png(balance, output_path=tmp_path / "balance.png")
    assert (tmp_path / "monthly.png").exists()
    assert (tmp_path / "balance.png").exists()


def test_empty_data_renders_placeholder():
    fig = reports.build_category_chart(transactions=[])
    assert "No expense data" in [t.get_text() for t in fig.axes[0].texts]


class RecordingRenderer:
    def __init__(self):
        self.calls: list[Path] = []

    def render(self, figure, *, output_path):
        self.calls.append(output_path)


def test_custom_renderer_is_used(tmp_path):
    renderer = RecordingRenderer()
    fig = reports.build_balance_chart(points=[])
    reports.export_chart_png(fig, output_path=tmp_path / "x.png", renderer=renderer)
    assert renderer.calls == [tmp_path / "x.png"]
    assert not (tmp_path / "x.png").exists()
