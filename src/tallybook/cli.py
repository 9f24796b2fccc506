"""Command line interface for Tallybook."""

from __future__ import annotations

import functools
from datetime import date
from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .constants import ALL, TRANSACTION_TYPES
from .context import AppContext, create_app_context
from .logging_config import setup_logging
from .models.category import Category
from .services import aggregation, trends
from .services.budgeting import compute_variances
from .services.categories import join_categories, recently_used
from .services.export_csv import default_export_name, export_transactions_csv
from .services.filters import BUILTIN_PRESETS, AmountRange, FilterSpec, TimePeriod, apply_filters, find_preset
from .services.formatting import currency_symbol, format_currency, format_percentage
from .services.import_csv import import_transactions_csv
from .services.reports import (
    build_balance_chart,
    build_category_chart,
    build_monthly_chart,
    export_chart_png,
)
from .services.templates import instantiate_template
from .services.validation import optional_float, transaction_from_mapping

_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _handle_errors(func):
    """Surface domain errors as clean CLI failures."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ValueError, LookupError) as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


def _filter_options(func):
    options = [
        click.option("--preset", "preset_id", default=None, help="Start from a saved or built-in preset."),
        click.option(
            "--period",
            type=click.Choice([p.value for p in TimePeriod]),
            default=None,
            help="Time period to show.",
        ),
        click.option("--from", "date_from", type=_DATE, default=None, help="Custom range start."),
        click.option("--to", "date_to", type=_DATE, default=None, help="Custom range end."),
        click.option("--type", "txn_type", type=click.Choice([ALL, *TRANSACTION_TYPES]), default=None),
        click.option("--category", default=None),
        click.option(
            "--amount-range",
            type=click.Choice([a.value for a in AmountRange]),
            default=None,
        ),
        click.option("--min", "amount_min", default=None, help="Custom minimum amount."),
        click.option("--max", "amount_max", default=None, help="Custom maximum amount."),
        click.option("--last", "use_last", is_flag=True, help="Reuse the last filter."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_spec(
    app: AppContext,
    *,
    preset_id,
    period,
    date_from,
    date_to,
    txn_type,
    category,
    amount_range,
    amount_min,
    amount_max,
    use_last,
) -> FilterSpec:
    if preset_id:
        spec = find_preset(preset_id, app.preferences.list_custom_presets()).apply()
    elif use_last:
        spec = app.preferences.load_last_filter()
    else:
        spec = FilterSpec()

    if period:
        spec = spec.with_time_period(period)
    if date_from or date_to:
        spec = spec.with_custom_date_range(
            date_from.date() if date_from else None, date_to.date() if date_to else None
        )
    if txn_type:
        spec = spec.with_type(txn_type)
    if category:
        spec = spec.with_category(category)
    if amount_range:
        spec = spec.with_amount_range(amount_range)
    if amount_min is not None or amount_max is not None:
        spec = spec.with_custom_amount_range(
            optional_float(amount_min, "min"), optional_float(amount_max, "max")
        )
    app.preferences.save_last_filter(spec)
    return spec


def _money(app: AppContext, value: float) -> str:
    return format_currency(value, app.config.CURRENCY, app.preferences.show_values)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track income, expenses and savings."""

    if isinstance(ctx.obj, AppContext):
        return
    config = ctx.obj if isinstance(ctx.obj, BaseConfig) else BaseConfig()
    setup_logging(config)
    ctx.obj = create_app_context(config)


@cli.command("init-db")
@click.option("--no-seed", is_flag=True, help="Create tables only.")
@click.pass_obj
def init_db(app: AppContext, no_seed: bool) -> None:
    """Create the schema and seed starter categories and templates."""

    created = 0 if no_seed else app.seed_defaults()
    click.echo(f"Database ready at {app.config.DATABASE_URL} ({created} defaults created)")


@cli.command("add")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), default=None)
@click.option("--category", default=None)
@click.option("--amount", default=None)
@click.option("--date", "on", type=_DATE, default=None, help="Defaults to today.")
@click.option("--notes", default="")
@click.option("--template", "template_name", default=None, help="Fill fields from a template.")
@click.pass_obj
@_handle_errors
def add(app: AppContext, txn_type, category, amount, on, notes, template_name) -> None:
    """Record a transaction."""

    when = on.date() if on else date.today()
    if template_name:
        if txn_type or category:
            raise click.UsageError("--type and --category come from the template; drop them or --template")
        template = app.template_repo.get_by_name(template_name, user_id=app.user_id)
        if template is None:
            raise LookupError(f"No template named {template_name!r}")
        txn = instantiate_template(
            template,
            on=when,
            amount=float(amount) if amount is not None else None,
            notes=notes or None,
        )
    else:
        txn = transaction_from_mapping(
            {"date": when, "type": txn_type, "category": category, "amount": amount, "notes": notes},
            user_id=app.user_id,
        )

    saved = app.transaction_repo.create(txn, user_id=app.user_id)
    match = app.category_repo.get_by_name(saved.category, saved.type, user_id=app.user_id)
    if match is not None:
        last_used = max(filter(None, (match.last_used, saved.date)))
        app.category_repo.record_usage(
            match.id, (match.usage_count or 0) + 1, last_used, user_id=app.user_id
        )
    click.echo(f"Added {saved.type} {_money(app, saved.amount)} in {saved.category} on {saved.date}")


@cli.command("list")
@_filter_options
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Show only the latest N.")
@click.pass_obj
@_handle_errors
def list_transactions(app: AppContext, limit, **filters) -> None:
    """Show transactions matching the filter."""

    spec = _build_spec(app, **filters)
    rows = apply_filters(app.transaction_repo.list_transactions(user_id=app.user_id), spec)
    if limit is not None:
        rows = rows[-limit:]
    if not rows:
        click.echo("No transactions match.")
        return
    for txn in rows:
        note = f"  {txn.notes}" if txn.notes else ""
        click.echo(f"{txn.date}  {txn.type:<8} {txn.category:<16} {_money(app, txn.amount):>12}{note}")
    if spec.active_filter_count:
        click.echo(f"({len(rows)} shown, {spec.active_filter_count} filters active)")


@cli.command("summary")
@_filter_options
@click.pass_obj
@_handle_errors
def summary(app: AppContext, **filters) -> None:
    """Totals, savings guidance and top categories."""

    view = app.dashboard(_build_spec(app, **filters))
    sums = view.summary.totals
    click.echo(f"Income:   {_money(app, sums.income)}")
    click.echo(f"Expenses: {_money(app, sums.expense)} ({format_percentage(view.summary.expenses_percentage)} of income)")
    click.echo(f"Savings:  {_money(app, sums.savings)} ({format_percentage(view.summary.savings_percentage)} of income)")
    click.echo(f"Balance:  {_money(app, view.summary.balance)}")
    click.echo(
        f"Recommended savings: {_money(app, view.summary.recommended_savings)}"
        f" ({view.summary.savings_progress}% reached)"
    )
    if view.expense_breakdown:
        click.echo("Top expense categories:")
        for share in view.expense_breakdown[:5]:
            click.echo(f"  {share.name:<16} {_money(app, share.amount):>12} {format_percentage(share.percentage)}")
    if view.rejected:
        click.echo(f"{view.rejected} invalid transactions were ignored.")


@cli.command("compare")
@click.option("--month", type=click.DateTime(formats=["%Y-%m"]), default=None, help="YYYY-MM; defaults to this month.")
@click.pass_obj
def compare(app: AppContext, month) -> None:
    """Compare a month with the one before it."""

    target = month.date() if month else date.today()
    comparison = trends.month_over_month(
        app.transaction_repo.list_transactions(user_id=app.user_id), target
    )
    arrows = {"up": "↑", "down": "↓", "flat": "→"}
    click.echo(f"{aggregation.month_label(target)} vs {aggregation.month_label(aggregation.previous_month(target))}")
    for item in comparison.as_list():
        click.echo(
            f"  {item.metric:<10} {_money(app, item.current):>12} {arrows[item.direction]}"
            f" {format_percentage(item.percentage_change)}"
        )


@cli.command("export")
@_filter_options
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_obj
@_handle_errors
def export(app: AppContext, output: Optional[Path], **filters) -> None:
    """Write matching transactions to CSV."""

    spec = _build_spec(app, **filters)
    rows = apply_filters(app.transaction_repo.list_transactions(user_id=app.user_id), spec)
    path = output or app.config.export_dir / default_export_name(date.today())
    export_transactions_csv(transactions=rows, output_path=path)
    click.echo(f"Exported {len(rows)} transactions to {path}")


@cli.command("import")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--dry-run", is_flag=True, help="Validate without saving.")
@click.pass_obj
@_handle_errors
def import_(app: AppContext, csv_path: Path, dry_run: bool) -> None:
    """Load transactions from a CSV file."""

    result = import_transactions_csv(csv_path=csv_path, user_id=app.user_id)
    if not dry_run and result.transactions:
        app.transaction_repo.bulk_create(result.transactions, user_id=app.user_id)
    verb = "Validated" if dry_run else "Imported"
    click.echo(f"{verb} {result.imported} transactions, skipped {result.skipped}")
    for error in result.errors:
        click.echo(f"  {error}", err=True)


@cli.command("chart")
@click.argument("kind", type=click.Choice(["category", "monthly", "balance"]))
@_filter_options
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--chart-type", "chart_txn_type", type=click.Choice(TRANSACTION_TYPES), default="expense")
@click.pass_obj
@_handle_errors
def chart(app: AppContext, kind: str, output: Optional[Path], chart_txn_type: str, **filters) -> None:
    """Render a PNG chart of the filtered transactions."""

    view = app.dashboard(_build_spec(app, **filters))
    symbol = currency_symbol(app.config.CURRENCY)
    if kind == "category":
        figure = build_category_chart(
            transactions=view.transactions, txn_type=chart_txn_type, currency_symbol=symbol
        )
    elif kind == "monthly":
        figure = build_monthly_chart(buckets=view.months, currency_symbol=symbol)
    else:
        figure = build_balance_chart(points=view.balance_points, currency_symbol=symbol)
    path = output or app.config.export_dir / f"{kind}-{date.today().isoformat()}.png"
    export_chart_png(figure, output_path=path)
    click.echo(f"Chart written to {path}")


@cli.group("categories", invoke_without_command=True)
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), default=None)
@click.pass_context
def categories(ctx: click.Context, txn_type: Optional[str]) -> None:
    """List categories with their usage; subcommands manage them."""

    if ctx.invoked_subcommand is not None:
        return
    app: AppContext = ctx.obj
    cats = (
        app.category_repo.list_by_type(txn_type, user_id=app.user_id)
        if txn_type
        else app.category_repo.list_categories(user_id=app.user_id)
    )
    join = join_categories(app.transaction_repo.list_transactions(user_id=app.user_id), cats)
    for usage in join.usage:
        budget = f" budget {_money(app, usage.budget)}" if usage.budget is not None else ""
        click.echo(
            f"{usage.type:<8} {usage.name:<16} {_money(app, usage.spending):>12}"
            f" x{usage.usage_count}{budget}"
        )
    for orphan in join.unlabeled:
        if txn_type and orphan.type != txn_type:
            continue
        click.echo(f"{orphan.type:<8} {orphan.name:<16} {_money(app, orphan.spending):>12} (unlabeled)")
    recent = recently_used(join.usage)
    if recent:
        click.echo("Recently used: " + ", ".join(u.name for u in recent))


def _category_or_fail(app: AppContext, name: str, txn_type: str) -> Category:
    category = app.category_repo.get_by_name(name, txn_type, user_id=app.user_id)
    if category is None:
        raise LookupError(f"No {txn_type} category named {name!r}")
    return category


@categories.command("add")
@click.argument("name")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), default="expense")
@click.option("--budget", type=float, default=None)
@click.option("--description", default=None)
@click.pass_obj
@_handle_errors
def categories_add(app: AppContext, name: str, txn_type: str, budget, description) -> None:
    if budget is not None and budget < 0:
        raise ValueError("Budget cannot be negative")
    category = app.category_repo.create(
        Category(name=name.strip(), type=txn_type, budget=budget, description=description),
        user_id=app.user_id,
    )
    click.echo(f"Created {category.type} category {category.name}")


@categories.command("rename")
@click.argument("name")
@click.argument("new_name")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), default="expense")
@click.pass_obj
@_handle_errors
def categories_rename(app: AppContext, name: str, new_name: str, txn_type: str) -> None:
    category = _category_or_fail(app, name, txn_type)
    app.category_repo.rename(category.id, new_name, user_id=app.user_id)
    click.echo(f"Renamed {name} to {new_name}")


@categories.command("merge")
@click.argument("source")
@click.argument("target")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), default="expense")
@click.pass_obj
@_handle_errors
def categories_merge(app: AppContext, source: str, target: str, txn_type: str) -> None:
    src = _category_or_fail(app, source, txn_type)
    dst = _category_or_fail(app, target, txn_type)
    moved = app.category_repo.merge(src.id, dst.id, user_id=app.user_id)
    click.echo(f"Merged {source} into {target} ({moved} transactions moved)")


@categories.command("reassign")
@click.argument("source")
@click.argument("target")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), default="expense")
@click.pass_obj
@_handle_errors
def categories_reassign(app: AppContext, source: str, target: str, txn_type: str) -> None:
    """Move transactions to another category without deleting SOURCE."""

    src = _category_or_fail(app, source, txn_type)
    dst = _category_or_fail(app, target, txn_type)
    moved = app.category_repo.reassign(src.id, dst.id, user_id=app.user_id)
    click.echo(f"Moved {moved} transactions from {source} to {target}")


@categories.command("budget")
@click.argument("name")
@click.argument("amount", required=False)
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), default="expense")
@click.pass_obj
@_handle_errors
def categories_budget(app: AppContext, name: str, amount: Optional[str], txn_type: str) -> None:
    """Set a budget, or clear it by omitting AMOUNT."""

    category = _category_or_fail(app, name, txn_type)
    updated = app.category_repo.set_budget(
        category.id, optional_float(amount, "budget"), user_id=app.user_id
    )
    shown = _money(app, updated.budget) if updated.budget is not None else "none"
    click.echo(f"Budget for {name}: {shown}")


@categories.command("delete")
@click.argument("name")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), default="expense")
@click.pass_obj
@_handle_errors
def categories_delete(app: AppContext, name: str, txn_type: str) -> None:
    category = _category_or_fail(app, name, txn_type)
    app.category_repo.delete(category.id, user_id=app.user_id)
    click.echo(f"Deleted {name}; its transactions keep the label")


@cli.command("budgets")
@click.option("--month", type=click.DateTime(formats=["%Y-%m"]), default=None, help="YYYY-MM; defaults to this month.")
@click.pass_obj
def budgets(app: AppContext, month) -> None:
    """Budget vs actual for the month."""

    target = month.date() if month else date.today()
    in_month = trends.transactions_in_month(
        app.transaction_repo.list_transactions(user_id=app.user_id), target
    )
    variances = compute_variances(
        categories=app.category_repo.list_categories(user_id=app.user_id), transactions=in_month
    )
    if not variances:
        click.echo("No budgets set.")
        return
    for item in variances:
        flag = " OVER" if item.over_budget else ""
        click.echo(
            f"{item.category:<16} {_money(app, item.actual):>12} / {_money(app, item.planned):>12}"
            f" {format_percentage(item.percent_used, 0)}{flag}"
        )


@cli.group("presets", invoke_without_command=True)
@click.pass_context
def presets(ctx: click.Context) -> None:
    """List filter presets."""

    if ctx.invoked_subcommand is not None:
        return
    app: AppContext = ctx.obj
    for preset in (*BUILTIN_PRESETS, *app.preferences.list_custom_presets()):
        click.echo(f"{preset.id:<24} {preset.name}: {preset.description}")


@presets.command("save")
@click.argument("name")
@_filter_options
@click.option("--description", default="")
@click.pass_obj
@_handle_errors
def presets_save(app: AppContext, name: str, description: str, **filters) -> None:
    """Save the given filter options as a named preset."""

    spec = _build_spec(app, **filters)
    preset = app.preferences.save_custom_preset(name, spec, description=description)
    click.echo(f"Saved preset {preset.id}")


@presets.command("delete")
@click.argument("preset_id")
@click.pass_obj
def presets_delete(app: AppContext, preset_id: str) -> None:
    if not app.preferences.delete_custom_preset(preset_id):
        raise click.ClickException(f"No saved preset {preset_id!r}")
    click.echo(f"Deleted preset {preset_id}")


@cli.command("toggle-values")
@click.pass_obj
def toggle_values(app: AppContext) -> None:
    """Show or hide money amounts in output."""

    visible = app.preferences.toggle_values()
    click.echo("Amounts are now " + ("visible" if visible else "hidden"))


if __name__ == "__main__":  # pragma: no cover
    cli()
