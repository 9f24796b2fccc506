"""Declarative transaction filters for ledger and dashboard views.

A :class:`FilterSpec` is an immutable value. The ``with_*`` helpers return a new
spec, mirroring how the UI changes one field at a time, and ``reset`` goes
back to "no filter". :func:`apply_filters` never mutates its input and returns
the very same transaction objects that matched, in their original order.
"""

from __future__ import annotations

import calendar
from dataclasses import asdict, dataclass, replace
from datetime import date, timedelta
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence, TypeVar

from ..constants import ALL, TRANSACTION_TYPES
from .aggregation import previous_month

T = TypeVar("T")


class TimePeriod(str, Enum):
    ALL = "all"
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_7_DAYS = "last7days"
    THIS_WEEK = "thisWeek"
    LAST_WEEK = "lastWeek"
    THIS_MONTH = "thisMonth"
    LAST_MONTH = "lastMonth"
    THIS_YEAR = "thisYear"
    CUSTOM = "custom"


class AmountRange(str, Enum):
    ALL = "all"
    UNDER_500 = "under500"
    FROM_500_TO_1000 = "500to1000"
    FROM_1000_TO_5000 = "1000to5000"
    OVER_5000 = "over5000"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """User-selected constraints narrowing which transactions are shown."""

    time_period: TimePeriod = TimePeriod.ALL
    custom_date_from: Optional[date] = None
    custom_date_to: Optional[date] = None
    type: str = ALL
    category: str = ALL
    amount_range: AmountRange = AmountRange.ALL
    custom_amount_min: Optional[float] = None
    custom_amount_max: Optional[float] = None

    def __post_init__(self) -> None:
        # Accept raw strings from forms / JSON and normalise to the enums.
        object.__setattr__(self, "time_period", TimePeriod(self.time_period))
        object.__setattr__(self, "amount_range", AmountRange(self.amount_range))
        object.__setattr__(self, "type", getattr(self.type, "value", self.type))
        if self.type != ALL and self.type not in TRANSACTION_TYPES:
            raise ValueError(f"Unknown transaction type filter: {self.type!r}")

    # -- field-by-field updates -------------------------------------------

    def with_time_period(self, period: TimePeriod | str) -> "FilterSpec":
        period = TimePeriod(period)
        if period is TimePeriod.CUSTOM:
            return replace(self, time_period=period)
        return replace(self, time_period=period, custom_date_from=None, custom_date_to=None)

    def with_custom_date_range(self, date_from: Optional[date], date_to: Optional[date]) -> "FilterSpec":
        return replace(
            self,
            time_period=TimePeriod.CUSTOM,
            custom_date_from=date_from,
            custom_date_to=date_to,
        )

    def with_type(self, txn_type: str) -> "FilterSpec":
        return replace(self, type=txn_type)

    def with_category(self, category: str) -> "FilterSpec":
        return replace(self, category=category)

    def with_amount_range(self, amount_range: AmountRange | str) -> "FilterSpec":
        amount_range = AmountRange(amount_range)
        if amount_range is AmountRange.CUSTOM:
            return replace(self, amount_range=amount_range)
        return replace(
            self, amount_range=amount_range, custom_amount_min=None, custom_amount_max=None
        )

    def with_custom_amount_range(
        self, minimum: Optional[float], maximum: Optional[float]
    ) -> "FilterSpec":
        return replace(
            self,
            amount_range=AmountRange.CUSTOM,
            custom_amount_min=minimum,
            custom_amount_max=maximum,
        )

    def reset(self) -> "FilterSpec":
        return FilterSpec()

    @property
    def active_filter_count(self) -> int:
        """Number of dimensions currently narrowing the result."""

        return sum(
            (
                self.time_period is not TimePeriod.ALL,
                self.type != ALL,
                self.category != ALL,
                self.amount_range is not AmountRange.ALL,
            )
        )

    @property
    def is_default(self) -> bool:
        return self == FilterSpec()

    # -- persistence helpers ------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["time_period"] = self.time_period.value
        data["amount_range"] = self.amount_range.value
        for key in ("custom_date_from", "custom_date_to"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterSpec":
        kwargs = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        for key in ("custom_date_from", "custom_date_to"):
            if isinstance(kwargs.get(key), str):
                kwargs[key] = date.fromisoformat(kwargs[key])
        return cls(**kwargs)


def _month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def resolve_period(
    period: TimePeriod | str,
    *,
    today: date,
    custom_from: Optional[date] = None,
    custom_to: Optional[date] = None,
) -> Optional[tuple[date, date]]:
    """Turn a named period into a closed ``(from, to)`` date interval.

    Returns ``None`` when the period imposes no constraint: ``all``, or
    ``custom`` with either bound missing.
    """

    period = TimePeriod(period)
    if period is TimePeriod.ALL:
        return None
    if period is TimePeriod.TODAY:
        return today, today
    if period is TimePeriod.YESTERDAY:
        yesterday = today - timedelta(days=1)
        return yesterday, yesterday
    if period is TimePeriod.LAST_7_DAYS:
        return today - timedelta(days=6), today
    if period is TimePeriod.THIS_WEEK:
        monday = today - timedelta(days=today.weekday())
        return monday, monday + timedelta(days=6)
    if period is TimePeriod.LAST_WEEK:
        monday = today - timedelta(days=today.weekday() + 7)
        return monday, monday + timedelta(days=6)
    if period is TimePeriod.THIS_MONTH:
        return _month_bounds(today.year, today.month)
    if period is TimePeriod.LAST_MONTH:
        last_month = previous_month(today)
        return _month_bounds(last_month.year, last_month.month)
    if period is TimePeriod.THIS_YEAR:
        return date(today.year, 1, 1), today
    # custom
    if custom_from is None or custom_to is None:
        return None
    return custom_from, custom_to


def _amount_matches(amount: float, spec: FilterSpec) -> bool:
    rng = spec.amount_range
    if rng is AmountRange.ALL:
        return True
    if rng is AmountRange.UNDER_500:
        return amount < 500
    if rng is AmountRange.FROM_500_TO_1000:
        return 500 <= amount <= 1000
    if rng is AmountRange.FROM_1000_TO_5000:
        return 1000 < amount <= 5000
    if rng is AmountRange.OVER_5000:
        return amount > 5000
    low = spec.custom_amount_min if spec.custom_amount_min is not None else float("-inf")
    high = spec.custom_amount_max if spec.custom_amount_max is not None else float("inf")
    return low <= amount <= high


def _interval_for(spec: FilterSpec, today: date) -> Optional[tuple[date, date]]:
    return resolve_period(
        spec.time_period,
        today=today,
        custom_from=spec.custom_date_from,
        custom_to=spec.custom_date_to,
    )


def _passes(txn: Any, spec: FilterSpec, interval: Optional[tuple[date, date]]) -> bool:
    in_period = interval is None or interval[0] <= txn.date <= interval[1]
    type_ok = spec.type == ALL or txn.type == spec.type
    category_ok = spec.category == ALL or txn.category == spec.category
    return in_period and type_ok and category_ok and _amount_matches(txn.amount, spec)


def matches(txn: Any, spec: FilterSpec, *, today: Optional[date] = None) -> bool:
    """True when ``txn`` satisfies every active predicate of ``spec``."""

    return _passes(txn, spec, _interval_for(spec, today or date.today()))


def apply_filters(
    transactions: Iterable[T], spec: FilterSpec, *, today: Optional[date] = None
) -> list[T]:
    """Return the order-preserving subsequence of ``transactions`` matching ``spec``.

    "Today" is read once per call so every transaction is judged against the
    same interval.
    """

    if transactions is None:
        return []
    interval = _interval_for(spec, today or date.today())
    return [txn for txn in transactions if _passes(txn, spec, interval)]


@dataclass(frozen=True, slots=True)
class FilterPreset:
    """Named shortcut that resets the filters and applies a few fields."""

    id: str
    name: str
    description: str
    fields: Mapping[str, Any]

    def apply(self) -> FilterSpec:
        return FilterSpec.from_dict(self.fields)


BUILTIN_PRESETS: Sequence[FilterPreset] = (
    FilterPreset(
        "this-month-expenses",
        "This Month's Expenses",
        "All expenses for the current month",
        {"time_period": "thisMonth", "type": "expense"},
    ),
    FilterPreset(
        "recent-transactions",
        "Recent Transactions",
        "All transactions from the last 7 days",
        {"time_period": "last7days"},
    ),
    FilterPreset(
        "high-value",
        "High-Value Transactions",
        "Transactions over 5,000",
        {"amount_range": "over5000"},
    ),
    FilterPreset(
        "monthly-income",
        "This Month's Income",
        "Income received in the current month",
        {"time_period": "thisMonth", "type": "income"},
    ),
    FilterPreset(
        "monthly-savings",
        "This Month's Savings",
        "Savings contributions in the current month",
        {"time_period": "thisMonth", "type": "savings"},
    ),
    FilterPreset(
        "grocery-expenses",
        "Grocery Expenses",
        "Every expense labelled Groceries",
        {"type": "expense", "category": "Groceries"},
    ),
    FilterPreset(
        "dining-expenses",
        "Dining Expenses",
        "Every expense labelled Dining",
        {"type": "expense", "category": "Dining"},
    ),
    FilterPreset(
        "housing-expenses",
        "Housing Expenses",
        "Every expense labelled Housing",
        {"type": "expense", "category": "Housing"},
    ),
    FilterPreset(
        "transport-expenses",
        "Transport Expenses",
        "Every expense labelled Transport",
        {"type": "expense", "category": "Transport"},
    ),
    FilterPreset(
        "last-month-comparison",
        "Last Month's Expenses",
        "Expenses from the previous month",
        {"time_period": "lastMonth", "type": "expense"},
    ),
    FilterPreset(
        "small-expenses",
        "Small Expenses",
        "Expenses under 500",
        {"type": "expense", "amount_range": "under500"},
    ),
)


def find_preset(preset_id: str, extra: Iterable[FilterPreset] = ()) -> FilterPreset:
    """Look up a preset by id among built-ins and user-saved ones."""

    for preset in (*BUILTIN_PRESETS, *extra):
        if preset.id == preset_id:
            return preset
    raise KeyError(preset_id)
