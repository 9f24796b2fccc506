"""Join free-text transaction labels against the category list."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional

from ..constants import DEFAULT_CATEGORIES
from ..constants.categories import DEFAULT_COLORS
from ..models.category import Category


@dataclass(frozen=True, slots=True)
class CategoryUsage:
    """A stored category together with what the ledger says about it."""

    category: Any
    spending: float
    usage_count: int
    last_used: Optional[date]

    @property
    def name(self) -> str:
        return self.category.name

    @property
    def type(self) -> str:
        return self.category.type

    @property
    def budget(self) -> Optional[float]:
        return self.category.budget


@dataclass(frozen=True, slots=True)
class UnlabeledCategory:
    """A transaction label with no matching category of the same type."""

    name: str
    type: str
    spending: float
    usage_count: int
    last_used: Optional[date]


@dataclass(slots=True)
class CategoryJoin:
    usage: list[CategoryUsage] = field(default_factory=list)
    unlabeled: list[UnlabeledCategory] = field(default_factory=list)

    def is_matched(self, name: str, txn_type: str) -> bool:
        return any(u.name == name and u.type == txn_type for u in self.usage)


def join_categories(transactions: Iterable[Any], categories: Iterable[Any]) -> CategoryJoin:
    """Attach spending, usage count and last-used date to each category.

    Matching is on (name, type). Labels that match nothing are reported as
    :class:`UnlabeledCategory` rather than dropped.
    """

    stats: dict[tuple[str, str], list] = {}
    for txn in transactions:
        entry = stats.setdefault((txn.category, txn.type), [0.0, 0, None])
        entry[0] += txn.amount
        entry[1] += 1
        if entry[2] is None or txn.date > entry[2]:
            entry[2] = txn.date

    join = CategoryJoin()
    seen: set[tuple[str, str]] = set()
    for category in categories:
        key = (category.name, category.type)
        seen.add(key)
        spending, count, last_used = stats.get(key, (0.0, 0, None))
        stored = getattr(category, "last_used", None)
        join.usage.append(
            CategoryUsage(
                category=category,
                spending=spending,
                usage_count=count,
                last_used=max(filter(None, (last_used, stored)), default=None),
            )
        )

    for (name, txn_type), (spending, count, last_used) in stats.items():
        if (name, txn_type) not in seen:
            join.unlabeled.append(
                UnlabeledCategory(
                    name=name,
                    type=txn_type,
                    spending=spending,
                    usage_count=count,
                    last_used=last_used,
                )
            )
    join.unlabeled.sort(key=lambda item: item.spending, reverse=True)
    return join


def recently_used(usage: Iterable[CategoryUsage], limit: int = 5) -> list[CategoryUsage]:
    """Most recently used first, then by usage count; unused categories drop out."""

    used = [u for u in usage if u.usage_count > 0 or u.last_used is not None]
    # Two stable passes: secondary key first, then primary.
    used.sort(key=lambda u: u.usage_count, reverse=True)
    used.sort(key=lambda u: (u.last_used is None, -(u.last_used.toordinal() if u.last_used else 0)))
    return used[: max(0, limit)]


def default_categories(*, user_id: str = "local") -> list[Category]:
    """Starter categories for an empty ledger, one list per type."""

    seeded: list[Category] = []
    for txn_type, names in DEFAULT_CATEGORIES.items():
        for index, name in enumerate(names):
            seeded.append(
                Category(
                    user_id=user_id,
                    name=name,
                    type=txn_type,
                    color=DEFAULT_COLORS[index % len(DEFAULT_COLORS)],
                    is_default=True,
                )
            )
    return seeded
