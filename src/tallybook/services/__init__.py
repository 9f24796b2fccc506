"""Service layer package for Tallybook.

The analytics engine lives in :mod:`filters`, :mod:`aggregation` and
:mod:`trends`; everything else here is built on top of it.
"""

from . import aggregation, budgeting, categories, filters, trends  # noqa: F401
from .dashboard import DashboardView, build_dashboard
from .filters import FilterSpec, apply_filters

__all__ = [
    "DashboardView",
    "FilterSpec",
    "aggregation",
    "apply_filters",
    "budgeting",
    "build_dashboard",
    "categories",
    "filters",
    "trends",
]
