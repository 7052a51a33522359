"""
Chart module - column role inference and chart-ready series
"""

from .rules import (
    DEFAULT_RULES,
    ChartRules,
    ColumnClassifier,
    ColumnRule,
    ColumnSelection,
    classify_columns,
)
from .series import ChartSeriesBuilder, build_chart_data, category_name, coerce_number

__all__ = [
    "DEFAULT_RULES",
    "ChartRules",
    "ColumnClassifier",
    "ColumnRule",
    "ColumnSelection",
    "classify_columns",
    "ChartSeriesBuilder",
    "build_chart_data",
    "category_name",
    "coerce_number",
]
