"""Chart series builder.

Turns a typed ``Table`` into the bar, pie and line series drawn by the
visualize screen. Bar and line map one point per row in row order; pie
reduces each qualifying spend column to a single total.
"""

import logging
import math
import re
from typing import Any, List, Optional

from charts.rules import DEFAULT_RULES, ChartRules, ColumnClassifier, ColumnSelection
from core.models import ChartData, ChartPoint, Column, Table

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY = "Unknown"

_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def coerce_number(value: Any) -> float:
    """Parse *value* as a float, returning 0.0 for anything unusable.

    Strings are read up to the longest leading numeric prefix, so ``"12.5kg"``
    gives 12.5. Missing values, booleans, unparseable text and non-finite
    results all give 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMERIC_PREFIX.match(str(value))
        if not match:
            return 0.0
        try:
            number = float(match.group(0))
        except (OverflowError, ValueError):
            return 0.0
    return number if math.isfinite(number) else 0.0


def category_name(value: Any) -> str:
    """Label for a category cell; empty, zero and missing cells become ``"Unknown"``."""
    if not value or (isinstance(value, float) and math.isnan(value)):
        return UNKNOWN_CATEGORY
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class ChartSeriesBuilder:
    """Build the three chart series for a table.

    Holds no state between calls: the same table always yields the same
    series.
    """

    def __init__(self, rules: ChartRules = DEFAULT_RULES):
        self.rules = rules
        self.classifier = ColumnClassifier(rules)

    def build(self, table: Table, selection: Optional[ColumnSelection] = None) -> ChartData:
        if selection is None:
            selection = self.classifier.classify(table.columns)
        chart_data = ChartData(
            bar=self.bar_series(table, selection),
            pie=self.pie_series(table, selection),
            line=self.line_series(table, selection),
        )
        logger.debug(
            "Built chart data: bar=%d pie=%d line=%d",
            len(chart_data.bar), len(chart_data.pie), len(chart_data.line),
        )
        return chart_data

    def bar_series(self, table: Table, selection: ColumnSelection) -> List[ChartPoint]:
        if not selection.has_bar:
            return []
        return self._per_row(table, selection.bar_category, selection.bar_value)

    def line_series(self, table: Table, selection: ColumnSelection) -> List[ChartPoint]:
        if not selection.has_line:
            return []
        return self._per_row(table, selection.line_category, selection.line_value)

    def pie_series(self, table: Table, selection: ColumnSelection) -> List[ChartPoint]:
        return [
            ChartPoint(
                name=self.rules.pie_label(column.name),
                value=math.fsum(coerce_number(row.get(column.name)) for row in table.rows),
            )
            for column in selection.pie_columns
        ]

    @staticmethod
    def _per_row(table: Table, category: Column, value: Column) -> List[ChartPoint]:
        return [
            ChartPoint(
                name=category_name(row.get(category.name)),
                value=coerce_number(row.get(value.name)),
            )
            for row in table.rows
        ]


def build_chart_data(table: Table, rules: ChartRules = DEFAULT_RULES) -> ChartData:
    """Classify the table's columns and build its bar, pie and line series."""
    return ChartSeriesBuilder(rules).build(table)
