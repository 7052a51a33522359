"""Column role inference for chart building.

Selection is driven by ``ColumnRule`` objects: each rule targets one column
type and ranks candidates by keyword, falling back to the first column of
that type. ``ChartRules`` bundles the rules for every chart kind so the
keyword heuristics can be swapped without touching aggregation.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from core.models import Column, ColumnType


@dataclass(frozen=True)
class ColumnRule:
    """Pick columns of ``column_type`` whose lowercased name contains a keyword.

    Keywords are ranked: every column is tried against the first keyword
    before the second one is considered.
    """

    column_type: ColumnType
    keywords: Tuple[str, ...] = ()
    fallback: bool = True

    def candidates(self, columns: Sequence[Column]) -> List[Column]:
        return [c for c in columns if c.type == self.column_type]

    def _matches(self, column: Column, keyword: str) -> bool:
        return keyword.lower() in column.name.lower()

    def select(self, columns: Sequence[Column]) -> Optional[Column]:
        """Return the best single column, or None when no column qualifies."""
        typed = self.candidates(columns)
        for keyword in self.keywords:
            for column in typed:
                if self._matches(column, keyword):
                    return column
        if self.fallback and typed:
            return typed[0]
        return None

    def select_all(self, columns: Sequence[Column]) -> List[Column]:
        """Return every typed column matching any keyword, in schema order."""
        typed = self.candidates(columns)
        matched = [c for c in typed if any(self._matches(c, k) for k in self.keywords)]
        if not matched and self.fallback:
            return typed
        return matched


@dataclass(frozen=True)
class ChartRules:
    """Rules used to pick category and value columns per chart kind."""

    category: ColumnRule = field(
        default_factory=lambda: ColumnRule(ColumnType.STRING, ("month",))
    )
    bar_value: ColumnRule = field(
        default_factory=lambda: ColumnRule(ColumnType.NUMBER, ("revenue",))
    )
    line_value: ColumnRule = field(
        default_factory=lambda: ColumnRule(ColumnType.NUMBER, ("profit",))
    )
    pie_values: ColumnRule = field(
        default_factory=lambda: ColumnRule(
            ColumnType.NUMBER, ("spend", "spending"), fallback=False
        )
    )
    # Removed once each, in order, from pie column names.
    pie_label_tokens: Tuple[str, ...] = (" ($)", "Spend")

    def pie_label(self, column_name: str) -> str:
        label = column_name
        for token in self.pie_label_tokens:
            label = label.replace(token, "", 1)
        return label.strip() or column_name


DEFAULT_RULES = ChartRules()


@dataclass(frozen=True)
class ColumnSelection:
    """Columns chosen for each chart kind. ``None`` means no data for that kind."""

    bar_category: Optional[Column] = None
    bar_value: Optional[Column] = None
    line_category: Optional[Column] = None
    line_value: Optional[Column] = None
    pie_columns: Tuple[Column, ...] = ()

    @property
    def has_bar(self) -> bool:
        return self.bar_category is not None and self.bar_value is not None

    @property
    def has_line(self) -> bool:
        return self.line_category is not None and self.line_value is not None

    @property
    def has_pie(self) -> bool:
        return bool(self.pie_columns)


class ColumnClassifier:
    """Select category and value columns for the bar, pie and line charts."""

    def __init__(self, rules: ChartRules = DEFAULT_RULES):
        self.rules = rules

    def classify(self, columns: Sequence[Column]) -> ColumnSelection:
        category = self.rules.category.select(columns)
        bar_value = self.rules.bar_value.select(columns)
        line_value = self.rules.line_value.select(columns)

        # Bar and line need both axes; a missing axis drops the whole kind.
        has_bar = category is not None and bar_value is not None
        has_line = category is not None and line_value is not None

        return ColumnSelection(
            bar_category=category if has_bar else None,
            bar_value=bar_value if has_bar else None,
            line_category=category if has_line else None,
            line_value=line_value if has_line else None,
            pie_columns=tuple(self.rules.pie_values.select_all(columns)),
        )


def classify_columns(
    columns: Sequence[Column], rules: ChartRules = DEFAULT_RULES
) -> ColumnSelection:
    """Shortcut for ``ColumnClassifier(rules).classify(columns)``."""
    return ColumnClassifier(rules).classify(columns)
