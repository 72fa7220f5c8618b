"""Fill-rate and cardinality statistics for a single column."""

from collections import Counter
from typing import Any, Iterable, Optional

from sheet_inspect.analysis.value_normalizer import is_blank
from sheet_inspect.models.data_models import AnalysisConfig, ColumnProfile


class ColumnProfiler:
    """Computes a ColumnProfile from the values of one column.

    Distinct values are ranked by occurrence count; values seen the same
    number of times keep the order in which they first appeared. Up to
    ``full_list_threshold`` distinct values are listed in full, above that
    only the ``top_values`` most frequent ones are retained.

    Example:
        >>> profiler = ColumnProfiler()
        >>> profile = profiler.profile("Colour", ["red", "red", None, "blue"], 4)
        >>> profile.percent, profile.values
        (75.0, (('red', 2), ('blue', 1)))
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def profile(self, name: str, values: Iterable[Any], total: int) -> ColumnProfile:
        """Profile one column.

        Args:
            name: Column header
            values: Normalized values of the column, one per row
            total: Number of rows in the sheet

        Returns:
            Column profile
        """
        filled_values = [value for value in values if not is_blank(value)]
        filled = len(filled_values)
        percent = fill_percent(filled, total)

        # Counter keeps first-seen order and most_common() sorts stably.
        ranked = Counter(filled_values).most_common()
        distinct_count = len(ranked)

        if distinct_count == 0:
            listed = ()
        elif distinct_count <= self.config.full_list_threshold:
            listed = tuple(ranked)
        else:
            listed = tuple(ranked[:self.config.top_values])

        has_more = distinct_count > self.config.full_list_threshold
        return ColumnProfile(
            name=name,
            total=total,
            filled=filled,
            percent=percent,
            values=listed,
            distinct_count=distinct_count,
            has_more=has_more,
            remaining=distinct_count - self.config.top_values if has_more else 0,
        )


def fill_percent(part: int, total: int) -> float:
    """Percentage of part in total rounded to 2 decimals, 0 for an empty total."""
    if total == 0:
        return 0
    return round(part / total * 100, 2)
