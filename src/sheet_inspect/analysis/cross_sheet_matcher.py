"""Cross-sheet reference checks.

Answers "which values of this column also show up in other sheets?", an
informal foreign-key check for workbooks without a schema. The match count
of a sheet counts source *occurrences* found in the target, so a source
column listing the same key on three rows contributes three matches for it.
It reflects how many source rows have a counterpart, not how many distinct
values do.
"""

from typing import Any, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from sheet_inspect.analysis.column_profiler import fill_percent
from sheet_inspect.analysis.value_normalizer import cell, is_blank, normalize
from sheet_inspect.models.data_models import (
    ANY_COLUMN,
    AnalysisConfig,
    ColumnNotFoundError,
    CrossSheetMatch,
    CrossSheetSummary,
    Row,
    SheetIdentity,
    SkippedSheet,
)
from sheet_inspect.utils.logger import get_inspection_logger
from sheet_inspect.utils.logging_decorators import log_operation

TargetSheet = Tuple[SheetIdentity, Sequence[Row]]


def column_values(rows: Sequence[Row], column: str) -> List[Any]:
    """Normalized, non-blank values of one column, duplicates kept.

    Raises:
        ColumnNotFoundError: If the first row has no such header
    """
    if rows and column not in rows[0]:
        raise ColumnNotFoundError(f"Column '{column}' not found")

    values = (normalize(cell(row, column)) for row in rows)
    return [value for value in values if not is_blank(value)]


class CrossSheetMatcher:
    """Finds source column values in the columns of other sheets.

    Example:
        >>> matcher = CrossSheetMatcher()
        >>> source = SheetIdentity(1, "Orders")
        >>> target = (SheetIdentity(2, "Customers"), [{"id": 2}, {"id": 3}])
        >>> summary = matcher.check(source, "customer", [1, 2, 2, 3], [target], "id")
        >>> summary.found, summary.total
        (3, 4)
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self.logger = get_inspection_logger(__name__)

    @staticmethod
    def select_targets(
        sheets: Iterable[SheetIdentity],
        source_sheet: SheetIdentity,
        only_sheet: Optional[SheetIdentity] = None,
    ) -> List[SheetIdentity]:
        """Sheets to compare against: all but the source, or just ``only_sheet``."""
        return [
            sheet for sheet in sheets
            if sheet.index != source_sheet.index
            and (only_sheet is None or sheet.index == only_sheet.index)
        ]

    def match(
        self,
        source_values: Sequence[Any],
        target_sheets: Iterable[TargetSheet],
        target_column: Optional[str] = None,
        source_sheet: Optional[SheetIdentity] = None,
        row_limit: Optional[int] = None,
        skipped: Optional[List[SkippedSheet]] = None,
    ) -> List[CrossSheetMatch]:
        """Match source values against each target sheet.

        Args:
            source_values: Normalized non-blank source values, duplicates kept
            target_sheets: (identity, rows) pairs to scan
            target_column: Only compare against this column; every cell otherwise
            source_sheet: Sheet the values came from; never used as a target
            row_limit: Scan only this many rows per target sheet
            skipped: Collects sheets that were left out, with the reason

        Returns:
            One match per target sheet sharing at least one value
        """
        matches: List[CrossSheetMatch] = []

        for sheet, rows in target_sheets:
            if source_sheet is not None and sheet.index == source_sheet.index:
                continue

            self.logger.info(f"Checking sheet: {sheet}")
            if row_limit is not None:
                rows = rows[:row_limit]

            if not rows:
                self._skip(sheet, "sheet is empty", skipped)
                continue

            if target_column is not None and target_column not in rows[0]:
                self._skip(sheet, f"column '{target_column}' not found", skipped)
                continue

            target_set = self._target_values(rows, target_column)
            found = [value for value in source_values if value in target_set]
            if not found:
                continue

            matches.append(CrossSheetMatch(
                sheet=sheet,
                column=target_column if target_column is not None else ANY_COLUMN,
                count=len(found),
                values=tuple(dict.fromkeys(found)),
            ))

        return matches

    @log_operation("cross_sheet_check")
    def check(
        self,
        source_sheet: SheetIdentity,
        source_column: str,
        source_values: Sequence[Any],
        target_sheets: Iterable[TargetSheet],
        target_column: Optional[str] = None,
        debug: bool = False,
    ) -> CrossSheetSummary:
        """Match and summarize in one step.

        Args:
            source_sheet: Sheet holding the source column
            source_column: Name of the source column
            source_values: Normalized non-blank source values, duplicates kept
            target_sheets: (identity, rows) pairs to scan
            target_column: Only compare against this column in target sheets
            debug: Preview mode, scanning only the first rows of each target

        Returns:
            Cross-sheet summary; ``partial`` is set in debug mode
        """
        row_limit = self.config.debug_row_limit if debug else None
        if debug:
            self.logger.warning(f"Debug mode: only checking first {row_limit} rows")

        skipped: List[SkippedSheet] = []
        matches = self.match(
            source_values,
            target_sheets,
            target_column=target_column,
            source_sheet=source_sheet,
            row_limit=row_limit,
            skipped=skipped,
        )

        total = len(source_values)
        found = sum(match.count for match in matches)
        return CrossSheetSummary(
            source_sheet=source_sheet,
            source_column=source_column,
            total=total,
            found=found,
            percent=fill_percent(found, total),
            matches=tuple(matches),
            skipped=tuple(skipped),
            target_column=target_column,
            partial=debug,
            row_limit=row_limit,
        )

    @staticmethod
    def _target_values(rows: Sequence[Row], column: Optional[str]) -> Set[Any]:
        if column is None:
            cells: Iterator[Any] = (value for row in rows for value in row.values())
        else:
            cells = (cell(row, column) for row in rows)

        target_set = set()
        for value in cells:
            value = normalize(value)
            if not is_blank(value):
                target_set.add(value)
        return target_set

    def _skip(self, sheet: SheetIdentity, reason: str, skipped: Optional[List[SkippedSheet]]) -> None:
        self.logger.log_cross_sheet_skip(sheet.name, sheet.index, reason)
        if skipped is not None:
            skipped.append(SkippedSheet(sheet=sheet, reason=reason))
