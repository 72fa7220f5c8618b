"""Inventory and extraction of images embedded as drawings.

Drawings are anchored to a cell coordinate such as ``AB12``; the inventory
buckets them by column letters and by row number. Extraction writes each
drawing's payload to ``{sheet}_{anchor}_{NNN}.{ext}`` and carries on past
individual failures.
"""

import re
from collections import Counter
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from sheet_inspect.models.data_models import (
    UNKNOWN_BUCKET,
    Drawing,
    DrawingSample,
    ExtractionResult,
    ImageReport,
)
from sheet_inspect.utils.logger import get_inspection_logger
from sheet_inspect.utils.logging_decorators import log_operation, operation_context

ANCHOR_PATTERN = re.compile(r"^([A-Z]+)(\d+)$")
SAMPLE_SIZE = 10


def split_anchor(anchor: str) -> Tuple[str, str]:
    """Split an anchor coordinate into (column letters, row number).

    Anchors that are not uppercase letters followed by digits land in the
    "Unknown" bucket on both axes.
    """
    match = ANCHOR_PATTERN.match(anchor or "")
    if match is None:
        return UNKNOWN_BUCKET, UNKNOWN_BUCKET
    return match.group(1), match.group(2)


def sanitize_sheet_name(sheet_name: str) -> str:
    """Replace every character outside [A-Za-z0-9] with an underscore."""
    return re.sub(r"[^A-Za-z0-9]", "_", sheet_name)


def image_filename(sheet_name: str, drawing: Drawing, sequence: int) -> str:
    """Build the file name of an extracted drawing (sequence is 1-based)."""
    return f"{sanitize_sheet_name(sheet_name)}_{drawing.anchor}_{sequence:03d}.{drawing.extension}"


class ImageInventory:
    """Counts and extracts the drawings of one sheet.

    Example:
        >>> inventory = ImageInventory()
        >>> report = inventory.inventory(drawings)
        >>> report.by_column
        {'B': 3, 'D': 1}
    """

    def __init__(self):
        self.logger = get_inspection_logger(__name__)

    def inventory(self, drawings: Sequence[Drawing]) -> ImageReport:
        """Aggregate drawing counts per column and per row.

        Args:
            drawings: Drawings of one sheet

        Returns:
            Image report; ``rows_with_images`` counts distinct rows
        """
        by_column: Counter = Counter()
        by_row: Counter = Counter()

        for drawing in drawings:
            column, row = split_anchor(drawing.anchor)
            by_column[column] += 1
            by_row[row] += 1

        samples = tuple(
            DrawingSample(anchor=d.anchor, name=d.name, description=d.description)
            for d in list(drawings)[:SAMPLE_SIZE]
        )
        return ImageReport(
            total=len(drawings),
            by_column=dict(by_column),
            by_row=dict(by_row),
            samples=samples,
        )

    @log_operation("extract_images")
    def extract(
        self,
        drawings: Sequence[Drawing],
        target_dir: Union[str, Path],
        sheet_name: str,
        debug: bool = False,
    ) -> ExtractionResult:
        """Write every drawing's payload into ``target_dir``.

        The directory is created (with parents) if needed. A drawing whose
        payload cannot be read or rendered, or is empty, is counted as
        failed; the remaining drawings are still processed.

        Args:
            drawings: Drawings of one sheet
            target_dir: Directory to write images into
            sheet_name: Sheet name used as file name prefix
            debug: Log each individual failure

        Returns:
            Extraction result with extracted and failed counts
        """
        target_dir = Path(target_dir)
        if not target_dir.is_dir():
            target_dir.mkdir(parents=True, exist_ok=True)
            self.logger.info(f"Created directory: {target_dir}")

        written: List[Path] = []
        failed = 0

        with operation_context("image_extraction", self.logger, directory=str(target_dir)) as timing:
            for sequence, drawing in enumerate(drawings, 1):
                path = target_dir / image_filename(sheet_name, drawing, sequence)
                error = self._write_drawing(drawing, path)
                if error is None:
                    written.append(path)
                    continue

                failed += 1
                if debug:
                    self.logger.warning(f"Failed to extract image {sequence} [{drawing.anchor}]: {error}")

            timing.add_metadata("extracted", len(written))
            timing.add_metadata("failed", failed)

        self.logger.log_image_extraction(target_dir, len(written), failed)
        return ExtractionResult(
            directory=target_dir,
            extracted=len(written),
            failed=failed,
            files=tuple(written),
        )

    @staticmethod
    def _write_drawing(drawing: Drawing, path: Path) -> Optional[str]:
        """Write one drawing, returning an error description on failure."""
        try:
            payload = drawing.read_bytes()
        except Exception as e:
            # Renderers and file sources fail in library-specific ways.
            return f"{type(e).__name__}: {e}"

        if not payload:
            return "empty image payload"

        try:
            path.write_bytes(payload)
        except OSError as e:
            return f"{type(e).__name__}: {e}"
        return None
