"""Workbook decoding boundary for the spreadsheet inspector.

This module turns a workbook file into what the analysis engine consumes:
- the ordered list of sheets (1-based ordinals)
- per sheet, a list of rows keyed by the headers of the first row
- per sheet, the embedded drawings with their anchors and payloads

Cell data is read with pandas (openpyxl engine); drawings come from the
openpyxl object model, which needs Pillow to load embedded pictures.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import openpyxl
import pandas as pd
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from sheet_inspect.analysis.value_normalizer import is_blank
from sheet_inspect.models.data_models import (
    Drawing,
    FileImageSource,
    MemoryImageSource,
    Row,
    SheetIdentity,
    SheetNotFoundError,
    WorkbookConfig,
    WorkbookError,
)
from sheet_inspect.utils.logger import get_inspection_logger
from sheet_inspect.utils.logging_decorators import log_operation, operation_context

_INDEX_SELECTOR = re.compile(r"^\s*\d+\s*$")


def resolve_sheet(sheets: Sequence[SheetIdentity], selector: Optional[Union[str, int]]) -> SheetIdentity:
    """Resolve a sheet selector to a sheet.

    A numeric selector is a 1-based ordinal; anything else must equal a sheet
    name exactly (the first sheet with that name wins).

    Args:
        sheets: Sheets of the workbook in file order
        selector: Ordinal or name

    Returns:
        The selected sheet

    Raises:
        SheetNotFoundError: If no selector is given or nothing matches
    """
    if selector is None or str(selector) == "":
        raise SheetNotFoundError(
            "No sheet specified. Use --sheet=1 or --sheet=SheetName", sheets=tuple(sheets)
        )

    if isinstance(selector, int) or _INDEX_SELECTOR.match(str(selector)):
        index = int(selector)
        for sheet in sheets:
            if sheet.index == index:
                return sheet
        raise SheetNotFoundError(
            f"Sheet index '{index}' is out of range. Max index: {len(sheets)}",
            sheets=tuple(sheets),
        )

    for sheet in sheets:
        if sheet.name == selector:
            return sheet
    raise SheetNotFoundError(
        f"Sheet '{selector}' not found in list of sheets.", sheets=tuple(sheets)
    )


class WorkbookReader:
    """Reads sheets, rows and drawings from a workbook file.

    The reader is a context manager; the pandas ``ExcelFile`` is opened on
    entry and the openpyxl workbook (needed for drawings only) is loaded the
    first time drawings are requested.

    Example:
        >>> with WorkbookReader("inventory.xlsx") as reader:
        ...     for sheet in reader.sheets():
        ...         print(sheet.index, sheet.name, len(reader.read_rows(sheet.index)))
    """

    def __init__(self, file_path: Union[str, Path], config: Optional[WorkbookConfig] = None):
        self.file_path = Path(file_path)
        self.config = config or WorkbookConfig()
        self.logger = get_inspection_logger(__name__, {"file_path": str(self.file_path)})
        self._excel_file: Optional[pd.ExcelFile] = None
        self._workbook: Optional[openpyxl.Workbook] = None
        self._rows_cache: Dict[int, List[Dict[str, Any]]] = {}

    def __enter__(self) -> "WorkbookReader":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def open(self) -> None:
        """Validate the file and open it for reading.

        Raises:
            WorkbookError: If the file cannot be validated or opened
        """
        if self._excel_file is not None:
            return

        self.validate()
        try:
            self._excel_file = pd.ExcelFile(self.file_path, engine="openpyxl")
        except Exception as e:
            # Corrupt archives surface as zipfile, KeyError or XML parser errors.
            raise WorkbookError(f"Cannot open workbook: {e}", self.file_path) from e

    def close(self) -> None:
        if self._excel_file is not None:
            self._excel_file.close()
            self._excel_file = None
        if self._workbook is not None:
            self._workbook.close()
            self._workbook = None
        self._rows_cache.clear()

    @log_operation("validate_workbook")
    def validate(self) -> None:
        """Validate the workbook file before opening it.

        Raises:
            WorkbookError: If validation fails
        """
        file_path = self.file_path

        if not file_path.exists():
            raise WorkbookError(f"File not found: {file_path}")

        if not file_path.is_file():
            raise WorkbookError(f"Path is not a file: {file_path}")

        suffix = file_path.suffix.lower()
        if suffix not in self.config.extensions:
            raise WorkbookError(
                f"Unsupported file extension: {file_path.suffix}. "
                f"Supported: {', '.join(self.config.extensions)}",
                file_path,
            )

        file_size_mb = file_path.stat().st_size / (1024 * 1024)
        if file_size_mb > self.config.max_file_size_mb:
            raise WorkbookError(
                f"File too large: {file_size_mb:.1f}MB > {self.config.max_file_size_mb}MB",
                file_path,
            )

        try:
            with open(file_path, "rb") as f:
                f.read(1024)
        except OSError as e:
            raise WorkbookError(f"Cannot read file {file_path}: {e}") from e

        self.logger.debug(f"File validation successful: {file_path} ({file_size_mb:.1f}MB)")

    def sheets(self) -> List[SheetIdentity]:
        """Sheets of the workbook in file order, numbered from 1."""
        return [
            SheetIdentity(index=index, name=name)
            for index, name in enumerate(self._excel.sheet_names, 1)
        ]

    def sheet(self, index: int) -> SheetIdentity:
        return resolve_sheet(self.sheets(), index)

    def read_rows(self, index: int) -> List[Row]:
        """Read the data rows of a sheet.

        Rows without any filled cell are dropped. The first remaining row
        supplies the headers; cells below a blank header cell are ignored,
        and a repeated header keeps the value of its last column. Every
        following row becomes a mapping from header to raw cell value, with
        empty cells as ``None``.

        Args:
            index: 1-based sheet ordinal

        Returns:
            Rows of the sheet (excluding the header row)
        """
        if index in self._rows_cache:
            return self._rows_cache[index]

        sheet = self.sheet(index)
        with operation_context("read_sheet_rows", self.logger, sheet_name=sheet.name) as timing:
            try:
                frame = self._excel.parse(sheet_name=index - 1, header=None, dtype=object)
            except Exception as e:
                raise WorkbookError(f"Cannot read sheet '{sheet.name}': {e}", self.file_path) from e

            frame = frame.astype(object).where(pd.notna(frame), None)
            rows = rows_from_records(frame.values.tolist())
            timing.add_metadata("row_count", len(rows))

        self.logger.info(f"Read {len(rows):,} rows from sheet '{sheet.name}' ({index})")
        self._rows_cache[index] = rows
        return rows

    def read_drawings(self, index: int) -> List[Drawing]:
        """Read the images anchored in a sheet.

        Args:
            index: 1-based sheet ordinal

        Returns:
            Drawings in the order openpyxl reports them
        """
        sheet = self.sheet(index)
        worksheet = self._openpyxl_workbook.worksheets[index - 1]
        images = getattr(worksheet, "_images", [])

        drawings = [self._to_drawing(image) for image in images]
        self.logger.info(f"Found {len(drawings)} image(s) in sheet '{sheet.name}' ({index})")
        return drawings

    @property
    def _excel(self) -> pd.ExcelFile:
        if self._excel_file is None:
            self.open()
        return self._excel_file

    @property
    def _openpyxl_workbook(self) -> openpyxl.Workbook:
        if self._workbook is None:
            try:
                self._workbook = openpyxl.load_workbook(self.file_path, data_only=True)
            except (InvalidFileException, OSError) as e:
                raise WorkbookError(f"Cannot load drawings: {e}", self.file_path) from e
        return self._workbook

    @staticmethod
    def _to_drawing(image: Any) -> Drawing:
        """Convert an openpyxl image into a Drawing."""
        image_format = (getattr(image, "format", None) or "png").lower()
        ref = getattr(image, "ref", None)

        if isinstance(ref, (str, Path)):
            source = FileImageSource(path=Path(ref))
        else:
            source = MemoryImageSource(render=image._data, mime_type=f"image/{image_format}")

        return Drawing(
            anchor=anchor_coordinate(image.anchor),
            source=source,
            image_format=image_format,
            name=getattr(image, "name", None),
            description=getattr(image, "description", None),
        )


def anchor_coordinate(anchor: Any) -> str:
    """Cell coordinate of an openpyxl anchor ("" when it has no cell)."""
    if isinstance(anchor, str):
        return anchor

    marker = getattr(anchor, "_from", None)
    if marker is None:
        return ""
    return f"{get_column_letter(marker.col + 1)}{marker.row + 1}"


def rows_from_records(records: Sequence[Sequence[Any]]) -> List[Dict[str, Any]]:
    """Key raw sheet records by the headers of the first non-blank record.

    Args:
        records: Cell values per sheet row, empty cells as ``None``

    Returns:
        One mapping per data row, holding exactly the header keys
    """
    records = [record for record in records if not all(is_blank(value) for value in record)]
    if not records:
        return []

    headers = [
        (position, str(value))
        for position, value in enumerate(records[0])
        if not is_blank(value)
    ]

    rows = []
    for record in records[1:]:
        row: Dict[str, Any] = {}
        for position, header in headers:
            row[header] = record[position] if position < len(record) else None
        rows.append(row)
    return rows
