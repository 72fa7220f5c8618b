"""Core data models for the spreadsheet inspector.

This module contains the dataclasses and type definitions shared by the
analysis engine, the workbook reader and the report renderers. Report
fragments are frozen so that every analysis stage hands back an immutable
value which the report builder combines.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union


class _Missing:
    """Marker for a header that is absent from a row."""

    _instance = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()

# A decoded row: header -> cell value. Rows after the first may lack keys.
Row = Mapping[str, Any]

UNKNOWN_BUCKET = "Unknown"
ANY_COLUMN = "any"


@dataclass(frozen=True)
class SheetIdentity:
    """Identity of a sheet inside a workbook.

    Attributes:
        index: 1-based ordinal in file order (the unambiguous identifier)
        name: Display name of the sheet (may repeat across a workbook)
    """
    index: int
    name: str

    def __post_init__(self) -> None:
        if self.index < 1:
            raise ValueError("index must be at least 1")

    def __str__(self) -> str:
        return f"{self.name} ({self.index})"


@dataclass(frozen=True)
class ColumnProfile:
    """Fill-rate and cardinality statistics for one column.

    Attributes:
        name: Column header
        total: Number of rows in the sheet
        filled: Number of non-blank values
        percent: filled / total * 100, rounded to 2 decimals
        values: Ordered (value, occurrences) pairs, most frequent first
        distinct_count: Number of distinct non-blank values
        has_more: Whether only the top values are retained
        remaining: Distinct values not listed when has_more is set
        image_hint: Empty image-like column; pictures may be floating drawings
    """
    name: str
    total: int
    filled: int
    percent: float
    values: Tuple[Tuple[Any, int], ...] = ()
    distinct_count: int = 0
    has_more: bool = False
    remaining: int = 0
    image_hint: bool = False

    def __post_init__(self) -> None:
        if self.filled > self.total:
            raise ValueError("filled cannot exceed total")
        if self.distinct_count > self.filled:
            raise ValueError("distinct_count cannot exceed filled")


@dataclass(frozen=True)
class SheetReport:
    """Statistics for every column of one sheet."""
    total_rows: int
    headers: Tuple[str, ...]
    columns: Tuple[ColumnProfile, ...]


@dataclass(frozen=True)
class FileImageSource:
    """Drawing payload stored in a file on disk."""
    path: Path

    def read_bytes(self) -> bytes:
        return Path(self.path).read_bytes()

    @property
    def extension(self) -> str:
        return Path(self.path).suffix.lstrip(".").lower() or "png"


MIME_EXTENSIONS = {
    "image/png": "png",
    "image/gif": "gif",
    "image/jpeg": "jpg",
}


@dataclass(frozen=True)
class MemoryImageSource:
    """Drawing payload produced by an in-memory renderer."""
    render: Callable[[], bytes]
    mime_type: str = "image/png"

    def read_bytes(self) -> bytes:
        return self.render()

    @property
    def extension(self) -> str:
        return MIME_EXTENSIONS.get(self.mime_type.lower(), "png")


ImageSource = Union[FileImageSource, MemoryImageSource]


@dataclass(frozen=True)
class Drawing:
    """An embedded image anchored to a cell.

    Attributes:
        anchor: Anchor cell coordinate, e.g. "B12"
        source: Where the binary payload comes from
        image_format: Declared or inferred format ("png", "jpeg", ...)
        name: Optional drawing name
        description: Optional drawing description
    """
    anchor: str
    source: ImageSource
    image_format: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None

    def read_bytes(self) -> bytes:
        return self.source.read_bytes()

    @property
    def extension(self) -> str:
        return self.source.extension


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of writing drawings to disk."""
    directory: Path
    extracted: int
    failed: int
    files: Tuple[Path, ...] = ()


@dataclass(frozen=True)
class DrawingSample:
    """Anchor, name and description of one drawing, for debug listings."""
    anchor: str
    name: Optional[str]
    description: Optional[str]


@dataclass(frozen=True)
class ImageReport:
    """Aggregated image counts for a sheet."""
    total: int
    by_column: Dict[str, int] = field(default_factory=dict)
    by_row: Dict[str, int] = field(default_factory=dict)
    samples: Tuple[DrawingSample, ...] = ()
    extraction: Optional[ExtractionResult] = None

    @property
    def rows_with_images(self) -> int:
        return len(self.by_row)


@dataclass(frozen=True)
class CrossSheetMatch:
    """Values of a source column that also occur in a target sheet.

    ``count`` counts source occurrences, so duplicated source values inflate
    it; ``values`` holds each matched value once.
    """
    sheet: SheetIdentity
    column: str
    count: int
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class SkippedSheet:
    """A target sheet that did not take part in matching."""
    sheet: SheetIdentity
    reason: str


@dataclass(frozen=True)
class CrossSheetSummary:
    """Aggregate result of a cross-sheet reference check."""
    source_sheet: SheetIdentity
    source_column: str
    total: int
    found: int
    percent: float
    matches: Tuple[CrossSheetMatch, ...] = ()
    skipped: Tuple[SkippedSheet, ...] = ()
    target_column: Optional[str] = None
    partial: bool = False
    row_limit: Optional[int] = None


@dataclass(frozen=True)
class InspectionReport:
    """Everything one inspection produced, ready for rendering."""
    file_name: str
    file_path: Path
    generated_at: datetime
    sheets: Tuple[SheetIdentity, ...]
    selected_sheet: Optional[SheetIdentity] = None
    sheet_report: Optional[SheetReport] = None
    image_report: Optional[ImageReport] = None
    cross_sheet: Optional[CrossSheetSummary] = None
    warnings: Tuple[str, ...] = ()
    no_data: bool = False


@dataclass
class InspectionRequest:
    """What the caller asked to inspect.

    Attributes:
        sheets_only: Only list the sheets
        sheet: Sheet selector (1-based index or name)
        column: Source column for the cross-sheet check
        cross_sheet: Restrict the cross-sheet check to this sheet selector
        target_column: Only compare against this column in target sheets
        debug: Preview mode (first rows only, extra details)
        images: Count images anchored in the sheet
        extract_images: Directory to extract images into
    """
    sheets_only: bool = False
    sheet: Optional[str] = None
    column: Optional[str] = None
    cross_sheet: Optional[str] = None
    target_column: Optional[str] = None
    debug: bool = False
    images: bool = False
    extract_images: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.extract_images is not None and not isinstance(self.extract_images, Path):
            self.extract_images = Path(self.extract_images)

    @property
    def wants_images(self) -> bool:
        return self.images or self.extract_images is not None


@dataclass
class AnalysisConfig:
    """Tuning knobs of the analysis engine.

    Attributes:
        full_list_threshold: Distinct counts up to this list every value
        top_values: Values listed when the threshold is exceeded
        debug_row_limit: Target rows scanned per sheet in debug mode
        value_display_length: Display truncation length for values
        image_hint_keyword: Header keyword that marks image columns
    """
    full_list_threshold: int = 20
    top_values: int = 10
    debug_row_limit: int = 100
    value_display_length: int = 100
    image_hint_keyword: str = "bild"

    def __post_init__(self) -> None:
        if self.top_values < 1:
            raise ValueError("top_values must be at least 1")
        if self.full_list_threshold < self.top_values:
            raise ValueError("full_list_threshold must not be smaller than top_values")
        if self.debug_row_limit < 1:
            raise ValueError("debug_row_limit must be at least 1")
        if self.value_display_length < 1:
            raise ValueError("value_display_length must be at least 1")


@dataclass
class MemoryConfig:
    """Memory ceiling applied once at process start."""
    limit_mb: int = 2000

    @property
    def limit_bytes(self) -> int:
        return self.limit_mb * 1024 * 1024


@dataclass
class WorkbookConfig:
    """Constraints on the workbooks that are opened."""
    max_file_size_mb: int = 500
    extensions: List[str] = field(default_factory=lambda: [".xlsx", ".xlsm"])

    def __post_init__(self) -> None:
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if not self.extensions:
            raise ValueError("extensions cannot be empty")
        self.extensions = [
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in self.extensions
        ]


@dataclass
class OutputConfig:
    """Report output settings."""
    format: str = "console"
    file: Optional[Path] = None

    FORMATS = ("console", "html", "pdf")

    def __post_init__(self) -> None:
        self.format = self.format.lower()
        if self.format not in self.FORMATS:
            raise ValueError(f"format must be one of {list(self.FORMATS)}")
        if self.file is not None and not isinstance(self.file, Path):
            self.file = Path(self.file)


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level
        format: Log message format string
        console_enabled: Whether to log to the console (stderr)
        file_enabled: Whether to log to file
        file_path: Path for log file
        structured_enabled: Whether to use structured JSON logging
    """
    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    console_enabled: bool = True
    file_enabled: bool = False
    file_path: Path = Path("./logs/sheet_inspect.log")
    structured_enabled: bool = False

    def __post_init__(self) -> None:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")

        self.level = self.level.upper()

        if not isinstance(self.file_path, Path):
            self.file_path = Path(self.file_path)

    @property
    def log_level(self) -> int:
        """Get numeric logging level."""
        return getattr(logging, self.level)


@dataclass
class Config:
    """Main configuration for the spreadsheet inspector."""
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    workbook: WorkbookConfig = field(default_factory=WorkbookConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class InspectionError(Exception):
    """Base exception for inspection failures.

    Attributes:
        message: Error message describing what went wrong
        file_path: Path to the workbook involved (if applicable)
        error_type: Category of error (workbook, sheet, column, no_data)
    """

    error_type = "general"

    def __init__(self, message: str, file_path: Optional[Path] = None):
        super().__init__(message)
        self.message = message
        self.file_path = file_path

    def __str__(self) -> str:
        if self.file_path:
            return f"{self.message} (File: {self.file_path})"
        return self.message


class WorkbookError(InspectionError):
    """Raised when a workbook cannot be validated or opened."""

    error_type = "workbook"


class SheetNotFoundError(InspectionError):
    """Raised when a sheet selector does not resolve to a sheet."""

    error_type = "sheet"

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        sheets: Tuple[SheetIdentity, ...] = (),
    ):
        super().__init__(message, file_path)
        self.sheets = tuple(sheets)


class ColumnNotFoundError(InspectionError):
    """Raised when the source column is missing from the source sheet."""

    error_type = "column"


class NoDataError(InspectionError):
    """Raised when a sheet has no rows to analyze."""

    error_type = "no_data"
