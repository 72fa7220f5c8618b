"""Command-line interface for the spreadsheet inspector.

This module provides the ``sheet-inspect`` command group:
- inspect: sheet statistics, image inventory/extraction and cross-sheet checks
- sheets: list the sheets of a workbook
- config-check: validate and display the configuration
"""

import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from sheet_inspect import __version__
from sheet_inspect.config.config_manager import ConfigurationError, config_manager
from sheet_inspect.inspector import SpreadsheetInspector
from sheet_inspect.models.data_models import (
    Config,
    InspectionError,
    InspectionReport,
    InspectionRequest,
    MemoryConfig,
    OutputConfig,
    SheetNotFoundError,
)
from sheet_inspect.reporting import (
    HTMLReportGenerator,
    PDFReportGenerator,
    ReportBuilder,
    ReportGenerator,
)
from sheet_inspect.utils.correlation import CorrelationContext
from sheet_inspect.utils.logger import get_inspection_logger, setup_logging
from sheet_inspect.utils.memory import apply_memory_limit

logger = get_inspection_logger(__name__)


@click.group(invoke_without_command=True)
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--version', is_flag=True, help='Show version information')
@click.pass_context
def main(ctx: click.Context, config: Optional[str], version: bool) -> None:
    """Spreadsheet Inspector - audit workbooks before importing them.

    Lists sheets, profiles columns, inventories embedded images and checks
    whether the values of one column are referenced from other sheets.
    """
    if version:
        click.echo(f"sheet-inspect v{__version__}")
        return

    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.argument('file_path', type=click.Path(path_type=Path))
@click.option('--sheets', 'sheets_only', is_flag=True, help='Only list the sheets of the workbook')
@click.option('--sheet', help='Sheet to inspect: 1-based index or exact name')
@click.option('--column', help='Check where the values of this column occur in other sheets')
@click.option('--cross-sheet', help='Restrict the cross-sheet check to this sheet (index or name)')
@click.option('--target-column', help='Only compare against this column in the target sheets')
@click.option('--debug', is_flag=True, help='Preview mode: scan the first rows only and show extra details')
@click.option('--images', is_flag=True, help='Count the images anchored in the sheet')
@click.option('--extract-images', type=click.Path(path_type=Path), help='Extract the images into this directory')
@click.option('--output', '-o', 'output_format', type=click.Choice(OutputConfig.FORMATS),
              help='Output format (default: console)')
@click.option('--output-file', type=click.Path(path_type=Path), help='Output file (required for html/pdf; writes markdown for console)')
@click.option('--memory', type=int, help='Memory limit in MB')
@click.pass_context
def inspect(
    ctx: click.Context,
    file_path: Path,
    sheets_only: bool,
    sheet: Optional[str],
    column: Optional[str],
    cross_sheet: Optional[str],
    target_column: Optional[str],
    debug: bool,
    images: bool,
    extract_images: Optional[Path],
    output_format: Optional[str],
    output_file: Optional[Path],
    memory: Optional[int],
) -> None:
    """Inspect a workbook.

    FILE_PATH: Path to the workbook (.xlsx or .xlsm)
    """
    config = _load_config(ctx)

    if memory is not None:
        config = replace(config, memory=MemoryConfig(limit_mb=memory))

    setup_logging(config.logging)
    apply_memory_limit(config.memory)

    output_format = output_format or config.output.format
    output_file = output_file or config.output.file

    if output_format in ("html", "pdf") and not output_file:
        click.echo(f"--output-file is required when using --output={output_format}", err=True)
        sys.exit(1)

    request = InspectionRequest(
        sheets_only=sheets_only,
        sheet=sheet,
        column=column,
        cross_sheet=cross_sheet,
        target_column=target_column,
        debug=debug,
        images=images,
        extract_images=extract_images.expanduser() if extract_images else None,
    )

    report = _run_inspection(config, file_path, request)
    _write_report(config, report, output_format, output_file, debug)


@main.command()
@click.argument('file_path', type=click.Path(path_type=Path))
@click.pass_context
def sheets(ctx: click.Context, file_path: Path) -> None:
    """List the sheets of a workbook with their indices.

    FILE_PATH: Path to the workbook
    """
    config = _load_config(ctx)
    setup_logging(config.logging)

    report = _run_inspection(config, file_path, InspectionRequest(sheets_only=True))
    click.echo(ReportGenerator(config.analysis).render(report), nl=False)


@main.command()
@click.pass_context
def config_check(ctx: click.Context) -> None:
    """Validate and display current configuration."""
    click.echo("Loading and validating configuration...")
    config = _load_config(ctx)

    click.echo("✓ Configuration loaded successfully")
    click.echo()
    click.echo("Configuration Summary:")
    click.echo(f"  Full value list up to: {config.analysis.full_list_threshold} distinct values")
    click.echo(f"  Top values otherwise: {config.analysis.top_values}")
    click.echo(f"  Debug row limit: {config.analysis.debug_row_limit}")
    click.echo(f"  Value display length: {config.analysis.value_display_length}")
    click.echo(f"  Memory limit: {config.memory.limit_mb}MB")
    click.echo(f"  Max file size: {config.workbook.max_file_size_mb}MB")
    click.echo(f"  Extensions: {', '.join(config.workbook.extensions)}")
    click.echo(f"  Output format: {config.output.format}")
    click.echo(f"  Logging level: {config.logging.level}")


def _load_config(ctx: click.Context) -> Config:
    config_path = (ctx.obj or {}).get('config_path')
    try:
        return config_manager.load_config(config_path)
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


def _run_inspection(config: Config, file_path: Path, request: InspectionRequest) -> InspectionReport:
    try:
        with CorrelationContext():
            return SpreadsheetInspector(config).inspect(file_path.expanduser(), request)
    except InspectionError as e:
        logger.log_error(e.error_type, e.message, e.file_path, exc_info=False)
        if isinstance(e, SheetNotFoundError) and e.sheets:
            sheet_list = ReportBuilder(file_path, e.sheets).build()
            click.echo(ReportGenerator(config.analysis).render(sheet_list))
        kind = e.error_type.replace("_", " ").capitalize()
        click.echo(f"{kind} error: {e}", err=True)
        sys.exit(1)
    except MemoryError:
        click.echo(
            f"Memory error: memory limit of {config.memory.limit_mb}MB exceeded (use --memory to raise it)",
            err=True,
        )
        sys.exit(1)


def _write_report(
    config: Config,
    report: InspectionReport,
    output_format: str,
    output_file: Optional[Path],
    debug: bool,
) -> None:
    if output_format == "console" and not output_file:
        click.echo(ReportGenerator(config.analysis, debug=debug).render(report), nl=False)
        return

    try:
        if output_format == "html":
            path = HTMLReportGenerator(config.analysis).generate_report(report, output_file)
            click.echo(f"HTML report saved to: {path}")
        elif output_format == "pdf":
            path = PDFReportGenerator(config.analysis).generate_report(report, output_file)
            click.echo(f"PDF report saved to: {path}")
        else:
            path = ReportGenerator(config.analysis, debug=debug).generate_report(report, output_file)
            click.echo(f"Markdown report saved to: {path}")
    except OSError as e:
        click.echo(f"Output error: {e}", err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
