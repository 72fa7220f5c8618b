"""Pytest configuration and shared fixtures for spreadsheet inspector tests."""

import os
import tempfile
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Generator

import openpyxl
import pytest
import yaml
from openpyxl.drawing.image import Image as SheetImage
from PIL import Image

from sheet_inspect.config.config_manager import config_manager


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def clear_config_cache():
    """Loaded configurations are cached globally; start every test clean."""
    config_manager.clear_cache()
    yield
    config_manager.clear_cache()


@pytest.fixture
def sample_config_dict() -> dict:
    """Sample configuration dictionary for testing."""
    return {
        "analysis": {
            "full_list_threshold": 15,
            "top_values": 5,
            "debug_row_limit": 50,
            "value_display_length": 40,
        },
        "memory": {
            "limit_mb": 1024,
        },
        "workbook": {
            "max_file_size": 100,
            "extensions": [".xlsx"],
        },
        "output": {
            "format": "html",
            "file": "./reports/report.html",
        },
        "logging": {
            "level": "INFO",
            "file": {
                "enabled": True,
                "path": "./logs/test.log",
            },
        },
    }


@pytest.fixture
def sample_config_file(temp_dir: Path, sample_config_dict: dict) -> Path:
    """Create a sample configuration file for testing."""
    config_file = temp_dir / "test_config.yaml"
    with open(config_file, 'w') as f:
        yaml.dump(sample_config_dict, f)
    return config_file


def _png_bytes(color: str = "red") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_payload() -> bytes:
    """Bytes of a tiny PNG image."""
    return _png_bytes()


@pytest.fixture
def orders_workbook(temp_dir: Path) -> Path:
    """Workbook with four sheets for end-to-end inspection.

    1. Orders: Order [1, 2, 2, 3], Customer, Date, an empty "Bild" column and
       two pictures anchored at D2 and D4
    2. Shipments: Order [2, 3, 3, 4] and a Shipped date
    3. Notes: free text only, no Order column
    4. Empty: no cells at all
    """
    workbook = openpyxl.Workbook()

    orders = workbook.active
    orders.title = "Orders"
    orders.append(["Order", "Customer", "Date", "Bild"])
    orders.append([1, "Alice", datetime(2024, 1, 5, 10, 30), None])
    orders.append([2, "Bob", datetime(2024, 1, 6), None])
    orders.append([2, "Alice", None, None])
    orders.append([3, "Carol", datetime(2024, 1, 7), None])
    orders.add_image(SheetImage(BytesIO(_png_bytes("red"))), "D2")
    orders.add_image(SheetImage(BytesIO(_png_bytes("blue"))), "D4")

    shipments = workbook.create_sheet("Shipments")
    shipments.append(["Order", "Shipped"])
    shipments.append([2, datetime(2024, 1, 6, 15, 0)])
    shipments.append([3, datetime(2024, 1, 8)])
    shipments.append([3, datetime(2024, 1, 9)])
    shipments.append([4, datetime(2024, 1, 10)])

    notes = workbook.create_sheet("Notes")
    notes.append(["Comment"])
    notes.append(["call back"])
    notes.append(["Alice"])

    workbook.create_sheet("Empty")

    path = temp_dir / "orders.xlsx"
    workbook.save(path)
    return path


@pytest.fixture
def invalid_workbook(temp_dir: Path) -> Path:
    """Create a file with a workbook extension that is not a workbook."""
    invalid_file = temp_dir / "invalid.xlsx"
    invalid_file.write_text("This is not a spreadsheet")
    return invalid_file


@pytest.fixture
def env_override():
    """Set SHEET_INSPECT_* environment variables, restoring them afterwards."""
    class EnvOverride:
        def __init__(self):
            self.original_env = {}

        def set(self, key: str, value: str):
            if key not in self.original_env:
                self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

        def clear(self):
            for key, value in self.original_env.items():
                if value is None:
                    os.environ.pop(key, None)
                else:
                    os.environ[key] = value

    override = EnvOverride()
    yield override
    override.clear()
