"""Main entry point for the spreadsheet inspector.

This module provides the main entry point that can be called
from the command line or imported as a module.
"""

import sys

from sheet_inspect.cli import main


def run() -> None:
    """Main entry point function."""
    try:
        main()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    run()
