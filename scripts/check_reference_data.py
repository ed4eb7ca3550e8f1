#!/usr/bin/env python
"""Script to validate a reference data directory before deploying it."""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from evrisk.core.exceptions import ReferenceDataError
from evrisk.services.reference_data import load_reference_data


def main():
    data_dir = (
        Path(sys.argv[1])
        if len(sys.argv) > 1
        else Path(__file__).parent.parent / "data_v1.0"
    )

    if not data_dir.is_dir():
        print(f"Error: data directory not found at {data_dir}")
        sys.exit(1)

    print(f"Loading reference data from {data_dir}...")
    try:
        reference = load_reference_data(data_dir)
    except ReferenceDataError as e:
        print(f"Error: {e}")
        sys.exit(1)

    for table, rows in reference.table_sizes().items():
        print(f"  {table:<20} {rows:>5} rows")
    print("Reference data is valid")


if __name__ == "__main__":
    main()
