"""Step 2: drop rows that an overlapping re-run of step 1 appended twice.

Rows identical in every column collapse into the first one. The csv has no
per-message key, so two identical swaps inside one tx collapse as well.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

import pandas as pd

from terra_swaps.config import load_config

logger = logging.getLogger(__name__)


def dedup_path(result_file_name: str) -> Path:
    path = Path(result_file_name)
    return path.with_name(f"{path.stem}-dedup{path.suffix or '.csv'}")


def dedupe_swaps(result_file_name: str, output_file_name: Optional[str] = None) -> int:
    """Write a de-duplicated copy of the swaps csv.

    :return: number of rows removed
    """
    # Everything as text, so amounts and hashes are written back untouched
    df = pd.read_csv(result_file_name, dtype=str, keep_default_na=False)

    deduped_df = df.drop_duplicates(keep="first")
    removed = len(df) - len(deduped_df)

    output = output_file_name or dedup_path(result_file_name)
    deduped_df.to_csv(output, index=False)

    logger.info("Removed %d duplicate rows of %d, wrote %s", removed, len(df), output)
    return removed


def main():
    logging.basicConfig(level="INFO", handlers=[logging.StreamHandler()])

    if len(sys.argv) > 1:
        result_file_name = sys.argv[1]
    else:
        result_file_name = load_config().result_file_name
    output_file_name = sys.argv[2] if len(sys.argv) > 2 else None

    dedupe_swaps(result_file_name, output_file_name)


if __name__ == "__main__":
    main()
