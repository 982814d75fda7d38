################################################################################
# File Name: csv_loader.py
# Purpose/Description: Load VIN lists from CSV files
# Author: Ralph Agent
# Creation Date: 2026-10-13
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-13    | Ralph Agent  | Initial creation
# ================================================================================
################################################################################

"""
VIN CSV loading.

The first column of every non-empty row is treated as a VIN. No header
detection and no validation happen here; callers validate each VIN before
using it so a single bad row does not abort a batch.
"""

import csv
import logging
from pathlib import Path

from .exceptions import VinFileError

logger = logging.getLogger(__name__)


def readVinsFromCsv(filePath: str | Path) -> list[str]:
    """
    Read VINs from the first column of a CSV file.

    Args:
        filePath: Path to the CSV file

    Returns:
        List of stripped first-column values, in file order

    Raises:
        VinFileError: If the file cannot be opened or parsed
    """
    path = Path(filePath)

    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            rows = list(csv.reader(f))
    except OSError as e:
        raise VinFileError(
            f"Could not open file {str(path)!r}: {e}",
            details={'path': str(path)}
        ) from e
    except (csv.Error, UnicodeDecodeError) as e:
        raise VinFileError(
            f"Could not read CSV file {str(path)!r}: {e}",
            details={'path': str(path)}
        ) from e

    vins = [row[0].strip() for row in rows if row and row[0].strip()]

    logger.info(f"Loaded VINs from CSV | path={path} | count={len(vins)}")
    return vins
