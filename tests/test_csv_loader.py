################################################################################
# File Name: test_csv_loader.py
# Purpose/Description: Tests for loading VIN lists from CSV files
# Author: Ralph Agent
# Creation Date: 2026-10-13
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-13    | Ralph Agent  | Initial implementation
# ================================================================================
################################################################################

"""
Tests for the compass.vehicle.csv_loader module.

Run with:
    pytest tests/test_csv_loader.py -v
"""

import sys
from pathlib import Path

import pytest

srcPath = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(srcPath))

from compass.vehicle.csv_loader import readVinsFromCsv
from compass.vehicle.exceptions import VinFileError


class TestReadVinsFromCsv:
    """Tests for readVinsFromCsv."""

    def test_readVinsFromCsv_validFile_returnsFirstColumn(self, vinCsvFile: Path):
        """
        Given: CSV with VINs in the first column, a blank row and padding
        When: readVinsFromCsv() is called
        Then: Returns the stripped first column of non-empty rows
        """
        result = readVinsFromCsv(vinCsvFile)

        assert result == ['1C4RJFAG0FC625797', '1FTFW1ET5DFC10312']

    def test_readVinsFromCsv_strPath_accepted(self, vinCsvFile: Path):
        """
        Given: Path passed as a string
        When: readVinsFromCsv() is called
        Then: File is read
        """
        assert len(readVinsFromCsv(str(vinCsvFile))) == 2

    def test_readVinsFromCsv_invalidRows_notFiltered(self, tmp_path: Path):
        """
        Given: CSV with a header and a malformed VIN
        When: readVinsFromCsv() is called
        Then: Rows are returned as-is for the caller to validate
        """
        csvFile = tmp_path / 'vins.csv'
        csvFile.write_text('vin\nBADVIN\n1C4RJFAG0FC625797\n', encoding='utf-8')

        result = readVinsFromCsv(csvFile)

        assert result == ['vin', 'BADVIN', '1C4RJFAG0FC625797']

    def test_readVinsFromCsv_emptyFile_returnsEmptyList(self, tmp_path: Path):
        """
        Given: Empty CSV
        When: readVinsFromCsv() is called
        Then: Returns empty list
        """
        csvFile = tmp_path / 'empty.csv'
        csvFile.write_text('', encoding='utf-8')

        assert readVinsFromCsv(csvFile) == []

    def test_readVinsFromCsv_missingFile_raisesVinFileError(self, tmp_path: Path):
        """
        Given: Path that does not exist
        When: readVinsFromCsv() is called
        Then: Raises VinFileError with the path in details
        """
        missing = tmp_path / 'missing.csv'

        with pytest.raises(VinFileError) as excInfo:
            readVinsFromCsv(missing)

        assert excInfo.value.details['path'] == str(missing)
        assert 'Could not open file' in str(excInfo.value)

    def test_readVinsFromCsv_binaryFile_raisesVinFileError(self, tmp_path: Path):
        """
        Given: File that is not valid UTF-8
        When: readVinsFromCsv() is called
        Then: Raises VinFileError
        """
        binFile = tmp_path / 'vins.csv'
        binFile.write_bytes(b'\xff\xfe\x00\x81\x82')

        with pytest.raises(VinFileError):
            readVinsFromCsv(binFile)
