################################################################################
# File Name: menu.py
# Purpose/Description: Interactive numbered menu over the vehicle operations
# Author: Michael Cornelison
# Creation Date: 2026-10-14
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-14    | M. Cornelison | Initial implementation
# 2026-10-16    | M. Cornelison | Loop until exit, CSV input for remove
# ================================================================================
################################################################################

"""
Interactive menu module.

Menu options:
    1. Get Vehicles in Compass
    2. Add a VIN to Compass
    3. Check the Consent for a VIN
    4. Check Compatibility for a VIN
    5. Get Last Reported Points for a VIN
    6. Get realtime data for a VIN
    7. Lock Vehicle
    8. Remove Vehicle (single VIN or CSV file)
    0. Exit

Operation errors are logged and the menu is shown again.
"""

import logging
from collections.abc import Callable
from typing import Any

from common.error_handler import BaseError, formatError
from compass.vehicle.csv_loader import readVinsFromCsv
from compass.vehicle.vin import VIN_LENGTH, decomposeVin, isValidVin, normalizeVin

from .operations import VehicleOperations

logger = logging.getLogger(__name__)


# ================================================================================
# Constants
# ================================================================================

EXIT_CHOICE = 0

MENU_OPTIONS = [
    (1, 'Get Vehicles in Compass'),
    (2, 'Add a VIN to Compass'),
    (3, 'Check the Consent for a VIN'),
    (4, 'Check Compatibility for a VIN'),
    (5, 'Get Last Reported Points for a VIN'),
    (6, 'Get realtime data for a VIN'),
    (7, 'Lock Vehicle'),
    (8, 'Remove Vehicle'),
    (EXIT_CHOICE, 'Exit'),
]

VIN_PROMPT = f"Enter a {VIN_LENGTH}-character VIN: "
VIN_OR_FILE_PROMPT = (
    f"Enter a {VIN_LENGTH}-character VIN, or a file name csv with multiple VINs (remove only): "
)


class MenuPrompt:
    """
    Numbered menu front end.

    Attributes:
        operations: VehicleOperations executing the chosen action
    """

    def __init__(
        self,
        operations: VehicleOperations,
        inputFunc: Callable[[str], str] = input,
        outputFunc: Callable[[str], Any] = print
    ):
        self.operations = operations
        self._input = inputFunc
        self._output = outputFunc

        self._handlers: dict[int, Callable[[], Any]] = {
            1: self.operations.listVehicles,
            2: lambda: self.operations.onboardVin(self.promptForVin()),
            3: lambda: self.operations.checkConsent(self.promptForVin()),
            4: lambda: self.operations.checkCompatibility(self.promptForVin()),
            5: lambda: self.operations.lastReportedPoints(self.promptForVin()),
            6: lambda: self.operations.streamRealtime(self.promptForVin()),
            7: lambda: self.operations.lockVehicle(self.promptForVin()),
            8: self._removeVehicles,
        }

    def run(self) -> None:
        """Show the menu until the operator exits or input ends."""
        while True:
            try:
                choice = self.promptForChoice()
                if choice == EXIT_CHOICE:
                    logger.info("Menu exit requested")
                    return
                self.dispatch(choice)
            except EOFError:
                logger.info("Input closed, leaving menu")
                return

    def promptForChoice(self) -> int:
        """
        Show the options and read a valid choice.

        Returns:
            Chosen option number
        """
        while True:
            self._output("Please choose an option:")
            for number, label in MENU_OPTIONS:
                self._output(f"{number}. {label}")

            raw = self._input("Enter your choice: ").strip()
            try:
                choice = int(raw)
            except ValueError:
                self._output(f"Invalid input. Please enter a number between {EXIT_CHOICE} and 8.")
                continue

            if choice != EXIT_CHOICE and choice not in self._handlers:
                self._output("Invalid choice. Please select a valid option.")
                continue

            return choice

    def dispatch(self, choice: int) -> bool:
        """
        Run the operation for a menu choice.

        Args:
            choice: Option number (1-8)

        Returns:
            True if the operation completed without error
        """
        handler = self._handlers.get(choice)
        if handler is None:
            self._output("Invalid choice. Please select a valid option.")
            return False

        try:
            handler()
        except EOFError:
            raise
        except BaseError as e:
            logger.error(f"Operation failed | choice={choice} | {formatError(e)}")
            return False
        except Exception as e:
            logger.error(f"Operation failed | choice={choice} | {formatError(e)}", exc_info=True)
            return False

        return True

    def promptForVin(self, allowFile: bool = False) -> str:
        """
        Read a VIN from the operator, re-prompting until it is valid.

        Input is trimmed and upper-cased. With allowFile, input that is not
        17 characters long is returned untouched as a CSV file name.

        Args:
            allowFile: Accept a CSV file name instead of a VIN

        Returns:
            Valid VIN, or a file name when allowFile is set
        """
        prompt = VIN_OR_FILE_PROMPT if allowFile else VIN_PROMPT

        while True:
            raw = self._input(prompt).strip()
            vin = normalizeVin(raw)

            if len(vin) != VIN_LENGTH:
                if allowFile and raw:
                    self._output("File name recognized")
                    return raw
                self._output(f"A VIN must be {VIN_LENGTH} characters. Please try again.")
                continue

            if not isValidVin(vin):
                self._output(
                    "Invalid VIN. It should only contain alphanumeric characters "
                    "(excluding I, O and Q). Please try again."
                )
                continue

            self._output(f"Processing VIN: {vin}")
            parts = decomposeVin(vin)
            self._output("Extracted VIN components:")
            self._output(f"  WMI (Manufacturer): {parts.wmi}")
            self._output(f"  VDS (Descriptor): {parts.vds}")
            self._output(f"  VIS (Identifier): {parts.vis}")
            return vin

    def _removeVehicles(self) -> None:
        value = self.promptForVin(allowFile=True)
        if isValidVin(value):
            vins = [value]
        else:
            vins = readVinsFromCsv(value)
        self.operations.removeVehicles(vins)
