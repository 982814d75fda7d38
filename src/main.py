################################################################################
# File Name: main.py
# Purpose/Description: Main application entry point
# Author: Michael Cornelison
# Creation Date: 2026-01-21
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-01-21    | M. Cornelison | Initial implementation
# 2026-10-15    | M. Cornelison | Compass stream daemon and interactive menu modes
# ================================================================================
################################################################################

"""
Main application entry point.

This module provides the main entry point for the application with:
- CLI argument parsing
- Configuration loading and validation
- Authentication with the Compass API
- Stream daemon mode (all registered vehicles, reconnects until signalled)
- Interactive menu mode (one-shot vehicle operations)
- Error handling and exit codes

Usage:
    python src/main.py --help
    python src/main.py stream --config path/to/config.json
    python src/main.py menu
    python src/main.py --dry-run
"""

import argparse
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

# Resolve project paths relative to this script (not CWD)
srcPath = Path(__file__).resolve().parent
projectRoot = srcPath.parent
if str(srcPath) not in sys.path:
    sys.path.insert(0, str(srcPath))

DEFAULT_CONFIG = str(srcPath / 'compass_config.json')
DEFAULT_ENV = str(projectRoot / '.env')

from common.config_validator import ConfigValidationError, ConfigValidator
from common.error_handler import AuthenticationError, ConfigurationError, handleError
from common.logging_config import getLogger, setupLogging
from common.secrets_loader import loadConfigWithSecrets
from compass import __version__
from compass.api.client import CompassApiClient
from compass.cli.menu import MenuPrompt
from compass.cli.operations import VehicleOperations
from compass.daemon import StreamDaemon
from compass.session.authenticator import SessionAuthenticator
from compass.settings import ClientSettings
from compass.vehicle.exceptions import RegistryError

# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_RUNTIME_ERROR = 2
EXIT_UNKNOWN_ERROR = 3
EXIT_AUTH_ERROR = 4

MODE_STREAM = 'stream'
MODE_MENU = 'menu'


def parseArgs() -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description='Compass realtime vehicle telemetry client',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py                    Stream all registered vehicles
  python main.py menu               Interactive vehicle operations
  python main.py --config my.json   Run with custom config
  python main.py --dry-run          Validate config without connecting
  python main.py --verbose          Run with debug logging
        '''
    )

    parser.add_argument(
        'mode',
        nargs='?',
        choices=[MODE_STREAM, MODE_MENU],
        default=MODE_STREAM,
        help='stream: long-running telemetry daemon (default); menu: interactive operations'
    )

    parser.add_argument(
        '--config', '-c',
        default=DEFAULT_CONFIG,
        help='Path to configuration file (default: src/compass_config.json)'
    )

    parser.add_argument(
        '--env-file', '-e',
        default=DEFAULT_ENV,
        help='Path to environment file (default: .env)'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Validate configuration without connecting'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose (debug) logging'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser.parse_args()


def loadConfiguration(
    configPath: str,
    envPath: str | None = None
) -> dict:
    """
    Load and validate configuration.

    Args:
        configPath: Path to configuration file
        envPath: Path to environment file

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigurationError: If configuration is invalid
    """
    logger = getLogger(__name__)

    try:
        # Load config with secret resolution
        config = loadConfigWithSecrets(configPath, envPath)

        # Validate configuration
        validator = ConfigValidator()
        config = validator.validate(config)

        logger.info(f"Configuration loaded from {configPath}")
        return config

    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file not found: {e}") from e
    except ValueError as e:
        raise ConfigurationError(f"Configuration file is not valid JSON: {e}") from e
    except ConfigValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


def configureLogging(config: dict, verbose: bool = False) -> None:
    """
    Re-apply logging setup from the loaded configuration.

    Args:
        config: Validated configuration dictionary
        verbose: --verbose overrides the configured level
    """
    loggingConfig = config.get('logging', {})
    setupLogging(
        level='DEBUG' if verbose else loggingConfig.get('level', 'INFO'),
        logFile=loggingConfig.get('file'),
        enablePIIMasking=loggingConfig.get('maskPII', True)
    )


def runWorkflow(
    settings: ClientSettings,
    mode: str = MODE_STREAM,
    dryRun: bool = False,
    clientFactory: Callable[[ClientSettings], Any] | None = None,
    inputFunc: Callable[[str], str] = input
) -> int:
    """
    Authenticate and run the selected front end.

    Args:
        settings: Client settings
        mode: MODE_STREAM or MODE_MENU
        dryRun: If True, validate settings but don't connect
        clientFactory: Creates the API client (for testing)
        inputFunc: Input function for the menu (for testing)

    Returns:
        Exit code: 0 for clean shutdown, non-zero for errors

    Raises:
        AuthenticationError: If the Compass API rejects the API key
        ConfigurationError: If menu mode has no consent email
        RegistryError: If the vehicle list cannot be fetched
    """
    logger = getLogger(__name__)

    if mode == MODE_MENU:
        settings.requireConsentEmail()

    if dryRun:
        logger.info("DRY RUN MODE - Validating config without connecting")
        logger.info(f"Configuration is valid | mode={mode} | target={settings.target}")
        return EXIT_SUCCESS

    logger.info(f"Starting workflow | mode={mode} | environment={settings.environment}")

    client = (clientFactory or CompassApiClient)(settings)
    try:
        client.connect()

        authenticator = SessionAuthenticator(client, settings.apiKey)
        session = authenticator.authenticate()

        if mode == MODE_MENU:
            operations = VehicleOperations(client, session, settings)
            MenuPrompt(operations, inputFunc=inputFunc).run()
            return EXIT_SUCCESS

        return runStreamDaemon(settings, client, session, authenticator)

    finally:
        client.close()
        logger.info("Workflow completed")


def runStreamDaemon(
    settings: ClientSettings,
    client: Any,
    session: Any,
    authenticator: SessionAuthenticator
) -> int:
    """
    Run the stream daemon with signal handlers installed.

    Returns:
        EXIT_SUCCESS when stopped by signal, EXIT_RUNTIME_ERROR if streaming gave up
    """
    logger = getLogger(__name__)

    daemon = StreamDaemon(settings, client, session, authenticator)

    # Register signal handlers BEFORE streaming starts
    logger.debug("Registering signal handlers...")
    daemon.registerSignalHandlers()

    try:
        stoppedOnRequest = daemon.run()
    finally:
        logger.debug("Restoring signal handlers...")
        daemon.restoreSignalHandlers()

    if stoppedOnRequest:
        return EXIT_SUCCESS

    logger.error("Stream supervisor gave up after repeated failures")
    return EXIT_RUNTIME_ERROR


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    # Parse arguments
    args = parseArgs()

    # Setup logging
    logLevel = 'DEBUG' if args.verbose else 'INFO'
    setupLogging(level=logLevel)
    logger = getLogger(__name__)

    logger.info("=" * 60)
    logger.info(f"Compass client starting | mode={args.mode}")
    logger.info("=" * 60)

    try:
        # Load configuration
        config = loadConfiguration(args.config, args.env_file)
        configureLogging(config, verbose=args.verbose)
        settings = ClientSettings.fromConfig(config)

        exitCode = runWorkflow(settings, mode=args.mode, dryRun=args.dry_run)

        if exitCode == EXIT_SUCCESS:
            logger.info("Application completed successfully")
        else:
            logger.warning(f"Application completed with exit code {exitCode}")

        return exitCode

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR

    except AuthenticationError as e:
        logger.error(f"Authentication failed: {e}")
        return EXIT_AUTH_ERROR

    except RegistryError as e:
        logger.error(f"Vehicle registry error: {e}")
        return EXIT_RUNTIME_ERROR

    except KeyboardInterrupt:
        logger.warning("Application interrupted by user")
        return EXIT_RUNTIME_ERROR

    except Exception as e:
        handleError(e, reraise=False)
        logger.error(f"Unexpected error: {e}")
        return EXIT_UNKNOWN_ERROR

    finally:
        logger.info("=" * 60)
        logger.info("Application finished")
        logger.info("=" * 60)


if __name__ == '__main__':
    sys.exit(main())
