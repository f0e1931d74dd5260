"""
Main entry point for the batch converter.

This script configures logging, parses the command line and runs the requested
command against the batch file. Problems the batch converter knows about are
logged and turned into a non-zero exit status.
"""

import sys

from loguru import logger

from batch_converter.cli import get_args, run_command
from batch_converter.config.common import LOGGER_FORMAT
from batch_converter.domain.exceptions import BatchConverterException


# Configure the logger for initial setup.
# The level is overridden once the command-line arguments are known.
logger.remove()
logger.add(sys.stderr, level="INFO", format=LOGGER_FORMAT)


def main() -> int:
    """
    Parses the arguments, reconfigures the logger and runs the command.

    Returns:
        The process exit code.
    """
    args = get_args()

    logger.remove()
    logger.add(sys.stderr, level=args.log_level, format=LOGGER_FORMAT)
    logger.debug(f"Parsed arguments: {args}")

    try:
        return run_command(args)
    except BatchConverterException as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
