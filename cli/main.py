"""Entry point for the interactive Teldrive shell."""

import os
import sys

from common.logging_config import setup_logging
from cli.commands import default_config_path
from cli.repl import repl_loop

DEBUG_FLAG = '--debug'


def main() -> None:
    """Configure logging for the shell and the driver, then run the REPL."""
    debug = DEBUG_FLAG in sys.argv
    if debug:
        sys.argv.remove(DEBUG_FLAG)
    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING')

    logger = setup_logging('cli', log_level=log_level)
    setup_logging('teldrive', log_level=log_level)

    logger.info(f"Teldrive shell starting [config={default_config_path()}, log_level={log_level}]")
    try:
        repl_loop()
    except Exception as e:
        logger.error(f"Teldrive shell crashed: {e}", exc_info=True)
        raise
    finally:
        logger.info("Teldrive shell stopped")


if __name__ == "__main__":
    main()
