"""Main entry point for bundle-size."""

import logging
import sys

from .config.cli_config import CLIConfigManager
from .core.logging import setup_logging, get_logger
from .core.application import Application


def main() -> int:
    """Main entry point for the CLI."""
    try:
        cli_manager = CLIConfigManager()
        args = cli_manager.parse_args()

        setup_logging(level=args.log_level, format_type=args.log_format)
        logger = get_logger(__name__)
        logger.debug(f"Running bundle-size {args.command}")

        app = Application()
        return app.run(args)

    except KeyboardInterrupt:
        logger = get_logger(__name__)
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger = get_logger(__name__)
        if not logging.getLogger().handlers:
            setup_logging()
        logger.error(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
