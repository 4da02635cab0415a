"""CLI entry point for starboard_archive.archive.

Usage:
    python -m starboard_archive.archive                     # Settings from environment
    python -m starboard_archive.archive --config cfg.json   # JSON settings file
    python -m starboard_archive.archive --verbose           # Show more details
    python -m starboard_archive.archive --debug             # Show debug info

Exit codes: 0 on completion or interrupt, 1 on a fatal error, 2 on invalid
configuration.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from starboard_archive.archive.logger import logger
from starboard_archive.archive.run import run_archive
from starboard_archive.utils.logging import setup_logging

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CONFIG = 2


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Starboard Archive",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  STARBOARD_CHANNEL_SNOWFLAKE           Starboard channel ID (required)
  STARBOARD_STARTING_MESSAGE_SNOWFLAKE  Walk messages after this ID (required)
  DISCORD_TOKEN                         Bot token (required)
  OUTPUT_DIR                            Output directory (default: ./output)
  DOWNLOADS_SUBDIR                      Downloads subdirectory (default: downloads)
  DOWNLOADS_DELAY_MS                    Pause between downloads (default: 10)

Examples:
  python -m starboard_archive.archive
      Archive using settings from the environment or .env

  python -m starboard_archive.archive --config /path/to/config.json
      Layer a JSON settings file over the environment
        """,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Optional JSON settings file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output (DEBUG level)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with third-party library logs",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Optional file to write logs to",
    )

    args = parser.parse_args()

    if args.debug:
        log_level = logging.DEBUG
        debug_third_party = True
    elif args.verbose:
        log_level = logging.DEBUG
        debug_third_party = False
    else:
        log_level = logging.INFO
        debug_third_party = False

    setup_logging(
        level=log_level,
        log_file=args.log_file,
        debug_third_party=debug_third_party,
    )

    logger.info("Starting Starboard Archive")

    try:
        orchestrator = asyncio.run(run_archive(config_path=args.config))
    except ValidationError as e:
        logger.error(f"Invalid configuration:\n{e}")
        sys.exit(EXIT_CONFIG)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user, collection saved")
        sys.exit(EXIT_OK)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(EXIT_FATAL)

    if orchestrator.interrupted:
        logger.warning("Interrupted, collection saved")
    else:
        logger.success("Archive complete!")


if __name__ == "__main__":
    main()
