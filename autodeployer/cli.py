"""
Command-line entry point

Exit codes: 0 every target succeeded, 1 at least one target failed,
2 configuration or fatal error.
"""

import argparse
import logging
import sys
from typing import List, Optional

from autodeployer.config import load_settings, log_dir_from_env
from autodeployer.errors import ConfigValidationError
from autodeployer.orchestrator.deployment_run import DeploymentRun
from autodeployer.reporting.observer import ConsoleObserver
from autodeployer.utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autodeployer",
        description="Run a script or install/repair/uninstall a package on many computers",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Settings file to load (default: .env in the working directory)",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Directory for the CSV report and log file (default: LOG_DIR or data/logs)",
    )
    parser.add_argument(
        "--pause",
        action="store_true",
        help="Wait for Enter before exiting",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show INFO log records on the console",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Fix Unicode encoding on Windows console
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore
        except AttributeError:
            pass

    observer = ConsoleObserver()
    log_dir = args.log_dir or log_dir_from_env()
    setup_logging(
        log_dir=log_dir,
        console_level=logging.INFO if args.verbose else logging.WARNING,
    )
    logger.info(f"Arguments: env_file={args.env_file}, log_dir={log_dir}")

    try:
        config = load_settings(env_file=args.env_file)
        result = DeploymentRun(config, log_dir=log_dir, observer=observer).execute()

    except ConfigValidationError as e:
        logger.critical(f"Invalid configuration: {e}")
        print(f"\nCONFIGURATION ERROR: {e}", file=sys.stderr)
        return 2

    except Exception as e:
        logger.critical(f"Fatal error: {type(e).__name__}: {e}", exc_info=True)
        print(f"\nFATAL ERROR: {type(e).__name__}: {e}", file=sys.stderr)
        return 2

    finally:
        if args.pause:
            input("Press Enter to exit...")

    if result.failure_count > 0:
        logger.warning("Deployment completed with failures")
        return 1

    logger.info("Deployment completed successfully")
    return 0
