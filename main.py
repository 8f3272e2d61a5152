#!/usr/bin/env python3
"""
Main entry point for the shell bootstrap.

Run with no arguments at session start. Named operations can be run
directly (``run <operation>``) or with administrative rights
(``admin <operation>``).
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

# Load environment variables from .env file
load_dotenv()

from config.catalog import default_catalog
from config.settings import IS_WINDOWS, Settings
from src.core.context import ProcessContext
from src.core.errors import EXIT_USAGE, BootstrapError
from src.core.orchestrator import BootstrapOrchestrator
from src.core.privilege import ELEVATED_FLAG
from src.models.catalog import Catalog
from src.utils.logging import setup_root_logger


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Configure the shell session and install developer tools"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file (JSON format)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from settings, INFO)"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log commands and writes instead of performing them"
    )

    parser.add_argument(
        "--user-dir",
        type=Path,
        help="User-scoped profile directory (default: from settings)"
    )

    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run a named operation")
    run_parser.add_argument("operation", help="Operation name")
    run_parser.add_argument("operation_args", nargs="*", help="Operation arguments")
    run_parser.add_argument(
        ELEVATED_FLAG,
        dest="elevated",
        action="store_true",
        help=argparse.SUPPRESS
    )

    admin_parser = subparsers.add_parser("admin", help="Run a named operation with administrative rights")
    admin_parser.add_argument("operation", help="Operation name")
    admin_parser.add_argument("operation_args", nargs="*", help="Operation arguments")

    subparsers.add_parser("list", help="List operations and catalog tools")

    return parser.parse_args(argv)


def load_config(args):
    """
    Load settings and catalog from a config file and command line.

    The config file holds settings at the top level and an optional
    "catalog" section that replaces the default catalog.

    Returns:
        Tuple of (Settings, Catalog)
    """
    config_data = {}
    if args.config:
        if not args.config.exists():
            raise ValueError(f"Config file not found: {args.config}")
        with open(args.config, encoding="utf-8") as f:
            config_data = json.load(f)

    catalog_data = config_data.pop("catalog", None)

    # Override with command line args
    if args.dry_run:
        config_data["dry_run"] = True
    if args.log_level:
        config_data.setdefault("logging", {})["level"] = args.log_level
    if args.user_dir:
        config_data.setdefault("profile", {})["user_dir"] = str(args.user_dir)

    settings = Settings(**config_data)
    catalog = Catalog(**catalog_data) if catalog_data is not None else default_catalog()
    return settings, catalog


def relaunch_command(args, settings: Settings) -> List[str]:
    """Argv that starts this entry point again with the same global options.

    The resolved user profile directory is passed explicitly: an elevated
    child may run with another home directory.
    """
    command = [sys.executable, str(Path(__file__).resolve())]
    if args.config:
        command += ["--config", str(args.config.resolve())]
    if args.log_level:
        command += ["--log-level", args.log_level]
    if args.dry_run:
        command.append("--dry-run")
    command += ["--user-dir", str(settings.profile.user_dir.resolve())]
    return command


def print_listing(orchestrator: BootstrapOrchestrator) -> None:
    print("Operations:")
    for op in orchestrator.registry.describe():
        name = f"{op.name} {op.usage}".strip()
        print(f"  {name:<24} {op.description}")
    print("Tools:")
    for tool in orchestrator.catalog.tools:
        flag = " (admin)" if tool.requires_elevation else ""
        print(f"  {tool.name:<24} {' '.join(tool.install_command)}{flag}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    setup_root_logger(None, args.log_level or "INFO")
    logger = logging.getLogger(__name__)

    try:
        settings, catalog = load_config(args)
    except (ValueError, ValidationError, json.JSONDecodeError) as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_USAGE

    elevated_child = getattr(args, "elevated", False)

    # The log file stays owned by the invoking user; a sudo child logs to
    # the console only.
    log_file = settings.logging.file_path
    if elevated_child and not IS_WINDOWS:
        log_file = None

    setup_root_logger(
        log_file,
        settings.logging.level,
        format_string=settings.logging.format,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count
    )
    logger.debug(f"Arguments: {vars(args)}")

    context = ProcessContext.from_current_process(elevated_child=elevated_child)
    orchestrator = BootstrapOrchestrator.from_settings(
        settings, catalog, context, relaunch_command(args, settings)
    )

    try:
        if args.command == "list":
            print_listing(orchestrator)
            return 0
        if args.command == "admin":
            return orchestrator.run_admin(args.operation, args.operation_args)
        if args.command == "run":
            return orchestrator.run(args.operation, args.operation_args)
        return orchestrator.run("startup")
    except BootstrapError as e:
        logger.error(str(e))
        return e.exit_code
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
