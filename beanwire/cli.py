#!/usr/bin/env python3

"""
Context Driver

Loads a container description, resolves the requested entries, prints them
and shuts the context down, either right away or once a shutdown signal has
closed it.

Usage:
    beanwire CONFIG [NAME ...] [--wait-for-close] [--exit-zero] [--log-level LEVEL]

Exit status: 0 on success, 1 if any requested name failed to resolve,
2 if the configuration could not be loaded or wired.
"""

import argparse
import logging
import sys
from typing import Callable, List, Mapping, Optional, Sequence

from .config import load_config
from .lifecycle import LifecycleController
from .registry import Registry
from .settings import RuntimeSettings, VALID_LOG_LEVELS, setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RESOLUTION_FAILED = 1
EXIT_STARTUP_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="beanwire",
        description="Wire a container from CONFIG and print the requested entries"
    )
    parser.add_argument(
        "config",
        help="JSON configuration file or provider reference 'module:attribute'"
    )
    parser.add_argument(
        "names",
        nargs="*",
        help="Entry names to resolve and print"
    )
    parser.add_argument(
        "--wait-for-close",
        help="Block until a shutdown signal has closed the context",
        action="store_true",
        default=None
    )
    parser.add_argument(
        "--exit-zero",
        help="Finish with an explicit exit(0) after normal completion",
        action="store_true",
        default=None
    )
    parser.add_argument(
        "--log-level",
        help="Logging level",
        default=None,
        choices=VALID_LOG_LEVELS
    )
    return parser


def describe_entry(name: str, instance: object) -> str:
    return f"bean '{name}' = '{instance}'  ({type(instance)})"


def resolve_and_print(registry: Registry,
                      names: Sequence[str],
                      out: Callable[[str], None] = print) -> List[str]:
    """Print every requested entry; returns the names that failed.

    A failed lookup is reported and the remaining names are still resolved.
    """
    failed: List[str] = []
    for name in names:
        result = registry.resolve(name)
        if result.is_success():
            out(describe_entry(name, result.get_value()))
        else:
            logger.error(f"Cannot resolve '{name}': {result.get_error()}")
            print(f"error: {result.get_error()}", file=sys.stderr)
            failed.append(name)
    return failed


def run(args: argparse.Namespace, settings: RuntimeSettings) -> int:
    """Load, start, print and close; returns the exit status"""
    logger.info(f"Loading context from '{args.config}'")
    source_result = load_config(args.config)
    if source_result.is_failure():
        logger.error(f"❌ {source_result.get_error()}")
        print(f"error: {source_result.get_error()}", file=sys.stderr)
        return EXIT_STARTUP_FAILED

    with LifecycleController(name=args.config) as controller:
        start_result = controller.start(source_result.get_value())
        if start_result.is_failure():
            print(f"error: {start_result.get_error()}", file=sys.stderr)
            return EXIT_STARTUP_FAILED

        controller.register_shutdown_hook()

        logger.info(f"Getting beans: {list(args.names)}")
        failed = resolve_and_print(start_result.get_value(), args.names)

        if settings.wait_for_close:
            logger.info("Waiting for context shutdown ...")
            controller.await_close()
        else:
            controller.close_and_report()

    print("done")

    if failed:
        logger.error(f"Failed to resolve {len(failed)} of {len(args.names)} entries: {failed}")
        return EXIT_RESOLUTION_FAILED

    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None,
         environ: Optional[Mapping[str, str]] = None) -> int:
    """Driver entry point"""
    args = build_parser().parse_args(argv)
    settings = RuntimeSettings.from_env(environ).merge(
        wait_for_close=args.wait_for_close,
        exit_zero=args.exit_zero,
        logging_level=args.log_level
    )
    setup_logging(settings.logging_level)

    exit_code = run(args, settings)
    if exit_code == EXIT_OK and settings.exit_zero:
        logger.info("Explicit exit(0).")
        sys.exit(EXIT_OK)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
