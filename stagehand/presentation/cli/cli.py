"""
CLI Module

Architectural Intent:
- Command-line interface for Stagehand
- Entry point for all operator interactions
- Delegates to application use cases via composition root
- Acquires credentials once per run; they are never logged
- Supports --verbose/--debug flags for diagnostic log level control

Exit Codes:
- 0: run completed (step problems are reported in the summary, not here)
- 1: run aborted at validation, or a command failed
- 130: interrupted by the operator
"""

import argparse
import asyncio
import getpass
import logging
import os
import sys
import traceback
from typing import Optional

from stagehand.application.use_cases.summarize_log import SummarizeRunLog
from stagehand.application.workflow import build_update_workflow
from stagehand.composition_root import create_container
from stagehand.domain.exceptions import LogTargetUnavailableError
from stagehand.domain.value_objects.credentials import Credentials
from stagehand.infrastructure.config import StagehandConfig, load_config
from stagehand.infrastructure.logging import configure_logging


def read_credentials(username: Optional[str]) -> Credentials:
    """Collect the run's principal from flag/env, prompting for the secret."""
    username = username or os.environ.get("STAGEHAND_USERNAME")
    if not username:
        username = input("Username (DOMAIN\\user): ").strip()
    secret = os.environ.get("STAGEHAND_PASSWORD")
    if secret is None:
        secret = getpass.getpass(f"Password for {username}: ")
    return Credentials(username=username, secret=secret)


def _config_log_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.WARNING


def _load_config(path: str, verbose: bool) -> StagehandConfig:
    config = load_config(path)
    if not verbose:
        configure_logging(level=_config_log_level(config.log_level))
    return config


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Stagehand: guided multi-host tax file update"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output with tracebacks"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Run the full update workflow")
    run_parser.add_argument(
        "--config", "-c", default="stagehand.json", help="Path to settings file"
    )
    run_parser.add_argument("--username", "-u", help="Account for remote actions")

    plan_parser = subparsers.add_parser(
        "plan", help="Show the ordered steps without running them"
    )
    plan_parser.add_argument(
        "--config", "-c", default="stagehand.json", help="Path to settings file"
    )

    validate_parser = subparsers.add_parser(
        "validate", help="Run only the pre-flight validation gate"
    )
    validate_parser.add_argument(
        "--config", "-c", default="stagehand.json", help="Path to settings file"
    )
    validate_parser.add_argument("--username", "-u", help="Account for remote actions")

    summarize_parser = subparsers.add_parser(
        "summarize", help="Summarize an existing run log"
    )
    summarize_parser.add_argument("log_file", help="Path to a stagehand_*.log file")

    return parser


async def async_main():
    parser = _build_parser()
    args = parser.parse_args()

    if args.debug:
        configure_logging(level=logging.DEBUG)
    elif args.verbose:
        configure_logging(level=logging.INFO)
    else:
        configure_logging(level=logging.WARNING)

    verbose = args.verbose or args.debug

    if args.command == "summarize":
        try:
            summary = SummarizeRunLog().execute(args.log_file)
        except LogTargetUnavailableError as e:
            print(f"[-] Cannot summarize: {e}")
            sys.exit(1)
        print(summary.render())
        return

    if args.command == "plan":
        try:
            config = _load_config(args.config, verbose)
            steps = build_update_workflow(config)
        except ValueError as e:
            print(f"[-] Invalid settings: {e}")
            sys.exit(1)
        print(f"[*] {len(steps)} steps:")
        for step in steps:
            print(f"  {step.ordinal}. [{step.kind.value}] {step.label}")
        return

    if args.command in ("run", "validate"):
        try:
            config = _load_config(args.config, verbose)
            credentials = read_credentials(args.username)
            container = create_container(config, credentials)
            if args.command == "validate":
                print("[*] Running validation gate...")
                passed = await container.run_update.validate()
                if passed:
                    print("[+] Validation passed.")
                else:
                    print("[-] Validation failed.")
                    sys.exit(1)
                return

            print(f"[*] Starting tax file update from {config.hosts.primary}...")
            report = await container.run_update.execute()
        except KeyboardInterrupt:
            print("\n[*] Interrupted by operator.")
            sys.exit(130)
        except ValueError as e:
            print(f"[-] Invalid settings: {e}")
            if verbose:
                traceback.print_exc()
            sys.exit(1)
        except Exception as e:
            print(f"[-] Update Failed: {e}")
            if verbose:
                traceback.print_exc()
            sys.exit(1)

        if report.aborted:
            print("[-] Run aborted at validation.")
            sys.exit(1)
        unclean = len(report.run.unclean_outcomes)
        if unclean:
            print(f"[!] Run completed; {unclean} step(s) reported problems.")
        else:
            print("[+] Run completed.")
        return

    parser.print_help()


def main():
    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        print("\n[*] Interrupted by operator.")
        sys.exit(130)


if __name__ == "__main__":
    main()
