"""Entry point: python -m fritzcheck."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import NoReturn

from fritzcheck.checks.models import CheckResult

logger = logging.getLogger("fritzcheck")


class UsageError(Exception):
    """The command line could not be parsed."""


class PluginArgumentParser(argparse.ArgumentParser):
    """Argument parser that raises on usage errors instead of exiting with 2.

    Exit code 2 means CRITICAL to a monitoring system; usage errors are
    reported as UNKNOWN by the caller.
    """

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = PluginArgumentParser(
        prog="fritzcheck",
        description="Monitoring plugin for FRITZ!Box link bandwidth (TR-064)",
    )
    parser.add_argument("--config", default=None,
                        help="Path to configuration YAML file")
    parser.add_argument("-H", "--hostname", help="Router hostname or address")
    parser.add_argument("-P", "--port", type=int, help="TR-064 port")
    parser.add_argument("-u", "--username", help="TR-064 username")
    parser.add_argument("-p", "--password",
                        help="TR-064 password (or set FRITZCHECK_PASSWORD)")
    parser.add_argument("-m", "--method",
                        help="Check method, e.g. downstream_max, downstream_usage")
    parser.add_argument("-M", "--modelgroup",
                        help="Model group: DSL or anything else for cable/fibre")
    parser.add_argument("-t", "--timeout", type=float,
                        help="Seconds to wait for each response")
    parser.add_argument("--divisor-max", dest="divisor_max", type=float,
                        help="Divisor applied to the maximum rate")
    parser.add_argument("--divisor-current", dest="divisor_current", type=float,
                        help="Divisor applied to the current rate in bit/s")
    parser.add_argument("-w", "--warning", help="Warning threshold range")
    parser.add_argument("-c", "--critical", help="Critical threshold range")
    parser.add_argument("--scheme", choices=["http", "https"], default=None)
    parser.add_argument("--verify-tls", dest="verify_tls", action="store_true",
                        default=None, help="Verify the router's TLS certificate")
    parser.add_argument("-d", "--debug", action="store_true", default=None,
                        help="Trace requests and responses on stderr")
    return parser


def run(argv: list[str] | None = None) -> CheckResult:
    try:
        args = build_parser().parse_args(argv)
    except UsageError as exc:
        return CheckResult.unknown(f"Invalid arguments: {exc}")

    import yaml

    from fritzcheck.app import Application, setup_logging
    from fritzcheck.config.settings import apply_overrides, load_config

    setup_logging(debug=bool(args.debug))

    overrides = vars(args)
    config_path = overrides.pop("config")
    try:
        settings = apply_overrides(load_config(config_path), **overrides)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.debug("Configuration failed", exc_info=True)
        return CheckResult.unknown(f"Invalid configuration: {exc}")

    try:
        return asyncio.run(Application(settings).run())
    except Exception as exc:
        logger.exception("Probe failed unexpectedly")
        return CheckResult.unknown(str(exc) or exc.__class__.__name__)


def main(argv: list[str] | None = None) -> None:
    result = run(argv)
    sys.stdout.write(result.status_line() + "\n")
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
