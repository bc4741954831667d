"""
Command-line interface for checking M-Pesa connectivity and credentials.
"""

from __future__ import annotations

import argparse
import logging
from typing import Iterable, Sequence, Tuple

from .api import ConfigError, create_client, load_client_config
from .core.environment import Environment
from .core.errors import MpesaError


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mpesa-client",
        description="Check M-Pesa gateway credentials or generate a security credential",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing MPESA_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument(
        "--security-credential",
        action="store_true",
        help="Print the encrypted initiator password instead of checking the gateway",
    )
    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_client_config(env_file=args.env_file, overrides=overrides)
        client = create_client(config=config)
    except (KeyError, ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    with client:
        if args.security_credential:
            if (
                config.environment_name is Environment.PRODUCTION
                and client.uses_default_initiator_password()
            ):
                logging.warning(
                    "No initiator password configured; encrypting the sandbox "
                    "test password for production. Set MPESA_INITIATOR_PASSWORD."
                )
            try:
                credential = client.security_credential()
            except MpesaError as exc:
                logging.error("Unable to generate security credential: %s", exc)
                return 1
            print(credential)
            return 0

        logging.info("Authenticating against %s", client.base_url)
        if not client.is_connected():
            logging.error("Unable to authenticate with the configured consumer credentials")
            return 1

    logging.info("Consumer credentials accepted by %s", config.environment_name.value)
    return 0
