"""
Minimal script that uses the public API to send a B2C payment.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Tuple

from mpesa_client import ConfigError, MpesaError, create_client, load_client_config


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send a B2C payment using the SDK API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing MPESA_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument("--initiator", required=True, help="Initiator username")
    parser.add_argument("--amount", required=True, help="Amount to send")
    parser.add_argument(
        "--party-a",
        default="600981",
        help="Paying B2C short code (default: sandbox short code 600981)",
    )
    parser.add_argument("--party-b", required=True, help="Receiving phone number")
    parser.add_argument("--result-url", required=True, help="Result callback URL")
    parser.add_argument("--timeout-url", required=True, help="Queue timeout callback URL")
    parser.add_argument("--remarks", help="Optional remarks shown on the transaction")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    overrides = _build_overrides(args.set or ())

    try:
        config = load_client_config(env_file=args.env_file, overrides=overrides)
        client = create_client(config=config)
    except (KeyError, ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    logging.info("Sending %s to %s via %s", args.amount, args.party_b, client.base_url)

    builder = (
        client.b2c(args.initiator)
        .amount(args.amount)
        .party_a(args.party_a)
        .party_b(args.party_b)
        .result_url(args.result_url)
        .queue_timeout_url(args.timeout_url)
    )
    if args.remarks:
        builder.remarks(args.remarks)

    try:
        response = builder.send()
    except MpesaError as exc:
        logging.error("B2C payment failed: %s", exc)
        return 1
    finally:
        client.close()

    logging.info(
        "Payment accepted. ConversationID: %s, OriginatorConversationID: %s",
        response.conversation_id,
        response.originator_conversation_id,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
