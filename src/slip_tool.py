"""
Command-line tool for verifying payment slips.

Usage:
    slipverify payload 0038000600000101030060217Bf870bf26685f5552... --account 123-4-56789-0 --bank 014
    slipverify image slip.png --amount 150.00 --cross-check
    slipverify decode slip.png
    slipverify init-config --config ./slipverify_config.ini
"""

import argparse
import json
import logging
import sys

from slip_config import SlipConfig, slip_config
from slip_payment.errors import SlipVerifyError
from slip_payment.models import VerificationResult
from slip_payment.slip_verifier import SlipVerifier

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def setup_logging(debug: bool = False):
    """Configure logging for the tool."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )


def print_details(result: VerificationResult):
    """Print a human-readable summary of a verification result."""
    data = result.data
    print(f"Valid:         {result.valid}")
    print(f"Is cached:     {result.is_cached}")
    print(f"Discriminator: {result.discriminator}")
    if data:
        print("\nTransaction Details:")
        print(f"  Reference:    {data.trans_ref}")
        print(f"  Amount:       {data.amount} {data.paid_local_currency or ''}".rstrip())
        print(f"  Date / Time:  {data.trans_date} {data.trans_time}")
        print(f"  Fee:          {data.trans_fee_amount}")
        print(f"  Country code: {data.country_code}")
        print(f"  Banks:        {data.sending_bank} -> {data.receiving_bank}")
        for label, party in (("Sender", data.sender), ("Receiver", data.receiver)):
            print(f"\n{label}:")
            print(f"  Name:         {party.name} ({party.display_name})")
            print(f"  Account:      {party.account.value}")
            print(f"  Proxy:        {party.proxy.value}")
        print(f"\nRef1/2/3:      {data.ref1} / {data.ref2} / {data.ref3}")
        print(f"Merchant ID:   {data.to_merchant_id}")
    if result.quota:
        print(f"\nQuota:         {result.quota.usage}/{result.quota.limit} (cost {result.quota.cost})")
    if result.subscription:
        print(f"Subscription:  {result.subscription.id} (postpaid: {result.subscription.postpaid})")


def read_image_file(path: str) -> bytes:
    with open(path, 'rb') as image_file:
        return image_file.read()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="slipverify", description="Verify payment slips with the SlipVerify API")
    parser.add_argument("--config", help="Path to the .ini configuration file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, target_help in (("payload", "QR payload string"), ("image", "Path to a slip image")):
        sub = subparsers.add_parser(name, help=f"Verify and validate a slip from a {target_help.lower()}")
        sub.add_argument("target", help=target_help)
        sub.add_argument("--account", help="Expected receiving account (defaults to config)")
        sub.add_argument("--bank", help="Expected receiving bank code (defaults to config)")
        sub.add_argument("--amount", help="Expected amount")
        sub.add_argument("--cross-check", action="store_true",
                         help="Also check the merchant account and amount encoded in the QR payload")
        sub.add_argument("--json", action="store_true", help="Print the result as JSON")

    decode = subparsers.add_parser("decode", help="Only read the QR payload from a slip image")
    decode.add_argument("target", help="Path to a slip image")

    subparsers.add_parser("init-config", help="Write the default configuration file")
    return parser


def main(argv=None, verifier: SlipVerifier | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)
    config = SlipConfig(args.config) if args.config else slip_config

    if args.command == "init-config":
        config.save_config()
        print(f"Configuration written to {config.config_path}")
        return EXIT_OK

    verifier = verifier if verifier else SlipVerifier(config_source=config)

    try:
        if args.command == "decode":
            print(verifier.read_qr_code(read_image_file(args.target)))
            return EXIT_OK

        if args.command == "image":
            payload = verifier.read_qr_code(read_image_file(args.target))
        else:
            payload = args.target
        result = verifier.verify_slip(payload)
    except (SlipVerifyError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    # Bank slip mini-QR payloads have no merchant template (tag 30)
    cross_check_payload = payload if args.cross_check else None
    outcome = verifier.validate_slip(result, cross_check_payload, expected_account=args.account,
                                     expected_bank=args.bank, expected_amount=args.amount)
    if args.json:
        print(json.dumps({
            "result": result.to_dict(),
            "validation": {"isValid": outcome.is_valid, "error": outcome.error,
                           "reason": outcome.reason.value if outcome.reason else None},
        }, indent=2, ensure_ascii=False))
    else:
        print_details(result)
        print("\nValidation successful!" if outcome.is_valid else f"\nValidation failed: {outcome.error}")
    return EXIT_OK if outcome.is_valid else EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
