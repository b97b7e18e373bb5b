"""
Local trust checks for a slip the inquiry service has already verified.

The service tells us a slip is genuine; these checks decide whether it is proof
of payment *to us*: not reused, recent, paid into the expected account and bank,
and optionally for the expected amount.

Checks run in a fixed order and the first failure wins, so a slip that is both
invalid and cached is reported as invalid.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable

from slip_validators import DEFAULT_MIN_MATCHING_DIGITS, amounts_equal, check_bank_account
from .models import ValidationOutcome, ValidationReason, VerificationResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_SLIP_AGE = timedelta(hours=24)
TRANSACTION_TIMESTAMP_FORMAT = "%Y%m%d %H:%M:%S"

Check = Callable[[], ValidationOutcome]


def parse_transaction_timestamp(trans_date: str, trans_time: str) -> datetime:
    """Combines YYYYMMDD and HH:mm:ss into a naive local datetime. Raises ValueError/TypeError."""
    trans_date, trans_time = trans_date.strip(), trans_time.strip()
    # strptime accepts unpadded fields, so "2026117" would otherwise parse
    if len(trans_date) != 8 or not trans_date.isdigit() or len(trans_time) != 8:
        raise ValueError(f"Malformed transaction timestamp: {trans_date!r} {trans_time!r}")
    return datetime.strptime(f"{trans_date} {trans_time}", TRANSACTION_TIMESTAMP_FORMAT)



def is_old_slip(trans_date: str, trans_time: str, now: datetime | None = None, max_age: timedelta = DEFAULT_MAX_SLIP_AGE) -> bool:
    """
    True if the transaction is not strictly newer than `now - max_age`.

    Compared against the local clock, not the service's. Unparsable dates count
    as old.
    """
    try:
        transaction_at = parse_transaction_timestamp(trans_date, trans_time)
    except (ValueError, TypeError, AttributeError):
        return True
    now = now if now is not None else datetime.now()
    return not transaction_at > now - max_age


def check_valid(result: VerificationResult) -> ValidationOutcome:
    if not result.valid:
        return ValidationOutcome.failure(ValidationReason.INVALID_SLIP)
    return ValidationOutcome.success()


def check_not_cached(result: VerificationResult) -> ValidationOutcome:
    if result.is_cached:
        return ValidationOutcome.failure(ValidationReason.ALREADY_USED)
    return ValidationOutcome.success()


def check_freshness(result: VerificationResult, now: datetime | None = None, max_age: timedelta = DEFAULT_MAX_SLIP_AGE) -> ValidationOutcome:
    data = result.data
    if data is None or is_old_slip(data.trans_date, data.trans_time, now=now, max_age=max_age):
        return ValidationOutcome.failure(ValidationReason.EXPIRED)
    return ValidationOutcome.success()


def check_receiver_account(result: VerificationResult, expected_account: str, min_matching_digits: int = DEFAULT_MIN_MATCHING_DIGITS) -> ValidationOutcome:
    receiver_account = result.data.receiver.account.value if result.data else None
    if not receiver_account or not check_bank_account(expected_account, receiver_account, min_matching_digits):
        return ValidationOutcome.failure(ValidationReason.INVALID_ACCOUNT)
    return ValidationOutcome.success()


def check_receiving_bank(result: VerificationResult, expected_bank: str) -> ValidationOutcome:
    receiving_bank = result.data.receiving_bank if result.data else None
    if receiving_bank != expected_bank:
        return ValidationOutcome.failure(ValidationReason.INVALID_BANK)
    return ValidationOutcome.success()


def check_amount(result: VerificationResult, expected_amount) -> ValidationOutcome:
    amount = result.data.amount if result.data else None
    if not amounts_equal(expected_amount, amount):
        return ValidationOutcome.failure(ValidationReason.AMOUNT_MISMATCH)
    return ValidationOutcome.success()


def run_checks(checks: list[Check]) -> ValidationOutcome:
    """Runs checks in order and returns the first failure, or success."""
    for check in checks:
        outcome = check()
        if not outcome.is_valid:
            return outcome
    return ValidationOutcome.success()


def validate_slip(
    result: VerificationResult,
    expected_account: str,
    expected_bank: str,
    expected_amount=None,
    *,
    now: datetime | None = None,
    max_age: timedelta = DEFAULT_MAX_SLIP_AGE,
    min_matching_digits: int = DEFAULT_MIN_MATCHING_DIGITS,
) -> ValidationOutcome:
    """
    Decides whether a verified slip is acceptable proof of payment.

    Args:
        result: What the inquiry service returned for the slip
        expected_account: Our account number; may contain dashes
        expected_bank: Our bank code, e.g. "014"
        expected_amount: If given, the slip amount must equal it numerically
        now: Reference time for the freshness check (defaults to the local clock)
        max_age: How old a slip may be
        min_matching_digits: Revealed digits that must agree with our account

    Returns:
        ValidationOutcome carrying the first failed check's reason, if any
    """
    checks: list[Check] = [
        lambda: check_valid(result),
        lambda: check_not_cached(result),
        lambda: check_freshness(result, now=now, max_age=max_age),
        lambda: check_receiver_account(result, expected_account, min_matching_digits),
        lambda: check_receiving_bank(result, expected_bank),
    ]
    if expected_amount is not None:
        checks.append(lambda: check_amount(result, expected_amount))

    outcome = run_checks(checks)
    if not outcome.is_valid:
        logger.info(f"Slip rejected: {outcome.reason.value}")
    return outcome
