"""
Tag-length-value parsing of slip QR payloads and structural cross-checks.

A payload is a run of records: 2-digit tag, 2-digit decimal length, then that
many characters of value. Template tags (merchant account information, additional
data) hold another run of records as their value.

Parsing never raises. It stops at the first record it cannot read and returns
what it has, so a tampered or truncated payload simply lacks the tags the
cross-checks need.
"""

import logging
from dataclasses import dataclass

from slip_validators import DEFAULT_MIN_MATCHING_DIGITS, amounts_equal, check_bank_account
from .models import ValidationOutcome, ValidationReason

logger = logging.getLogger(__name__)

HEADER_LENGTH = 4

MERCHANT_ACCOUNT_TAG = "30"
MERCHANT_ACCOUNT_ID_SUBTAG = "01"
AMOUNT_TAG = "54"

# EMVCo merchant account templates (26-51), additional data (62),
# language template (64) and unreserved templates (80-99)
TEMPLATE_TAGS = frozenset(
    [f"{tag:02d}" for tag in range(26, 52)]
    + ["62", "64"]
    + [f"{tag:02d}" for tag in range(80, 100)]
)


@dataclass(frozen=True)
class QRTag:
    tag: str
    length: int
    value: str
    children: tuple["QRTag", ...] = ()

    def serialize(self) -> str:
        return f"{self.tag}{self.length:02d}{self.value}"


def parse_tags(payload: str, template_tags=TEMPLATE_TAGS) -> list[QRTag]:
    """Parses a TLV payload into an ordered list of tags, recursing into template tags."""
    tags: list[QRTag] = []
    if not isinstance(payload, str):
        return tags

    cursor = 0
    while cursor < len(payload):
        header = payload[cursor:cursor + HEADER_LENGTH]
        if len(header) < HEADER_LENGTH:
            break
        tag, length_str = header[:2], header[2:]
        if not (tag.isascii() and tag.isdigit() and length_str.isascii() and length_str.isdigit()):
            break
        length = int(length_str)
        value_start = cursor + HEADER_LENGTH
        value = payload[value_start:value_start + length]
        if len(value) < length:
            break

        children = tuple(parse_tags(value, template_tags)) if tag in template_tags else ()
        tags.append(QRTag(tag=tag, length=length, value=value, children=children))
        cursor = value_start + length

    if cursor < len(payload):
        logger.debug(f"Stopped parsing QR payload at position {cursor} of {len(payload)}")
    return tags


def serialize_tags(tags: list[QRTag]) -> str:
    """Rebuilds the part of the payload the tags were parsed from."""
    return "".join(tag.serialize() for tag in tags)


def find_tag(tags, tag: str) -> QRTag | None:
    for item in tags:
        if item.tag == tag:
            return item
    return None


def find_merchant_account_id(tags: list[QRTag]) -> str | None:
    """Value of sub-tag 01 inside the merchant account template (tag 30)."""
    template = find_tag(tags, MERCHANT_ACCOUNT_TAG)
    if template is None:
        return None
    # Parse the value directly in case tag 30 was excluded from the template tags
    children = template.children or tuple(parse_tags(template.value))
    account_id = find_tag(children, MERCHANT_ACCOUNT_ID_SUBTAG)
    return account_id.value if account_id else None


def cross_validate(payload: str, expected_account: str, expected_amount=None, min_matching_digits: int = DEFAULT_MIN_MATCHING_DIGITS) -> ValidationOutcome:
    """
    Re-derives the account and amount from the QR payload itself and checks them.

    The merchant account id (tag 30 / 01) must fuzzy-match `expected_account`.
    If `expected_amount` is given, tag 54 must be present and numerically equal to it.
    """
    tags = parse_tags(payload)

    account_id = find_merchant_account_id(tags)
    if not account_id or not check_bank_account(expected_account, account_id, min_matching_digits):
        logger.info("QR cross-check failed: merchant account does not match")
        return ValidationOutcome.failure(ValidationReason.INVALID_ACCOUNT)

    if expected_amount is not None:
        amount_tag = find_tag(tags, AMOUNT_TAG)
        if amount_tag is None or not amounts_equal(expected_amount, amount_tag.value):
            logger.info("QR cross-check failed: amount does not match")
            return ValidationOutcome.failure(ValidationReason.AMOUNT_MISMATCH)

    return ValidationOutcome.success()
