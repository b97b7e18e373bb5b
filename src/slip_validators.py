import io
import string
from decimal import Decimal, InvalidOperation
from PIL import Image, UnidentifiedImageError

# Masked account numbers from the slip service look like "xxx-x-x1234-x".
ACCOUNT_SEPARATOR = '-'
DEFAULT_MIN_MATCHING_DIGITS = 3


def is_numeric(char: str) -> bool:
    """Returns True only for a single ASCII decimal digit."""
    return isinstance(char, str) and len(char) == 1 and char in string.digits


def check_bank_account(expected_account: str, actual_account: str, min_matching_digits: int = DEFAULT_MIN_MATCHING_DIGITS) -> bool:
    """
    Checks if a (possibly masked) account number from a slip matches the expected account.

    Separators are ignored. Positions where the expected account is not a digit are
    skipped; the remaining positions must agree on at least `min_matching_digits` digits.
    Accounts of different length never match.
    """
    if not expected_account or not actual_account:
        return False

    clean_expected = expected_account.replace(ACCOUNT_SEPARATOR, '')
    clean_actual = actual_account.replace(ACCOUNT_SEPARATOR, '')

    if len(clean_expected) != len(clean_actual):
        return False

    matching_digits = 0
    for expected_char, actual_char in zip(clean_expected, clean_actual):
        if not is_numeric(expected_char):
            continue
        if expected_char != actual_char:
            continue
        matching_digits += 1

    return matching_digits >= min_matching_digits


def normalize_amount(amount) -> Decimal | None:
    """
    Converts an amount (str, int, float or Decimal) to a Decimal for comparison.
    Returns None if the value is not a finite number.
    """
    if amount is None or isinstance(amount, bool):
        return None
    try:
        value = Decimal(str(amount).strip().replace(',', ''))
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value


def amounts_equal(expected_amount, actual_amount) -> bool:
    """Numeric equality of two amounts, so that "100" and "100.00" are equal."""
    expected = normalize_amount(expected_amount)
    actual = normalize_amount(actual_amount)
    if expected is None or actual is None:
        return False
    return expected == actual


def is_valid_image_data(data: bytes, allowed_formats: tuple = ('PNG', 'JPEG')) -> bool:
    """
    Validates if the given byte data is a valid image of an allowed format using Pillow.
    Raw pixel buffers are not images in this sense and return False.
    """
    if not data:
        return False
    try:
        with Image.open(io.BytesIO(data)) as img:
            # JPEG is the format name for .jpg files
            if not img.format or img.format.upper() not in allowed_formats:
                return False
            img.verify()
        return True
    except (UnidentifiedImageError, IOError, SyntaxError):
        return False
