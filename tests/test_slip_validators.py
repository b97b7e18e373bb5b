import io
from decimal import Decimal

from PIL import Image

from slip_validators import amounts_equal, check_bank_account, is_numeric, is_valid_image_data, normalize_amount


def test_identical_accounts_match():
    assert check_bank_account("1234567890", "1234567890")


def test_masked_expected_account_matches_on_revealed_digits():
    assert check_bank_account("XXX-XXX-1234", "0000001234")


def test_masked_actual_account_matches_expected():
    assert check_bank_account("123-4-56789-0", "xxx-x-x6789-x")


def test_length_mismatch_never_matches():
    assert not check_bank_account("12", "123")


def test_no_matching_digits():
    assert not check_bank_account("000", "111")


def test_two_matching_digits_is_not_enough():
    assert not check_bank_account("XXXXXXXX90", "1234567890")
    assert check_bank_account("XXXXXXXX90", "1234567890", min_matching_digits=2)


def test_empty_accounts_do_not_match():
    assert not check_bank_account("", "")
    assert not check_bank_account("1234567890", None)


def test_is_numeric_only_accepts_ascii_digits():
    assert is_numeric("7")
    assert not is_numeric("x")
    assert not is_numeric("๗")
    assert not is_numeric("12")


def test_amounts_compare_numerically():
    assert amounts_equal("100", "100.00")
    assert amounts_equal(100, "100.0")
    assert amounts_equal("1,500.50", 1500.5)
    assert not amounts_equal("100", "100.01")


def test_unparsable_amounts_are_not_equal():
    assert not amounts_equal("abc", "abc")
    assert not amounts_equal(None, "100")
    assert normalize_amount("NaN") is None
    assert normalize_amount(True) is None
    assert normalize_amount(" 42.50 ") == Decimal("42.50")


def test_png_bytes_are_valid_image_data():
    buffer = io.BytesIO()
    Image.new("RGBA", (4, 4)).save(buffer, "PNG")
    assert is_valid_image_data(buffer.getvalue())


def test_raw_pixels_are_not_image_data():
    assert not is_valid_image_data(bytes(64))
    assert not is_valid_image_data(b"")
