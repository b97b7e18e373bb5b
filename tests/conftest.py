from datetime import datetime

import pytest

from slip_config import SlipConfig
from slip_payment.models import VerificationResult

EXPECTED_ACCOUNT = "123-4-56789-0"
EXPECTED_BANK = "014"


def slip_response(valid=True, is_cached=False, trans_at=None, trans_date=None, trans_time=None,
                  account="xxx-x-x6789-x", bank=EXPECTED_BANK, amount="100.00") -> dict:
    """A response body as the inquiry service returns it."""
    trans_at = trans_at if trans_at is not None else datetime.now()
    return {
        "discriminator": "abc123",
        "valid": valid,
        "isCached": is_cached,
        "data": {
            "language": "TH",
            "transRef": "015123103512345678",
            "sendingBank": "004",
            "receivingBank": bank,
            "transDate": trans_date if trans_date is not None else trans_at.strftime("%Y%m%d"),
            "transTime": trans_time if trans_time is not None else trans_at.strftime("%H:%M:%S"),
            "sender": {
                "displayName": "Mr. Sender",
                "name": "SENDER NAME",
                "proxy": {"type": None, "value": None},
                "account": {"type": "BANKAC", "value": "xxx-x-x1111-x"},
            },
            "receiver": {
                "displayName": "Shop",
                "name": "SHOP CO LTD",
                "proxy": {"type": "MSISDN", "value": "xxx-xxx-5678"},
                "account": {"type": "BANKAC", "value": account},
            },
            "amount": amount,
            "paidLocalAmount": amount,
            "paidLocalCurrency": "764",
            "countryCode": "TH",
            "transFeeAmount": "0",
            "ref1": "",
            "ref2": "",
            "ref3": "",
            "toMerchantId": "",
        },
        "quota": {"cost": 1, "usage": 10, "limit": 100},
        "subscription": {"id": 42, "postpaid": False},
    }


@pytest.fixture
def make_result():
    def _make(**kwargs) -> VerificationResult:
        return VerificationResult.from_dict(slip_response(**kwargs))
    return _make


@pytest.fixture
def config(tmp_path):
    """Defaults only; the file does not exist until a test saves it."""
    return SlipConfig(str(tmp_path / "slipverify_config.ini"))
