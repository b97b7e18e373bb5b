"""
Data returned by the slip inquiry service and the outcome of local validation.

The service answers in camelCase JSON; each model has a `from_dict` that maps it
onto snake_case attributes. Missing keys become None so that a partial response
(e.g. an invalid slip with no transaction data) can still be represented.
"""

from dataclasses import dataclass, asdict
from enum import Enum


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class Account:
    """A bank account or proxy (PromptPay) identifier, often masked."""
    type: str | None = None
    value: str | None = None

    @classmethod
    def from_dict(cls, data) -> "Account":
        data = _as_dict(data)
        return cls(type=data.get('type'), value=data.get('value'))


@dataclass(frozen=True)
class Party:
    """Sender or receiver of a transfer."""
    display_name: str | None = None
    name: str | None = None
    proxy: Account = Account()
    account: Account = Account()

    @classmethod
    def from_dict(cls, data) -> "Party":
        data = _as_dict(data)
        return cls(
            display_name=data.get('displayName'),
            name=data.get('name'),
            proxy=Account.from_dict(data.get('proxy')),
            account=Account.from_dict(data.get('account')),
        )


@dataclass(frozen=True)
class TransactionRecord:
    """The facts of a verified transfer. Dates are YYYYMMDD, times HH:mm:ss."""
    language: str | None = None
    trans_ref: str | None = None
    sending_bank: str | None = None
    receiving_bank: str | None = None
    trans_date: str | None = None
    trans_time: str | None = None
    sender: Party = Party()
    receiver: Party = Party()
    amount: str | float | None = None
    paid_local_amount: str | float | None = None
    paid_local_currency: str | None = None
    country_code: str | None = None
    trans_fee_amount: str | float | None = None
    ref1: str | None = None
    ref2: str | None = None
    ref3: str | None = None
    to_merchant_id: str | None = None

    @classmethod
    def from_dict(cls, data) -> "TransactionRecord":
        data = _as_dict(data)
        return cls(
            language=data.get('language'),
            trans_ref=data.get('transRef'),
            sending_bank=data.get('sendingBank'),
            receiving_bank=data.get('receivingBank'),
            trans_date=data.get('transDate'),
            trans_time=data.get('transTime'),
            sender=Party.from_dict(data.get('sender')),
            receiver=Party.from_dict(data.get('receiver')),
            amount=data.get('amount'),
            paid_local_amount=data.get('paidLocalAmount'),
            paid_local_currency=data.get('paidLocalCurrency'),
            country_code=data.get('countryCode'),
            trans_fee_amount=data.get('transFeeAmount'),
            ref1=data.get('ref1'),
            ref2=data.get('ref2'),
            ref3=data.get('ref3'),
            to_merchant_id=data.get('toMerchantId'),
        )


@dataclass(frozen=True)
class QuotaInfo:
    cost: int | None = None
    usage: int | None = None
    limit: int | None = None

    @classmethod
    def from_dict(cls, data) -> "QuotaInfo":
        data = _as_dict(data)
        return cls(cost=data.get('cost'), usage=data.get('usage'), limit=data.get('limit'))


@dataclass(frozen=True)
class SubscriptionInfo:
    id: int | None = None
    postpaid: bool | None = None

    @classmethod
    def from_dict(cls, data) -> "SubscriptionInfo":
        data = _as_dict(data)
        return cls(id=data.get('id'), postpaid=data.get('postpaid'))


@dataclass(frozen=True)
class VerificationResult:
    """
    Result of one inquiry call.

    `is_cached` means the service has already seen this payload, i.e. the slip
    is being presented a second time.
    """
    valid: bool
    discriminator: str | None = None
    data: TransactionRecord | None = None
    quota: QuotaInfo | None = None
    subscription: SubscriptionInfo | None = None
    is_cached: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "VerificationResult":
        return cls(
            valid=data.get('valid') is True,
            discriminator=data.get('discriminator'),
            data=TransactionRecord.from_dict(data['data']) if isinstance(data.get('data'), dict) else None,
            quota=QuotaInfo.from_dict(data['quota']) if isinstance(data.get('quota'), dict) else None,
            subscription=SubscriptionInfo.from_dict(data['subscription']) if isinstance(data.get('subscription'), dict) else None,
            is_cached=bool(data.get('isCached', False)),
        )

    def to_dict(self) -> dict:
        return asdict(self)


class ValidationReason(Enum):
    """Reasons a slip is rejected. The values are stable identifiers for integrators."""
    INVALID_SLIP = "invalid_slip"
    ALREADY_USED = "already_used"
    EXPIRED = "expired"
    INVALID_ACCOUNT = "invalid_account"
    INVALID_BANK = "invalid_bank"
    AMOUNT_MISMATCH = "amount_mismatch"

    @property
    def message(self) -> str:
        return _REASON_MESSAGES[self]


_REASON_MESSAGES = {
    ValidationReason.INVALID_SLIP: "Invalid slip",
    ValidationReason.ALREADY_USED: "This slip has already been used",
    ValidationReason.EXPIRED: "This slip has expired",
    ValidationReason.INVALID_ACCOUNT: "Invalid account number",
    ValidationReason.INVALID_BANK: "Invalid bank",
    ValidationReason.AMOUNT_MISMATCH: "Amount mismatch",
}


@dataclass(frozen=True)
class ValidationOutcome:
    """Accept/reject decision. A rejected slip is a normal outcome, not an exception."""
    is_valid: bool
    error: str | None = None
    reason: ValidationReason | None = None

    @classmethod
    def success(cls) -> "ValidationOutcome":
        return cls(is_valid=True)

    @classmethod
    def failure(cls, reason: ValidationReason) -> "ValidationOutcome":
        return cls(is_valid=False, error=reason.message, reason=reason)


@dataclass(frozen=True)
class ImageData:
    """An uncompressed RGBA pixel buffer, as the QR symbol decoder expects it."""
    width: int
    height: int
    data: bytes
