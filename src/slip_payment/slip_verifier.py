import logging
from datetime import timedelta
from typing import Protocol
from slip_config import slip_config
from .models import ValidationOutcome, VerificationResult
from .qr_decoder import SlipQRDecoder
from .qr_payload import cross_validate
from .slip_validator import validate_slip
from .slipverify_api_handler import SlipVerifyApiHandler

logger = logging.getLogger(__name__)


class SlipInquiryClient(Protocol):
    """Anything that maps a QR payload to a VerificationResult."""
    def inquire(self, payload: str) -> VerificationResult: ...


class SlipVerifier:
    """Verifies payment slips from a QR payload or an image and validates the result."""
    def __init__(self, client: SlipInquiryClient | None = None, decoder: SlipQRDecoder | None = None, config_source=None):
        self.config_source = config_source if config_source else slip_config
        self.client = client if client else SlipVerifyApiHandler(config_source=self.config_source)
        self.decoder = decoder if decoder else SlipQRDecoder()

    def is_configured(self):
        """Checks if the slip verification API is configured."""
        is_configured = getattr(self.client, 'is_configured', None)
        return is_configured() if is_configured else True

    def read_qr_code(self, image_input) -> str:
        """Extracts the QR payload from image bytes, a base64 string or a data URL."""
        return self.decoder.read_qr_code(image_input)

    def verify_slip(self, payload: str) -> VerificationResult:
        """Verifies a slip from the raw QR payload string."""
        return self.client.inquire(payload)

    def verify_slip_from_image(self, image_input) -> VerificationResult:
        """Verifies a slip from its QR code image. DecodeError is raised before any API call."""
        payload = self.read_qr_code(image_input)
        logger.debug(f"Decoded slip payload of {len(payload)} characters")
        return self.verify_slip(payload)

    def validate_slip(self, result: VerificationResult, payload: str | None = None, expected_account: str | None = None,
                      expected_bank: str | None = None, expected_amount=None) -> ValidationOutcome:
        """
        Validates a verification result and, when the payload is given, cross-checks
        the QR fields. Expectations not passed in are read from the VALIDATION section.
        """
        if expected_account is None:
            expected_account = self.config_source.get('VALIDATION', 'expected_account', fallback='')
        if expected_bank is None:
            expected_bank = self.config_source.get('VALIDATION', 'expected_bank', fallback='')
        max_age = timedelta(hours=self.config_source.getfloat('VALIDATION', 'max_slip_age_hours', fallback=24.0))
        min_matching_digits = self.config_source.getint('VALIDATION', 'min_matching_digits', fallback=3)

        outcome = validate_slip(result, expected_account, expected_bank, expected_amount,
                                max_age=max_age, min_matching_digits=min_matching_digits)
        if not outcome.is_valid or payload is None:
            return outcome
        return cross_validate(payload, expected_account, expected_amount, min_matching_digits=min_matching_digits)
