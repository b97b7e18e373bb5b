class SlipVerifyError(Exception):
    """Base class for failures that abort slip verification."""


class DecodeError(SlipVerifyError):
    """The image input could not be read or contains no QR code."""


class ApiError(SlipVerifyError):
    """The inquiry request failed or the service returned an unexpected response."""

    def __init__(self, message: str, cause: Exception | None = None, status_code: int | None = None):
        super().__init__(message)
        self.cause = cause
        self.status_code = status_code
