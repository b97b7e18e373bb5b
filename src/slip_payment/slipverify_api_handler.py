import logging
import requests
from slip_config import slip_config, DEFAULT_BASE_URL
from .errors import ApiError
from .models import VerificationResult

logger = logging.getLogger(__name__)

INQUIRY_PATH = '/v1/inquiry'


class SlipVerifyApiHandler:
    """Handles the slip inquiry call to the SlipVerify API."""

    def __init__(self, client_id=None, client_secret=None, base_url=None, timeout=None, debug=None, config_source=None):
        self.config_source = config_source if config_source else slip_config
        # Explicit arguments win over the SLIPVERIFY section of the config
        self.client_id = client_id if client_id is not None else self.config_source.get('SLIPVERIFY', 'client_id', fallback='')
        self.client_secret = client_secret if client_secret is not None else self.config_source.get('SLIPVERIFY', 'client_secret', fallback='')
        self.base_url = (base_url or self.config_source.get('SLIPVERIFY', 'base_url', fallback='') or DEFAULT_BASE_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else self.config_source.getfloat('SLIPVERIFY', 'timeout_seconds', fallback=30.0)
        if debug is None:
            debug = self.config_source.get('SLIPVERIFY', 'debug', fallback='False').lower() == 'true'
        self.debug = debug

    def is_configured(self):
        """Checks if the client credentials are configured."""
        return bool(self.client_id and self.client_secret)

    @property
    def inquiry_url(self) -> str:
        return f"{self.base_url}{INQUIRY_PATH}"

    def inquire(self, payload: str) -> VerificationResult:
        """
        Asks the service whether the slip behind `payload` is genuine.

        A slip the service reports as invalid is still a successful call and comes back
        with `valid=False`. Transport failures and responses without a `valid` field
        raise ApiError. Nothing is retried.
        """
        if not self.is_configured():
            raise ApiError("SlipVerify API is not configured: client_id and client_secret are required.")

        url = self.inquiry_url
        headers = {'Content-Type': 'application/json', 'Accept': 'application/json'}
        body = {'payload': payload}

        try:
            if self.debug:
                logger.debug(f"SlipVerify request: POST {url} body={body}")

            response = requests.post(url, json=body, headers=headers, auth=(self.client_id, self.client_secret), timeout=self.timeout)

            if self.debug:
                logger.debug(f"SlipVerify response: status={response.status_code} body={response.text}")

            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            logger.warning(f"SlipVerify request timed out after {self.timeout}s")
            raise ApiError(f"API request failed: connection timed out ({e})", cause=e) from e
        except requests.exceptions.SSLError as e:
            logger.warning(f"SlipVerify SSL error: {e}")
            raise ApiError(f"API request failed: SSL error ({e})", cause=e) from e
        except requests.exceptions.ConnectionError as e:
            logger.warning(f"SlipVerify connection error: {e}")
            raise ApiError(f"API request failed: connection error ({e})", cause=e) from e
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.warning(f"SlipVerify returned HTTP {status_code}")
            raise ApiError(f"API request failed with status code {status_code}", cause=e, status_code=status_code) from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"SlipVerify request failed: {e}")
            raise ApiError(f"API request failed: {e}", cause=e) from e

        try:
            response_data = response.json()
        except ValueError as e:
            logger.warning(f"SlipVerify returned a non-JSON body: {e}")
            raise ApiError("Invalid response from API", cause=e) from e

        if not isinstance(response_data, dict) or not isinstance(response_data.get('valid'), bool):
            logger.warning(f"SlipVerify response has no boolean 'valid' field: {response_data!r}")
            raise ApiError("Invalid response from API")

        result = VerificationResult.from_dict(response_data)
        logger.info(f"Slip inquiry done: valid={result.valid} cached={result.is_cached}")
        return result
