import base64
import binascii
import io
import logging
import math
from typing import Protocol
from PIL import Image
from slip_validators import is_valid_image_data
from .errors import DecodeError
from .models import ImageData

logger = logging.getLogger(__name__)

DATA_URL_MARKER = 'base64,'


class SymbolDecoder(Protocol):
    """Anything that finds a QR code in an RGBA buffer and returns its text, or None."""
    def __call__(self, image: ImageData) -> str | None: ...


class PyzbarSymbolDecoder:
    """Decodes QR codes with zbar, through pyzbar."""

    def __call__(self, image: ImageData) -> str | None:
        # Imported here so that payload-only verification works without the zbar shared library.
        from pyzbar.pyzbar import decode, ZBarSymbol

        # zbar only looks at luminance, so decode from a grayscale frame
        frame = Image.frombytes('RGBA', (image.width, image.height), image.data).convert('L')
        decoded_objects = decode(frame, symbols=[ZBarSymbol.QRCODE])
        if not decoded_objects:
            return None
        # Slips carry a single code, take the first one
        return decoded_objects[0].data.decode('utf-8')


class SlipQRDecoder:
    """Reads the QR payload out of a slip image given as bytes, base64 or a data URL."""

    def __init__(self, symbol_decoder: SymbolDecoder | None = None):
        self.symbol_decoder = symbol_decoder if symbol_decoder else PyzbarSymbolDecoder()

    def read_qr_code(self, image_input: bytes | bytearray | memoryview | str) -> str:
        """
        Returns the QR code payload found in the image.
        Raises DecodeError if the input cannot be interpreted or holds no QR code.
        """
        raw = self.to_bytes(image_input)
        image = self.to_image_data(raw)

        try:
            payload = self.symbol_decoder(image)
        except DecodeError:
            raise
        except Exception as e:
            logger.error(f"QR symbol decoder failed on a {image.width}x{image.height} image: {e}", exc_info=True)
            raise DecodeError(f"Failed to read QR code: {e}") from e

        if not payload:
            raise DecodeError("No QR code found in the image")
        return payload

    @staticmethod
    def to_bytes(image_input) -> bytes:
        """Normalizes raw bytes, a base64 string or a data URL into bytes."""
        if isinstance(image_input, (bytes, bytearray, memoryview)):
            return bytes(image_input)
        if not isinstance(image_input, str):
            raise DecodeError(f"Unsupported image input type: {type(image_input).__name__}")

        encoded = image_input
        if DATA_URL_MARKER in encoded:
            # e.g. "data:image/png;base64,iVBORw0..."
            encoded = encoded.split(DATA_URL_MARKER, 1)[1]
        try:
            return base64.b64decode(encoded.strip())
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Failed to read QR code: invalid base64 data ({e})") from e

    @staticmethod
    def to_image_data(raw: bytes) -> ImageData:
        """
        Builds the RGBA description the symbol decoder needs.

        Encoded PNG/JPEG files are converted by Pillow. Anything else is taken to be
        an uncompressed square RGBA buffer, whose side is sqrt(len / 4).
        """
        try:
            if is_valid_image_data(raw):
                with Image.open(io.BytesIO(raw)) as img:
                    rgba = img.convert('RGBA')
                    return ImageData(width=rgba.width, height=rgba.height, data=rgba.tobytes())
        except (Image.DecompressionBombError, OSError, ValueError) as e:
            logger.warning(f"Pillow could not open the slip image: {e}")
            raise DecodeError(f"Failed to read QR code: {e}") from e

        if not raw or len(raw) % 4 != 0:
            raise DecodeError("The image dimensions could not be determined. Please provide a valid image.")
        pixels = len(raw) // 4
        width = math.isqrt(pixels)
        if width * width != pixels:
            raise DecodeError("The image dimensions could not be determined. Please provide a valid image.")
        return ImageData(width=width, height=width, data=raw)
