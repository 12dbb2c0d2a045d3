"""
Attribute validators.

Checks run before any API call is made. Each returns Diagnostics.
"""

import base64
import binascii
import re
from urllib.parse import unquote_to_bytes

from .types import Diagnostics

SUPPORTED_IMAGE_TYPES = ['image/jpeg', 'image/png', 'image/gif', 'image/bmp', 'image/svg+xml']
MAX_IMAGE_SIZE = 1_000_000

# data:[<mediatype>][;base64],<data>
_DATA_URI_RE = re.compile(r'^data:(?P<params>[^,]*),(?P<data>.*)$', re.DOTALL)


class DataUriError(ValueError):
    pass


def decode_data_uri(value: str):
    """
    Decode a Data URI.

    Returns:
        Tuple of (content type, decoded bytes)

    Raises:
        DataUriError: if the value is not a valid Data URI
    """
    if not isinstance(value, str):
        raise DataUriError(f"expected a string, got {type(value).__name__}")

    match = _DATA_URI_RE.match(value.strip())
    if not match:
        raise DataUriError("missing 'data:' scheme or ',' separator")

    params = [p.strip() for p in match.group('params').split(';')]
    content_type = params[0].lower() if params and params[0] else 'text/plain'
    is_base64 = len(params) > 1 and params[-1].lower() == 'base64'

    if '/' not in content_type:
        raise DataUriError(f"invalid media type: {content_type}")

    data = match.group('data')
    if is_base64:
        try:
            return content_type, base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DataUriError(f"invalid base64 data: {e}") from e

    return content_type, unquote_to_bytes(data)


def validate_image_data(value: str) -> Diagnostics:
    """
    Validate a logo image given as a Data URI.

    The image must decode, use a supported image type, and be at
    most 1MB once decoded.
    """
    diags = Diagnostics()

    try:
        content_type, data = decode_data_uri(value)
    except DataUriError as e:
        return diags.add_error("unable to parse the data URI", str(e))

    if content_type not in SUPPORTED_IMAGE_TYPES:
        diags.add_error(
            f"invalid or unsupported content type: {content_type}",
            f"supported content types are: {', '.join(SUPPORTED_IMAGE_TYPES)}"
        )

    size = len(data)
    if size > MAX_IMAGE_SIZE:
        diags.add_error("content is too large", f"maximum content size is 1MB, got: {size}")

    return diags
