from __future__ import annotations

import base64
import io
import logging
import re

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image, UnidentifiedImageError

from ..core.constants import DEFAULT_PUBLIC_BASE_URL, SIGNOUT_PATH
from ..core.exceptions import EncodingError

logger = logging.getLogger(__name__)

_SIGNOUT_RE = re.compile(r"/api/visitors/signout/(\d+)/?$")


def coerce_visitor_id(value) -> int:
    """Accept ints or digit strings; anything else cannot be put in a token."""

    if isinstance(value, bool):
        raise EncodingError(f"Mã khách không hợp lệ: {value!r}")
    if isinstance(value, int):
        visitor_id = value
    elif isinstance(value, str) and value.strip().isdigit():
        visitor_id = int(value.strip())
    else:
        raise EncodingError(f"Mã khách không hợp lệ: {value!r}")

    if visitor_id <= 0:
        raise EncodingError(f"Mã khách không hợp lệ: {value!r}")
    return visitor_id


class QRTokenEncoder:
    """Builds the sign-out URL for a visitor and renders it as a PNG QR code.

    The QR only wraps the URL; all state lives on the visitor row.
    """

    def __init__(self, public_base_url: str = DEFAULT_PUBLIC_BASE_URL):
        self._base_url = public_base_url.rstrip("/")

    def signout_url(self, visitor_id) -> str:
        visitor_id = coerce_visitor_id(visitor_id)
        return self._base_url + SIGNOUT_PATH.format(visitor_id=visitor_id)

    def encode(self, url: str) -> str:
        """Return ``url`` as a ``data:image/png;base64,...`` QR image."""

        if not url:
            raise EncodingError("Không có nội dung để tạo mã QR")
        try:
            img = qrcode.make(url)
            buf = io.BytesIO()
            img.save(buf, format="PNG")
        except (ValueError, OSError, DataOverflowError) as e:
            logger.error("QR rendering failed for %s: %s", url, e)
            raise EncodingError("Không tạo được mã QR") from e

        encoded = base64.b64encode(buf.getvalue()).decode("ascii")
        return f"data:image/png;base64,{encoded}"

    @staticmethod
    def parse_signout_url(url: str) -> int:
        match = _SIGNOUT_RE.search((url or "").strip())
        if not match:
            raise EncodingError("Mã QR không phải mã trả khách")
        return coerce_visitor_id(match.group(1))

    def decode_image(self, image_bytes: bytes) -> int:
        """Read a scanned QR photo and return the visitor id it points at."""

        try:
            img = Image.open(io.BytesIO(image_bytes))
            img.load()
        except (UnidentifiedImageError, OSError) as e:
            raise EncodingError("Ảnh mã QR không hợp lệ") from e

        # The zbar shared library is only loaded on the first decode call.
        try:
            from pyzbar.pyzbar import decode as pyzbar_decode

            results = pyzbar_decode(img)
        except ImportError as e:
            logger.error("zbar is not available for QR decoding: %s", e)
            raise EncodingError("Máy chủ chưa cài thư viện zbar để đọc mã QR") from e

        if not results:
            raise EncodingError("Không đọc được mã QR trong ảnh")

        text = results[0].data.decode("utf-8", errors="replace")
        return self.parse_signout_url(text)
