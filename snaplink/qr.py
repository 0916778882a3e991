"""QR code encoding for short links."""

import base64
import logging
from io import BytesIO
from typing import Optional

import qrcode
from qrcode.image.pil import PilImage


class QRCodeEncoder:
    """Render a URL as a PNG QR code and return it as a data URL."""

    def __init__(
        self,
        box_size: int = 10,
        border: int = 4,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize QR encoder.

        Args:
            box_size: Pixels per QR module
            border: Quiet zone width in modules
            logger: Optional logger
        """
        self.box_size = box_size
        self.border = border
        self.logger = logger or logging.getLogger(__name__)

    def encode(self, url: str) -> Optional[str]:
        """Encode ``url`` as a ``data:image/png;base64,...`` string.

        Failures are logged and reported as None; a link without a QR code
        is still a valid link.
        """
        try:
            qr = qrcode.QRCode(
                error_correction=qrcode.constants.ERROR_CORRECT_M,
                box_size=self.box_size,
                border=self.border,
                image_factory=PilImage,
            )
            qr.add_data(url)
            qr.make(fit=True)

            img = qr.make_image(fill_color="black", back_color="white")
            buffered = BytesIO()
            img.save(buffered, format="PNG")
        except Exception as e:
            self.logger.error(f"Error generating QR code for {url}: {e}")
            return None

        encoded = base64.b64encode(buffered.getvalue()).decode("ascii")
        return f"data:image/png;base64,{encoded}"
