"""QR code rendering for membership cards."""

from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_M

CARD_FOREGROUND = "#112369"
CARD_BACKGROUND = "#ffffff"


def render_qr_png(value: str, box_size: int = 10, border: int = 4) -> bytes:
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(value)
    qr.make(fit=True)

    image = qr.make_image(fill_color=CARD_FOREGROUND, back_color=CARD_BACKGROUND)
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
