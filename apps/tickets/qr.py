"""
QR payloads for tickets. The QR encodes the front-end validation URL.
"""
import base64
from io import BytesIO
from urllib.parse import urlencode

import qrcode
from qrcode import constants
from django.conf import settings


def validation_url(raw_code):
    query = urlencode({'code': raw_code})
    return f"{settings.FRONTEND_URL.rstrip('/')}/validate-ticket?{query}"


def render_data_url(data):
    """
    Render ``data`` as a PNG QR code and return it as a ``data:`` URL
    """
    qr = qrcode.QRCode(
        version=1,
        error_correction=constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    image = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    image.save(buffer, format='PNG')
    encoded = base64.b64encode(buffer.getvalue()).decode('ascii')

    return f"data:image/png;base64,{encoded}"


def ticket_qr(raw_code):
    return render_data_url(validation_url(raw_code))
