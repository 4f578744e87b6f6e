"""
COTRA Authority Routes
Publishing the authority public key
"""
from fastapi import APIRouter
from fastapi.responses import StreamingResponse
import io

import qrcode

from cotra_server.database import get_authority

router = APIRouter()


@router.get("/public-key")
async def get_public_key():
    """Public key devices seal their share identities with"""
    authority = get_authority()
    return {"public_key": str(authority.public_key)}


@router.get("/public-key/qr")
async def get_public_key_qr():
    """Public key as a QR code, for devices to scan"""
    public_key = str(get_authority().public_key)

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(public_key)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    buffer.seek(0)

    return StreamingResponse(
        buffer,
        media_type="image/png",
        headers={
            "Content-Disposition": "inline; filename=authority-key.png",
            "Cache-Control": "public, max-age=3600",  # Key never rotates
        }
    )
