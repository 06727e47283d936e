import base64
import binascii
import re
from io import BytesIO

from PIL import Image

_DATA_URL_PREFIX = re.compile(r"^data:(image/[\w.+-]+);base64,", re.IGNORECASE)


def image_bytes_to_base64(image_bytes: bytes) -> str:
    return base64.b64encode(image_bytes).decode("utf-8")


def split_data_url(image_base64: str) -> tuple[str, str]:
    """Return ``(mime_type, body)`` for a raw base64 string or a data URL."""
    normalized = (image_base64 or "").strip()
    match = _DATA_URL_PREFIX.match(normalized)
    if match:
        return match.group(1).lower(), normalized[match.end():].strip()
    return "image/jpeg", normalized


def decode_base64_image(encoded: str, max_bytes: int) -> bytes:
    if not encoded:
        raise ValueError("image must not be empty.")
    try:
        decoded = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("image is not valid base64 content.") from exc
    if not decoded:
        raise ValueError("image decoded to empty bytes.")
    if len(decoded) > max_bytes:
        raise ValueError(f"image exceeds max allowed size of {max_bytes} bytes.")
    return decoded


def resize_image_if_needed(image_bytes: bytes, max_size: int = 1024) -> bytes:
    try:
        img = Image.open(BytesIO(image_bytes))
        img.load()
    except OSError as exc:
        raise ValueError("image could not be decoded.") from exc
    if max(img.size) <= max_size:
        return image_bytes
    fmt = img.format or "PNG"
    img.thumbnail((max_size, max_size))
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def image_mime_type(image_bytes: bytes, default: str = "image/jpeg") -> str:
    try:
        img = Image.open(BytesIO(image_bytes))
    except OSError as exc:
        raise ValueError("image could not be decoded.") from exc
    return Image.MIME.get(img.format or "", default)
