"""
Image helpers for lot thumbnails.
"""

import base64
import io

from PIL import Image


def file_to_data_url(file_data: bytes, mime_type: str) -> str:
    """Encode raw file bytes as a base64 data URL."""
    encoded = base64.b64encode(file_data).decode('ascii')
    return f"data:{mime_type};base64,{encoded}"


def make_thumbnail(image_data: bytes, max_size: int = 200) -> str:
    """
    Build a small JPEG thumbnail for a lot.

    The image is scaled down (never up) so its longest side is at most
    max_size, keeping the aspect ratio.

    Args:
        image_data: Raw image bytes
        max_size: Longest side in pixels

    Returns:
        JPEG data URL (quality 70)
    """
    image = Image.open(io.BytesIO(image_data))
    if image.mode != 'RGB':
        image = image.convert('RGB')
    image.thumbnail((max_size, max_size))

    buffer = io.BytesIO()
    image.save(buffer, format='JPEG', quality=70)
    return file_to_data_url(buffer.getvalue(), 'image/jpeg')
