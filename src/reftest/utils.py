import io

from PIL import Image


def image_from_bytes(image_bytes: bytes | bytearray) -> Image.Image:
    """Create an image from the encoded content of an image file."""
    return Image.open(io.BytesIO(image_bytes))
