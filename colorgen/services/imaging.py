"""
colorgen Imaging Utilities
Handles image decoding, validation and downscaling ahead of quantization.
"""
import io
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from colorgen.config import config
from colorgen.services.colors.errors import ImageDecodeError
from colorgen.utils.logging import logger


def validate_magic_bytes(file_bytes: bytes) -> str:
    """
    Validate file magic bytes to ensure it's actually an image.

    Args:
        file_bytes: Raw file bytes

    Returns:
        Detected MIME type

    Raises:
        ImageDecodeError: For empty, truncated or unrecognized data
    """
    if len(file_bytes) < 8:
        raise ImageDecodeError("File too small or corrupt")

    if file_bytes.startswith(b'\xff\xd8\xff'):
        return "image/jpeg"
    elif file_bytes.startswith(b'\x89PNG\r\n\x1a\n'):
        return "image/png"
    elif file_bytes[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    elif file_bytes.startswith(b'RIFF') and file_bytes[8:12] == b'WEBP':
        return "image/webp"
    elif file_bytes.startswith(b'BM'):
        return "image/bmp"
    else:
        raise ImageDecodeError("Invalid image file. Magic bytes don't match supported formats.")


def decode_image(file_bytes: bytes) -> Image.Image:
    """
    Decode raw bytes into a Pillow image.

    Args:
        file_bytes: Raw file bytes

    Returns:
        Fully loaded PIL image

    Raises:
        ImageDecodeError: If the data is too large or Pillow cannot decode it
    """
    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise ImageDecodeError(f"File too large. Maximum size: {config.MAX_FILE_MB}MB")

    mime_type = validate_magic_bytes(file_bytes)

    try:
        image = Image.open(io.BytesIO(file_bytes))
        # Force the decode now so truncated files fail here
        image.load()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ImageDecodeError(f"Failed to decode image: {str(e)}") from e

    logger.debug(f"Decoded {mime_type} image {image.width}x{image.height} mode={image.mode}")
    return image


def resize_for_quantization(image: Image.Image, width: Optional[int] = None) -> Image.Image:
    """
    Downscale an image to a fixed width, keeping its aspect ratio.

    Images already narrower than the target width are returned unchanged.
    """
    if width is None:
        width = config.RESIZE_WIDTH
    if width < 1:
        raise ValueError(f"width must be positive, got {width}")

    if image.width <= width:
        return image

    height = max(1, round(image.height * width / image.width))
    return image.resize((width, height), Image.LANCZOS)


def image_to_pixels(image: Image.Image) -> np.ndarray:
    """Flatten an image to an (N, 4) uint8 RGBA array."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return np.asarray(image, dtype=np.uint8).reshape(-1, 4)
