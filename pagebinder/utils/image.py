# pagebinder/utils/image.py
# ============================================================
# Image Utility Functions
# ============================================================
# Shared image helpers used by the normalizer and the CLI.
# Handles JPEG encoding, mode conversion, and metadata
# extraction for PIL Images.
#
# Usage:
#   from pagebinder.utils.image import encode_jpeg, get_image_info
#   data = encode_jpeg(image, quality=75)
#   info = get_image_info(image)
# ============================================================

import io
import time

from PIL import Image

from pagebinder.utils.logger import get_logger

logger = get_logger(__name__)

# Modes the JPEG encoder accepts without conversion
JPEG_MODES = ("RGB", "L")


def ensure_jpeg_mode(image: Image.Image) -> Image.Image:
    """
    Return an image the JPEG encoder can write.

    RGBA, LA, P, CMYK, I;16 and friends are flattened to RGB. Alpha is
    dropped, not composited.
    """
    if image.mode in JPEG_MODES:
        return image
    return image.convert("RGB")


def encode_jpeg(image: Image.Image, quality: int) -> bytes:
    """
    Encode a PIL Image to baseline JPEG bytes at the given quality.
    """
    start = time.perf_counter()

    buffer = io.BytesIO()
    ensure_jpeg_mode(image).save(buffer, format="JPEG", quality=quality)
    data = buffer.getvalue()

    duration = (time.perf_counter() - start) * 1000
    logger.debug(f"JPEG encoding (q={quality}, {len(data)} bytes) took {duration:.2f}ms")
    return data


def get_image_info(image: Image.Image) -> dict:
    """
    Extract metadata from a PIL Image for logging and diagnostics.

    Args:
        image: PIL Image to inspect.

    Returns:
        Dictionary with width, height, mode (RGB/RGBA/L), and
        estimated size in MB.

    Example:
        >>> info = get_image_info(Image.new("RGB", (1920, 1080)))
        >>> info["width"]
        1920
    """
    width, height = image.size
    # Estimate uncompressed size: width * height * channels
    channels = len(image.getbands())
    estimated_bytes = width * height * channels
    estimated_mb = round(estimated_bytes / (1024 * 1024), 2)

    return {
        "width": width,
        "height": height,
        "mode": image.mode,
        "channels": channels,
        "estimated_size_mb": estimated_mb,
    }
