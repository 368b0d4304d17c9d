# pagebinder/imaging/normalizer.py
# ============================================================
# Image Normalizer — Decode, Re-encode, Size
# ============================================================
# Turns one source image (JPEG, PNG or WEBP) into a page-ready
# payload: JPEG bytes at a fixed quality plus the physical page
# size in millimetres.
#
# Decoder selection:
#   - ".webp" files go to the dedicated WEBP decoder
#   - everything else goes to a sniffing decoder that trusts the
#     stream's magic bytes, not the extension
#
# Usage:
#   from pagebinder.imaging.normalizer import ImageNormalizer
#   normalizer = ImageNormalizer(quality=75)
#   page = normalizer.normalize_file(Path("page1.png"))
#   print(page.width_mm, page.height_mm)
# ============================================================

import io
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from PIL import Image
from rich.markup import escape

from config.settings import settings
from pagebinder.errors import DecodeError, EncodeError
from pagebinder.utils.image import encode_jpeg, get_image_info
from pagebinder.utils.logger import get_logger

logger = get_logger(__name__)

# Formats the sniffing decoder will accept
SNIFFED_FORMATS = ("JPEG", "PNG", "WEBP")

# Errors Pillow raises for unreadable, truncated or hostile input
_DECODE_FAILURES = (OSError, SyntaxError, ValueError, EOFError, Image.DecompressionBombError)


# ============================================================
# Data Classes
# ============================================================

@dataclass(frozen=True)
class NormalizedPage:
    """
    A source image converted into a single page payload.

    Attributes:
        name: Source file name (used for logging and reporting).
        jpeg_bytes: The re-encoded JPEG payload embedded in the page.
        width_px: Pixel width of the decoded image.
        height_px: Pixel height of the decoded image.
        width_mm: Physical page width in millimetres.
        height_mm: Physical page height in millimetres.
    """
    name: str
    jpeg_bytes: bytes
    width_px: int
    height_px: int
    width_mm: float
    height_mm: float


def page_size_mm(width_px: int, height_px: int, mm_per_pixel: float) -> tuple[float, float]:
    """Physical page size for an image of the given pixel size."""
    return width_px * mm_per_pixel, height_px * mm_per_pixel


# ============================================================
# Image Normalizer
# ============================================================

class ImageNormalizer:
    """
    Converts arbitrary supported images into uniformly formatted pages.

    Every page ends up as a JPEG at the same quality, whatever the source
    format was, so the document only ever embeds one kind of image.

    Example:
        >>> normalizer = ImageNormalizer(quality=75, mm_per_pixel=0.264583)
        >>> with open("scan.webp", "rb") as fh:
        ...     page = normalizer.normalize(fh, ".webp", name="scan.webp")
    """

    def __init__(
        self,
        quality: Optional[int] = None,
        mm_per_pixel: Optional[float] = None,
    ):
        """
        Initialize the normalizer.

        Args:
            quality: JPEG quality, 0-100. Default: from settings.
            mm_per_pixel: Millimetres of page per image pixel. Must be
                          positive. Default: from settings.

        Raises:
            ValueError: If a value is out of range.
        """
        self.quality = quality if quality is not None else settings.jpeg_quality
        self.mm_per_pixel = mm_per_pixel if mm_per_pixel is not None else settings.mm_per_pixel

        if not 0 <= self.quality <= 100:
            raise ValueError(f"quality must be within 0-100, got {self.quality}")
        if self.mm_per_pixel <= 0:
            raise ValueError(f"mm_per_pixel must be positive, got {self.mm_per_pixel}")

    def normalize(
        self,
        stream: BinaryIO,
        source_format_hint: str,
        name: str = "<stream>",
    ) -> NormalizedPage:
        """
        Decode an image stream and re-encode it as a page payload.

        The stream is read to completion before decoding; closing it is
        the caller's job.

        Args:
            stream: Binary stream holding the encoded image.
            source_format_hint: Declared type, usually the file suffix
                                (".webp", "png", ...).
            name: Label used in errors and logs.

        Returns:
            NormalizedPage with the JPEG payload and page dimensions.

        Raises:
            DecodeError: If the bytes are not a supported, decodable image.
            EncodeError: If JPEG encoding fails.
        """
        start = time.perf_counter()
        data = stream.read()

        hint = source_format_hint.lower().lstrip(".")
        formats = ("WEBP",) if hint == "webp" else SNIFFED_FORMATS

        try:
            with Image.open(io.BytesIO(data), formats=formats) as img:
                img.load()
                return self._encode_page(img, name, start)
        except _DECODE_FAILURES as e:
            raise DecodeError(name, f"cannot decode image: {e}") from e

    def normalize_file(self, path: Path) -> NormalizedPage:
        """
        Normalize an image file, using its suffix as the format hint.

        The file is always closed, including when decoding fails.

        Raises:
            DecodeError: If the file cannot be read or decoded.
            EncodeError: If JPEG encoding fails.
        """
        path = Path(path)
        try:
            with path.open("rb") as fh:
                return self.normalize(fh, path.suffix, name=path.name)
        except OSError as e:
            raise DecodeError(path.name, f"cannot read file: {e}") from e

    def _encode_page(self, img: Image.Image, name: str, start: float) -> NormalizedPage:
        info = get_image_info(img)
        width_px, height_px = info["width"], info["height"]
        if width_px <= 0 or height_px <= 0:
            raise DecodeError(name, f"image has no pixels ({width_px}x{height_px})")

        try:
            jpeg_bytes = encode_jpeg(img, self.quality)
        except (OSError, ValueError) as e:
            raise EncodeError(name, f"cannot encode JPEG: {e}") from e

        width_mm, height_mm = page_size_mm(width_px, height_px, self.mm_per_pixel)

        duration = (time.perf_counter() - start) * 1000
        logger.debug(
            f"  {escape(name)}: {info['mode']} ({info['channels']}ch, "
            f"~{info['estimated_size_mb']}MB raw) {width_px}x{height_px} -> "
            f"{width_mm:.2f}x{height_mm:.2f}mm, {len(jpeg_bytes)} bytes in {duration:.0f}ms"
        )

        return NormalizedPage(
            name=name,
            jpeg_bytes=jpeg_bytes,
            width_px=width_px,
            height_px=height_px,
            width_mm=width_mm,
            height_mm=height_mm,
        )
