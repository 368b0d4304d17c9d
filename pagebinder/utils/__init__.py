# pagebinder/utils/__init__.py
# ============================================================
# Shared Utilities Package
# ============================================================
# Provides reusable helpers used across the pipeline:
#   - logger: Structured logging with Rich formatting
#   - image: JPEG encoding, mode conversion, metadata extraction
# ============================================================

from pagebinder.utils.logger import get_logger
from pagebinder.utils.image import encode_jpeg, ensure_jpeg_mode, get_image_info

__all__ = [
    "get_logger",
    "encode_jpeg",
    "ensure_jpeg_mode",
    "get_image_info",
]
