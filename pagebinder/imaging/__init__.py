# pagebinder/imaging/__init__.py
# ============================================================
# Imaging Package
# ============================================================
# Decodes source images and normalizes them into JPEG page
# payloads with physical page dimensions.
#
# Key classes:
#   - ImageNormalizer: decode -> re-encode -> size
#   - NormalizedPage: dataclass holding one page payload
# ============================================================

from pagebinder.imaging.normalizer import ImageNormalizer, NormalizedPage, page_size_mm

__all__ = ["ImageNormalizer", "NormalizedPage", "page_size_mm"]
