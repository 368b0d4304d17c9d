# config/__init__.py
# ============================================================
# Configuration package for the pagebinder pipeline.
# Provides centralized, validated settings loaded from .env file.
#
# Usage:
#   from config.settings import settings
#   print(settings.jpeg_quality)
# ============================================================

from config.settings import Ordering, Settings, settings

__all__ = ["Ordering", "Settings", "settings"]
