# config/settings.py
# ============================================================
# Centralized Configuration for the pagebinder pipeline
# ============================================================
# All settings are loaded from environment variables (or .env file)
# prefixed with PAGEBINDER_. Pydantic validates types and ranges
# and provides the defaults the converter has always used.
#
# Usage:
#   from config.settings import settings
#   normalizer = ImageNormalizer(quality=settings.jpeg_quality)
# ============================================================

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Ordering(str, Enum):
    """How candidate files are sequenced into pages."""

    NATURAL = "natural"   # "page2" before "page10"
    LEXICAL = "lexical"   # plain code point order


# Pixels at 96 DPI expressed in millimetres (25.4 / 96, truncated).
DEFAULT_MM_PER_PIXEL = 0.264583

DEFAULT_IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp"})


class Settings(BaseSettings):
    """
    Application-wide settings. Values are loaded from environment variables
    or a .env file. Every setting has a typed default so the converter can
    run out-of-the-box with zero configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAGEBINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Normalization ---
    jpeg_quality: int = Field(
        default=75,
        ge=0,
        le=100,
        description="JPEG quality (0-100) used when re-encoding every page image.",
    )
    mm_per_pixel: float = Field(
        default=DEFAULT_MM_PER_PIXEL,
        gt=0,
        description="Page size in millimetres per image pixel (96 DPI basis by default).",
    )

    # --- Discovery ---
    image_extensions: frozenset[str] = Field(
        default=DEFAULT_IMAGE_EXTENSIONS,
        description="File name suffixes recognized as page images.",
    )
    case_sensitive_extensions: bool = Field(
        default=True,
        description="Match suffixes exactly (True) or ignoring case (False).",
    )
    ordering: Ordering = Field(
        default=Ordering.NATURAL,
        description="Page ordering: natural | lexical.",
    )

    # --- Output ---
    atomic_write: bool = Field(
        default=True,
        description="Write the PDF to a temporary file and rename it into place.",
    )

    # --- Logging ---
    verbose_logging: bool = Field(
        default=True,
        description="Log every added page at INFO level (DEBUG otherwise).",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG | INFO | WARNING | ERROR.",
    )

    @field_validator("image_extensions")
    @classmethod
    def _check_extensions(cls, value: frozenset[str]) -> frozenset[str]:
        if not value:
            raise ValueError("image_extensions must not be empty")
        for ext in value:
            if not ext.startswith(".") or len(ext) < 2:
                raise ValueError(f"invalid image extension: {ext!r}")
        return value


# ============================================================
# Singleton instance — import this everywhere:
#   from config.settings import settings
# ============================================================
settings = Settings()
