# tests/conftest.py
# ============================================================
# Shared Test Fixtures
# ============================================================
# Image factories used across the test suite. Every image is
# created with Pillow inside pytest's tmp_path.
# ============================================================

import io
import random
from pathlib import Path

import pytest
from PIL import Image


def noise_image(size=(64, 48), mode="RGB") -> Image.Image:
    """Deterministic, poorly compressible test image."""
    if mode == "P":
        return noise_image(size, "RGB").convert("P")
    width, height = size
    channels = len(mode)
    raw = random.Random(1234).randbytes(width * height * channels)
    return Image.frombytes(mode, size, raw)


def image_bytes(size=(64, 48), fmt="PNG", mode="RGB") -> bytes:
    buffer = io.BytesIO()
    noise_image(size, mode).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_image(tmp_path):
    """Factory: write an image file into tmp_path and return its path."""

    def _make(name: str, size=(64, 48), fmt="PNG", mode="RGB", directory: Path = None) -> Path:
        target = (directory or tmp_path) / name
        target.write_bytes(image_bytes(size, fmt, mode))
        return target

    return _make
