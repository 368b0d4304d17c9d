# tests/test_normalizer.py
# ============================================================
# Unit Tests — Image Normalizer
# ============================================================
# Tests decoding of JPEG/PNG/WEBP sources, JPEG re-encoding,
# page sizing and the DecodeError / EncodeError paths. Uses
# Pillow-generated fixtures, no files on disk unless needed.
#
# Run:
#   pytest tests/test_normalizer.py -v
# ============================================================

import io
from unittest.mock import patch

import pytest
from PIL import Image

from conftest import image_bytes, noise_image
from pagebinder.errors import DecodeError, EncodeError
from pagebinder.imaging.normalizer import ImageNormalizer, NormalizedPage, page_size_mm
from pagebinder.utils.image import ensure_jpeg_mode, get_image_info


# ============================================================
# Fixtures
# ============================================================

@pytest.fixture
def normalizer():
    """Create an ImageNormalizer with the default constants."""
    return ImageNormalizer(quality=75, mm_per_pixel=0.264583)


def _decode(page: NormalizedPage) -> Image.Image:
    return Image.open(io.BytesIO(page.jpeg_bytes))


# ============================================================
# Decoding & Re-encoding
# ============================================================

class TestNormalize:
    """Test turning source bytes into a JPEG page payload."""

    @pytest.mark.parametrize("fmt, hint", [("PNG", ".png"), ("JPEG", ".jpg"), ("WEBP", ".webp")])
    def test_supported_formats_become_jpeg(self, normalizer, fmt, hint):
        """Every supported source format should come out as JPEG."""
        data = image_bytes((40, 30), fmt=fmt)
        page = normalizer.normalize(io.BytesIO(data), hint, name=f"img{hint}")

        assert page.name == f"img{hint}"
        assert (page.width_px, page.height_px) == (40, 30)
        out = _decode(page)
        assert out.format == "JPEG"
        assert out.size == (40, 30)

    def test_sniffing_ignores_extension(self, normalizer):
        """PNG bytes behind a .jpg name should still decode."""
        data = image_bytes((20, 10), fmt="PNG")
        page = normalizer.normalize(io.BytesIO(data), ".jpg")
        assert (page.width_px, page.height_px) == (20, 10)

    def test_webp_hint_uses_webp_decoder_only(self, normalizer):
        """A .webp file holding PNG bytes is rejected by the WEBP decoder."""
        data = image_bytes((20, 10), fmt="PNG")
        with pytest.raises(DecodeError):
            normalizer.normalize(io.BytesIO(data), ".webp")

    def test_hint_is_case_insensitive(self, normalizer):
        data = image_bytes((20, 10), fmt="WEBP")
        page = normalizer.normalize(io.BytesIO(data), ".WEBP")
        assert page.width_px == 20

    @pytest.mark.parametrize("mode", ["RGBA", "LA", "P"])
    def test_modes_without_jpeg_support_are_converted(self, normalizer, mode):
        data = image_bytes((16, 16), fmt="PNG", mode=mode)
        page = normalizer.normalize(io.BytesIO(data), ".png")
        assert _decode(page).mode == "RGB"

    def test_grayscale_is_kept(self, normalizer):
        data = image_bytes((16, 16), fmt="PNG", mode="L")
        page = normalizer.normalize(io.BytesIO(data), ".png")
        assert _decode(page).mode == "L"

    def test_normalization_is_deterministic(self, normalizer):
        """Same input bytes should give identical output bytes and sizes."""
        data = image_bytes((50, 70), fmt="PNG")
        first = normalizer.normalize(io.BytesIO(data), ".png")
        second = normalizer.normalize(io.BytesIO(data), ".png")
        assert first == second

    def test_quality_controls_output_size(self):
        data = image_bytes((128, 128), fmt="PNG")
        low = ImageNormalizer(quality=10).normalize(io.BytesIO(data), ".png")
        high = ImageNormalizer(quality=95).normalize(io.BytesIO(data), ".png")
        assert len(low.jpeg_bytes) < len(high.jpeg_bytes)

    def test_stream_is_read_to_the_end(self, normalizer):
        stream = io.BytesIO(image_bytes((8, 8)))
        normalizer.normalize(stream, ".png")
        assert stream.read() == b""


# ============================================================
# Page Sizing
# ============================================================

class TestPageSize:
    """Test the pixel to millimetre conversion."""

    @pytest.mark.parametrize("size", [(1, 1), (800, 600), (1240, 1754), (3, 2000)])
    def test_dimension_formula(self, size):
        width, height = size
        assert page_size_mm(width, height, 0.264583) == pytest.approx(
            (width * 0.264583, height * 0.264583)
        )

    def test_page_matches_formula(self, normalizer):
        page = normalizer.normalize(io.BytesIO(image_bytes((300, 200))), ".png")
        assert page.width_mm == pytest.approx(300 * 0.264583)
        assert page.height_mm == pytest.approx(200 * 0.264583)

    def test_aspect_ratio_is_preserved(self, normalizer):
        page = normalizer.normalize(io.BytesIO(image_bytes((300, 200))), ".png")
        assert page.width_mm / page.height_mm == pytest.approx(300 / 200)

    def test_custom_conversion_factor(self):
        normalizer = ImageNormalizer(mm_per_pixel=25.4 / 300)
        page = normalizer.normalize(io.BytesIO(image_bytes((300, 600))), ".png")
        assert page.width_mm == pytest.approx(25.4)
        assert page.height_mm == pytest.approx(50.8)


# ============================================================
# Error Handling
# ============================================================

class TestErrors:
    """Test DecodeError / EncodeError and argument validation."""

    def test_garbage_bytes_raise_decode_error(self, normalizer):
        with pytest.raises(DecodeError) as exc_info:
            normalizer.normalize(io.BytesIO(b"definitely not an image"), ".png", name="junk.png")
        assert exc_info.value.name == "junk.png"

    def test_empty_stream_raises_decode_error(self, normalizer):
        with pytest.raises(DecodeError):
            normalizer.normalize(io.BytesIO(b""), ".jpg")

    def test_truncated_png_raises_decode_error(self, normalizer):
        data = image_bytes((64, 64), fmt="PNG")
        with pytest.raises(DecodeError):
            normalizer.normalize(io.BytesIO(data[: len(data) // 2]), ".png")

    def test_unsupported_format_raises_decode_error(self, normalizer):
        """Formats outside JPEG/PNG/WEBP are rejected even if Pillow knows them."""
        data = image_bytes((10, 10), fmt="BMP")
        with pytest.raises(DecodeError):
            normalizer.normalize(io.BytesIO(data), ".png")

    def test_encode_failure_raises_encode_error(self, normalizer):
        data = image_bytes((10, 10))
        with patch(
            "pagebinder.imaging.normalizer.encode_jpeg",
            side_effect=OSError("encoder error -2"),
        ):
            with pytest.raises(EncodeError, match="encoder error"):
                normalizer.normalize(io.BytesIO(data), ".png")

    def test_missing_file_raises_decode_error(self, normalizer, tmp_path):
        with pytest.raises(DecodeError, match="cannot read file"):
            normalizer.normalize_file(tmp_path / "missing.png")

    @pytest.mark.parametrize("quality", [-1, 101])
    def test_invalid_quality(self, quality):
        with pytest.raises(ValueError, match="quality"):
            ImageNormalizer(quality=quality)

    @pytest.mark.parametrize("factor", [0, -0.5])
    def test_invalid_conversion_factor(self, factor):
        with pytest.raises(ValueError, match="mm_per_pixel"):
            ImageNormalizer(mm_per_pixel=factor)

    def test_quality_zero_is_allowed(self):
        assert ImageNormalizer(quality=0).quality == 0


# ============================================================
# File Access
# ============================================================

class TestNormalizeFile:
    """Test normalizing files from disk."""

    def test_normalize_file(self, normalizer, make_image):
        path = make_image("scan.webp", size=(33, 44), fmt="WEBP")
        page = normalizer.normalize_file(path)
        assert page.name == "scan.webp"
        assert (page.width_px, page.height_px) == (33, 44)

    def test_file_is_closed_after_decode_failure(self, normalizer, tmp_path):
        bad = tmp_path / "bad.jpg"
        bad.write_bytes(b"\xff\xd8 not really")
        opened = []
        real_open = type(bad).open

        def tracking_open(self, *args, **kwargs):
            fh = real_open(self, *args, **kwargs)
            opened.append(fh)
            return fh

        with patch.object(type(bad), "open", tracking_open):
            with pytest.raises(DecodeError):
                normalizer.normalize_file(bad)

        assert opened and all(fh.closed for fh in opened)


# ============================================================
# Image Helpers
# ============================================================

class TestImageHelpers:
    """Test the shared image utilities."""

    def test_ensure_jpeg_mode_keeps_rgb(self):
        img = noise_image((4, 4))
        assert ensure_jpeg_mode(img) is img

    def test_ensure_jpeg_mode_converts_cmyk(self):
        img = Image.new("CMYK", (4, 4))
        assert ensure_jpeg_mode(img).mode == "RGB"

    def test_get_image_info(self):
        info = get_image_info(Image.new("RGB", (1920, 1080)))
        assert info["width"] == 1920
        assert info["height"] == 1080
        assert info["channels"] == 3

    def test_debug_log_reports_channels_and_raw_size(self):
        normalizer = ImageNormalizer(quality=75, mm_per_pixel=0.264583)
        with patch("pagebinder.imaging.normalizer.logger") as mock_logger:
            normalizer.normalize(io.BytesIO(image_bytes((40, 30))), ".png", name="p1.png")
        messages = [call.args[0] for call in mock_logger.debug.call_args_list]
        assert any("p1.png" in m and "3ch" in m and "MB raw" in m for m in messages)
