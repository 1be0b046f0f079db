"""Unit tests for pixel-level thumbnail analysis."""
import pytest
from PIL import Image, ImageDraw

from conftest import solid_image, split_image
from thumbgen.core.exceptions import ImageAnalysisError
from thumbgen.services.image_analysis import (
    analyze_image, classify_layout, detect_text_band, extract_palette,
    luminance, quantize_hex, saturation
)

DARK = (20, 20, 20)
WHITE = (255, 255, 255)


def striped_band(top, bottom, size=(320, 180), stripe=8):
    """Dark frame with a band of vertical white strokes, like a caption line."""
    image = Image.new("RGB", size, DARK)
    draw = ImageDraw.Draw(image)
    for x in range(0, size[0], stripe * 2):
        draw.rectangle([x, top, x + stripe - 1, bottom], fill=WHITE)
    return image


def left_detail(size=(320, 180)):
    """Dark frame with a checkerboard patch in the left third."""
    image = Image.new("RGB", size, DARK)
    draw = ImageDraw.Draw(image)
    for x in range(10, 90, 8):
        for y in range(30, 150, 8):
            if (x // 8 + y // 8) % 2 == 0:
                draw.rectangle([x, y, x + 7, y + 7], fill=WHITE)
    return image


class TestColorHelpers:
    def test_quantize_groups_similar_colors(self):
        assert quantize_hex("#fe0101") == quantize_hex("#f00a0a")
        assert quantize_hex("#ff0000") != quantize_hex("#0000ff")

    def test_luminance_and_saturation(self):
        assert luminance("#ffffff") == pytest.approx(1.0)
        assert luminance("#000000") == 0.0
        assert saturation("#ff0000") == 1.0
        assert saturation("#808080") == 0.0


class TestExtractPalette:
    def test_solid_image(self):
        palette = extract_palette(solid_image((255, 0, 0)))

        assert quantize_hex(palette[0]) == quantize_hex("#ff0000")

    def test_majority_color_first(self):
        image = solid_image((0, 0, 255))
        image.paste(Image.new("RGB", (60, 180), (255, 255, 0)), (0, 0))

        palette = extract_palette(image)

        assert quantize_hex(palette[0]) == quantize_hex("#0000ff")
        assert len(palette) >= 2


class TestClassifyLayout:
    def test_flat_image_is_centered(self):
        assert classify_layout(solid_image((90, 90, 90))) == "centered"

    def test_contrasting_halves_split(self):
        assert classify_layout(split_image((255, 0, 0), (0, 0, 255))) == "split"

    def test_detail_on_left(self):
        assert classify_layout(left_detail()) == "face-left"

    def test_detail_on_right(self):
        assert classify_layout(left_detail().transpose(Image.Transpose.FLIP_LEFT_RIGHT)) == "face-right"


class TestDetectTextBand:
    def test_no_band_in_flat_image(self):
        assert detect_text_band(solid_image((90, 90, 90)).resize((160, 90))) is None

    def test_title_band_near_top(self):
        text = detect_text_band(striped_band(20, 60).resize((160, 90)))

        assert text is not None
        assert text.zone == "top"
        assert text.role == "title"
        assert text.alignment == "center"
        assert text.style_key == "title-top"
        assert text.contrast > 0.5

    def test_band_near_bottom(self):
        text = detect_text_band(striped_band(140, 170).resize((160, 90)))

        assert text is not None
        assert text.zone == "bottom"


class TestAnalyzeImage:
    def test_features_of_flat_image(self):
        features = analyze_image(solid_image((255, 0, 0), size=(640, 360)))

        assert quantize_hex(features.dominant_color) == quantize_hex("#ff0000")
        assert features.layout == "centered"
        assert features.text is None
        assert 0.0 <= features.brightness <= 1.0
        assert features.saturation > 0.9

    def test_analysis_failure_is_wrapped(self):
        class BrokenImage:
            def convert(self, mode):
                raise OSError("truncated file")

        with pytest.raises(ImageAnalysisError) as exc_info:
            analyze_image(BrokenImage(), "https://example.com/broken.jpg")

        assert exc_info.value.details["image_url"] == "https://example.com/broken.jpg"
