"""Pixel-level thumbnail analysis with Pillow."""
from dataclasses import dataclass, field
from statistics import median
from typing import List, Optional, Tuple

from PIL import Image, ImageFilter, ImageOps, ImageStat

from ..core.exceptions import ImageAnalysisError

ANALYSIS_SIZE = (160, 90)
PALETTE_SIZE = 5
TEXT_STRIPS = 12

LAYOUT_TYPES = ["face-left", "face-right", "centered", "split", "overlay"]
TEXT_ROLES = ["title", "subtitle"]
TEXT_ZONES = ["top", "middle", "bottom"]


@dataclass
class DetectedText:
    """A high-contrast horizontal band that most likely carries caption text."""
    role: str
    zone: str
    height_ratio: float
    color: str
    contrast: float
    x: float
    y: float
    alignment: str

    @property
    def style_key(self) -> str:
        return f"{self.role}-{self.zone}"


@dataclass
class ImageFeatures:
    """Everything the pattern analyzer needs from one thumbnail."""
    dominant_color: str
    palette: List[str] = field(default_factory=list)
    layout: str = "centered"
    text: Optional[DetectedText] = None
    brightness: float = 0.0
    saturation: float = 0.0


def to_hex(rgb: Tuple[int, int, int]) -> str:
    r, g, b = rgb[:3]
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    value = hex_color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def quantize_hex(hex_color: str, step: int = 64) -> str:
    """Snap a colour to a coarse grid so similar colours group together."""
    def snap(channel: int) -> int:
        return max(0, min(255, int(round(channel / step) * step)))

    r, g, b = hex_to_rgb(hex_color)
    return to_hex((snap(r), snap(g), snap(b)))


def luminance(hex_color: str) -> float:
    """Relative luminance in [0, 1]."""
    r, g, b = hex_to_rgb(hex_color)
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255


def saturation(hex_color: str) -> float:
    """HSV saturation in [0, 1]."""
    r, g, b = hex_to_rgb(hex_color)
    high, low = max(r, g, b), min(r, g, b)
    return 0.0 if high == 0 else (high - low) / high


def extract_palette(image: Image.Image, num_colors: int = PALETTE_SIZE) -> List[str]:
    """Dominant colours by pixel share, most frequent first."""
    paletted = image.convert("P", palette=Image.Palette.ADAPTIVE, colors=max(1, num_colors))
    palette = paletted.getpalette() or []
    counts = paletted.getcolors(maxcolors=paletted.width * paletted.height) or []

    # ties broken by palette index so the order is stable
    counts.sort(key=lambda item: (-item[0], item[1]))
    colors: List[str] = []
    for _, index in counts[:num_colors]:
        base = int(index) * 3
        if base + 2 < len(palette):
            color = to_hex((palette[base], palette[base + 1], palette[base + 2]))
            if color not in colors:
                colors.append(color)

    if not colors:
        colors = [to_hex(image.resize((1, 1)).getpixel((0, 0)))]

    return colors


def edge_map(image: Image.Image) -> Image.Image:
    """Edge magnitude with the unfiltered one-pixel border blanked."""
    edges = image.convert("L").filter(ImageFilter.FIND_EDGES)
    return ImageOps.expand(ImageOps.crop(edges, 1), border=1, fill=0)


def _energy(edges: Image.Image, box: Tuple[int, int, int, int]) -> float:
    return ImageStat.Stat(edges.crop(box)).mean[0]


def classify_layout(image: Image.Image, edges: Optional[Image.Image] = None) -> str:
    """
    Classify the subject/text arrangement from where the detail sits.

    Two halves with very different average colour read as a split layout.
    Otherwise the third holding clearly more edge energy than the others
    marks the subject; evenly spread detail reads as a full-frame overlay.
    """
    width, height = image.size
    if edges is None:
        edges = edge_map(image)

    left_half = ImageStat.Stat(image.crop((0, 0, width // 2, height))).mean
    right_half = ImageStat.Stat(image.crop((width // 2, 0, width, height))).mean
    half_distance = sum((a - b) ** 2 for a, b in zip(left_half, right_half)) ** 0.5
    if half_distance > 90:
        return "split"

    third = width // 3
    left = _energy(edges, (0, 0, third, height))
    center = _energy(edges, (third, 0, 2 * third, height))
    right = _energy(edges, (2 * third, 0, width, height))

    if max(left, center, right) < 1.0:
        return "centered"
    if left > 1.25 * max(center, right):
        return "face-left"
    if right > 1.25 * max(center, left):
        return "face-right"
    if center >= 1.1 * max(left, right):
        return "centered"
    return "overlay"


def detect_text_band(image: Image.Image, edges: Optional[Image.Image] = None) -> Optional[DetectedText]:
    """
    Find the horizontal band with the strongest edge density and contrast.

    Caption text produces dense, high-contrast horizontal strips. The best
    strip, grown over neighbours that score nearly as well, gives the
    band's zone and height. Nothing is returned for images without a
    clearly dominant strip.
    """
    width, height = image.size
    gray = image.convert("L")
    if edges is None:
        edges = edge_map(gray)

    strip_height = max(1, height // TEXT_STRIPS)
    strips = []
    for top in range(0, height - strip_height + 1, strip_height):
        box = (0, top, width, top + strip_height)
        edge_mean = _energy(edges, box)
        contrast = ImageStat.Stat(gray.crop(box)).stddev[0]
        strips.append((box, edge_mean * contrast))

    scores = [score for _, score in strips]
    baseline = median(scores) if scores else 0.0
    best = max(range(len(strips)), key=lambda i: scores[i]) if strips else None
    if best is None or scores[best] <= 0 or scores[best] < 1.8 * max(baseline, 1.0):
        return None

    first = last = best
    while first > 0 and scores[first - 1] >= 0.6 * scores[best]:
        first -= 1
    while last < len(strips) - 1 and scores[last + 1] >= 0.6 * scores[best]:
        last += 1

    band_box = (0, strips[first][0][1], width, strips[last][0][3])
    band = image.crop(band_box)
    band_height = band_box[3] - band_box[1]
    height_ratio = band_height / height
    center_y = (band_box[1] + band_box[3]) / 2 / height

    low, high = gray.crop(band_box).getextrema()
    contrast = (high - low) / 255

    # the rarer of the band's two main colours is the lettering
    band_colors = extract_palette(band, 2)
    color = band_colors[-1]

    band_edges = edges.crop(band_box)
    half = width // 2
    left_energy = _energy(band_edges, (0, 0, half, band_height))
    right_energy = _energy(band_edges, (half, 0, width, band_height))
    if left_energy > 1.5 * right_energy:
        alignment, x = "left", 25.0
    elif right_energy > 1.5 * left_energy:
        alignment, x = "right", 75.0
    else:
        alignment, x = "center", 50.0

    if center_y < 1 / 3:
        zone = "top"
    elif center_y < 2 / 3:
        zone = "middle"
    else:
        zone = "bottom"

    return DetectedText(
        role="title" if height_ratio >= 0.12 else "subtitle",
        zone=zone,
        height_ratio=round(height_ratio, 4),
        color=color,
        contrast=round(contrast, 4),
        x=x,
        y=round(center_y * 100, 2),
        alignment=alignment
    )


def analyze_image(image: Image.Image, source: str = "") -> ImageFeatures:
    """Extract palette, layout and caption band from one thumbnail."""
    try:
        small = image.convert("RGB").resize(ANALYSIS_SIZE)
        edges = edge_map(small)

        palette = extract_palette(small)
        hsv = ImageStat.Stat(small.convert("HSV"))
        gray = ImageStat.Stat(small.convert("L"))

        return ImageFeatures(
            dominant_color=palette[0],
            palette=palette,
            layout=classify_layout(small, edges),
            text=detect_text_band(small, edges),
            brightness=round(gray.mean[0] / 255, 4),
            saturation=round(hsv.mean[1] / 255, 4)
        )
    except (OSError, ValueError) as e:
        raise ImageAnalysisError(source, f"Analysis failed: {e}")
