"""Derives a compact StyleProfile from a channel pattern."""
from typing import Dict, List, Optional

from ..models.channel import ChannelPattern, StyleProfile, TextStyle
from .image_analysis import luminance, saturation

LAYOUTS: Dict[str, str] = {
    "subject_left_text_right": "Subject on left, text on right",
    "subject_right_text_left": "Subject on right, text on left",
    "subject_center": "Centered subject with text overlay",
    "split_vertical": "Vertical split composition",
    "full_bleed": "Full bleed background with text",
}

FONT_HINTS: Dict[str, str] = {
    "bold_sans": "Bold sans-serif for impact",
    "condensed_sans": "Condensed sans-serif for efficiency",
    "clean_modern": "Clean modern sans for tech/professional",
    "decorative": "Decorative for entertainment/gaming",
    "elegant_serif": "Elegant serif for luxury/editorial",
}

TONES: Dict[str, str] = {
    "high_contrast": "High contrast with dramatic lighting",
    "soft_modern": "Soft and modern with subtle gradients",
    "vibrant_pop": "Vibrant pop style with bold colors",
    "tech_neon": "Tech-inspired with neon accents",
    "minimal_clean": "Minimal and clean with focused elements",
}

LAYOUT_BY_PATTERN: Dict[str, str] = {
    "face-left": "subject_left_text_right",
    "face-right": "subject_right_text_left",
    "centered": "subject_center",
    "split": "split_vertical",
    "overlay": "full_bleed",
}

DEFAULT_PALETTE = ["#1a237e", "#0d47a1", "#b71c1c"]


class StyleProfiler:
    """Turns the leading entries of a ChannelPattern into a StyleProfile."""

    def build_profile(self, pattern: ChannelPattern) -> StyleProfile:
        palette = self._palette(pattern)
        layout = LAYOUT_BY_PATTERN.get(pattern.layouts[0].type, "subject_center") if pattern.layouts else "subject_center"
        font_hint = self._font_hint(pattern.text_styles[0] if pattern.text_styles else None)
        tone = self._tone(palette)

        return StyleProfile(
            style_id=f"{layout}_{tone}",
            palette=palette,
            layout=layout,
            font_hint=font_hint,
            tone=tone
        )

    @staticmethod
    def _palette(pattern: ChannelPattern) -> List[str]:
        """Leading palette's colours, padded to three from the other roles."""
        colors: List[str] = []
        if pattern.color_palettes:
            lead = pattern.color_palettes[0]
            for color in lead.primary[:1] + lead.secondary + lead.accent + lead.primary[1:]:
                if color not in colors:
                    colors.append(color)
            for other in pattern.color_palettes[1:]:
                for color in other.primary:
                    if color not in colors:
                        colors.append(color)

        for color in DEFAULT_PALETTE:
            if len(colors) >= 3:
                break
            if color not in colors:
                colors.append(color)
        return colors[:3]

    @staticmethod
    def _font_hint(text_style: Optional[TextStyle]) -> str:
        if text_style is None:
            return "clean_modern"

        effect_types = {effect.type for effect in text_style.effects}
        if text_style.role == "title" and "outline" in effect_types:
            return "decorative" if text_style.size >= 130 else "bold_sans"
        if text_style.role == "title":
            return "condensed_sans" if text_style.position.alignment != "center" else "bold_sans"
        if not effect_types:
            return "elegant_serif"
        return "clean_modern"

    @staticmethod
    def _tone(palette: List[str]) -> str:
        mean_saturation = sum(saturation(c) for c in palette) / len(palette)
        lums = [luminance(c) for c in palette]
        spread = max(lums) - min(lums)

        if min(lums) < 0.2 and any(saturation(c) > 0.7 and luminance(c) > 0.45 for c in palette):
            return "tech_neon"
        if mean_saturation > 0.6:
            return "vibrant_pop"
        if spread > 0.55:
            return "high_contrast"
        if mean_saturation < 0.2:
            return "minimal_clean"
        return "soft_modern"


def get_style_description(profile: StyleProfile) -> str:
    """Readable summary of a profile for prompt text."""
    return "\n".join([
        f"Layout: {LAYOUTS.get(profile.layout, profile.layout)}",
        f"Colors: {', '.join(profile.palette)}",
        f"Typography: {FONT_HINTS.get(profile.font_hint, profile.font_hint)}",
        f"Tone: {TONES.get(profile.tone, profile.tone)}",
    ])
