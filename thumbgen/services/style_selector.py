"""Style variation catalog and selection."""
from typing import Dict, List, Optional, Union

from ..models.generation import CreativeDirection, StyleVariation

STYLE_CATALOG: Dict[CreativeDirection, StyleVariation] = {
    CreativeDirection.ORIGINAL: StyleVariation(
        key="original",
        label="Original Style",
        emphasis="authenticity",
        style_directive="Create a photorealistic scene that matches the channel's established visual identity."
    ),
    CreativeDirection.DYNAMIC: StyleVariation(
        key="dynamic",
        label="Dynamic",
        emphasis="energy",
        style_directive="Design a high-energy, action-focused composition with dramatic lighting and perspective."
    ),
    CreativeDirection.ARTISTIC: StyleVariation(
        key="artistic",
        label="Artistic",
        emphasis="creativity",
        style_directive="Develop a unique artistic interpretation with bold creative choices and visual metaphors."
    ),
    CreativeDirection.GAMING: StyleVariation(
        key="gaming",
        label="Gaming",
        emphasis="intensity",
        style_directive=(
            "Create a high-energy gaming scene with neon lighting, dramatic angles, "
            "and vibrant game-inspired elements."
        )
    ),
    CreativeDirection.TUTORIAL: StyleVariation(
        key="tutorial",
        label="Tutorial",
        emphasis="clarity",
        style_directive=(
            "Design a clean, professional layout with clear focus on educational content "
            "and trustworthy presentation."
        )
    ),
    CreativeDirection.VLOG: StyleVariation(
        key="vlog",
        label="Vlog",
        emphasis="personal",
        style_directive=(
            "Capture a warm, personal atmosphere with authentic lighting and "
            "lifestyle-focused composition."
        )
    ),
    CreativeDirection.BUSINESS: StyleVariation(
        key="business",
        label="Business",
        emphasis="authority",
        style_directive=(
            "Create a sophisticated, modern design with professional color schemes "
            "and authoritative styling."
        )
    ),
    CreativeDirection.ENTERTAINMENT: StyleVariation(
        key="entertainment",
        label="Entertainment",
        emphasis="impact",
        style_directive=(
            "Design for maximum visual impact with bold colors, dramatic contrasts, "
            "and attention-grabbing elements."
        )
    ),
}

# Dict insertion order is the default catalog order
DEFAULT_ORDER: List[StyleVariation] = list(STYLE_CATALOG.values())

MAX_VARIATIONS = 3


class StyleSelector:
    """Resolves a creative direction into the style variations to render."""

    def __init__(self, catalog: Optional[Dict[CreativeDirection, StyleVariation]] = None):
        self.catalog = catalog or STYLE_CATALOG
        self.default_order = list(self.catalog.values())

    def select(
        self,
        creative_direction: Optional[Union[CreativeDirection, str]],
        variation_count: int = 1
    ) -> List[StyleVariation]:
        """
        Return 1..3 style variations.

        A known direction returns exactly its own style whatever the count.
        No direction, or one the catalog does not know, returns the first
        ``variation_count`` styles of the default order.
        """
        direction = self._resolve_direction(creative_direction)
        if direction is not None and direction in self.catalog:
            return [self.catalog[direction]]

        count = max(1, min(MAX_VARIATIONS, int(variation_count or 1)))
        return self.default_order[:count]

    def expand(self, styles: List[StyleVariation], variation_count: int) -> List[StyleVariation]:
        """Cycle through the selected styles until there is one per requested render."""
        if not styles:
            return []
        count = max(1, min(MAX_VARIATIONS, int(variation_count or 1)))
        return [styles[i % len(styles)] for i in range(count)]

    def get_catalog(self) -> List[StyleVariation]:
        return list(self.default_order)

    @staticmethod
    def _resolve_direction(value: Optional[Union[CreativeDirection, str]]) -> Optional[CreativeDirection]:
        if value is None or isinstance(value, CreativeDirection):
            return value
        try:
            return CreativeDirection(str(value).strip().lower())
        except ValueError:
            return None
