"""Channel pattern analysis over reference thumbnails."""
import asyncio
import hashlib
import re
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..core.config import settings
from ..core.exceptions import InsufficientSampleSizeError, ThumbGenBaseException
from ..models.channel import (
    ChannelPattern, ColorPalette, LayoutPattern, SeriesPattern,
    TemporalTrend, TextEffect, TextPosition, TextStyle
)
from ..providers.base import ImageLoader
from ..utils.logging import CorrelatedLogger, MetricsLogger
from .cache_service import TTLCache
from .image_analysis import LAYOUT_TYPES, ImageFeatures, analyze_image, quantize_hex

SERIES_CATALOG: List[Tuple[str, "re.Pattern[str]"]] = [
    ("episode", re.compile(r"\b(?:ep(?:isode)?|part|pt)\.?\s*#?\d+", re.IGNORECASE)),
    ("numbered", re.compile(r"#\d+")),
    ("list", re.compile(r"^\s*(?:top\s+)?\d+\s+\w+", re.IGNORECASE)),
    ("versus", re.compile(r"\bvs\.?\s", re.IGNORECASE)),
    ("how-to", re.compile(r"\bhow\s+to\b", re.IGNORECASE)),
    ("question", re.compile(r"\?\s*$")),
    ("bracket-tag", re.compile(r"[\[(][^\])]+[\])]")),
]

# fewer distinct patterns than this cannot support a confident profile
MIN_CONFIDENT_INSTANCES = 6
LOW_EVIDENCE_CAP = 0.4
MIN_SERIES_MATCHES = 2
MAX_CONCURRENT_LOADS = 4


@dataclass
class PatternResult:
    """A channel pattern plus whether it came from the cache."""
    pattern: ChannelPattern
    cache_hit: bool = False


class ChannelPatternAnalyzer:
    """
    Builds a ChannelPattern from a channel's reference thumbnails.

    Thumbnails are expected newest first. Results are cached per channel
    id; a fresh cache entry answers without loading a single image.
    """

    def __init__(
        self,
        image_loader: ImageLoader,
        cache: Optional[TTLCache] = None,
        min_samples: Optional[int] = None
    ):
        self.image_loader = image_loader
        self.cache = cache if cache is not None else TTLCache(settings.pattern_cache_ttl_hours)
        self.min_samples = min_samples or settings.min_pattern_samples
        self.logger = CorrelatedLogger(__name__)
        self.metrics = MetricsLogger()

    async def analyze(
        self,
        thumbnails: List[str],
        channel_id: Optional[str] = None,
        titles: Optional[List[str]] = None,
        force_refresh: bool = False,
        request_id: Optional[str] = None
    ) -> PatternResult:
        """
        Analyze reference thumbnails into a channel pattern.

        Raises:
            InsufficientSampleSizeError: fewer than the minimum thumbnails were
                supplied, or fewer than the minimum could be analyzed
        """
        logger = self.logger.bind(request_id)
        start_time = datetime.now()

        if channel_id and not force_refresh:
            cached = self.cache.get(channel_id)
            if cached is not None:
                logger.info(f"Pattern cache hit for channel {channel_id}")
                self.metrics.log_pattern_analysis_metrics(
                    channel_id, len(thumbnails), 0, 0, cache_hit=True, confidence=cached.confidence
                )
                return PatternResult(pattern=cached, cache_hit=True)

        urls = [url for url in thumbnails if url]
        if len(urls) < self.min_samples:
            raise InsufficientSampleSizeError(self.min_samples, len(urls))

        features = await self._analyze_all(urls, logger)
        if len(features) < self.min_samples:
            raise InsufficientSampleSizeError(self.min_samples, len(features))

        pattern = self.build_pattern(
            features,
            pattern_id=self._pattern_id(channel_id, urls),
            titles=titles or []
        )

        if channel_id:
            self.cache.set(channel_id, pattern)

        processing_time = int((datetime.now() - start_time).total_seconds() * 1000)
        logger.info(
            f"Analyzed {len(features)}/{len(urls)} thumbnails for channel {channel_id} "
            f"(confidence {pattern.confidence:.2f})"
        )
        self.metrics.log_pattern_analysis_metrics(
            channel_id, len(urls), len(features), processing_time,
            cache_hit=False, confidence=pattern.confidence
        )
        return PatternResult(pattern=pattern, cache_hit=False)

    def get_cached_pattern(self, channel_id: str) -> Optional[ChannelPattern]:
        """Fresh cached pattern for a channel, or None."""
        return self.cache.get(channel_id)

    async def _analyze_all(self, urls: List[str], logger: CorrelatedLogger) -> List[ImageFeatures]:
        """Load and analyze every URL, keeping input order and skipping failures."""
        semaphore = asyncio.Semaphore(MAX_CONCURRENT_LOADS)
        results: List[Optional[ImageFeatures]] = [None] * len(urls)

        async def analyze_one(index: int, url: str) -> None:
            async with semaphore:
                try:
                    image = await self.image_loader.load(url)
                    results[index] = await asyncio.to_thread(analyze_image, image, url)
                except ThumbGenBaseException as e:
                    logger.warning(f"Skipping thumbnail {index}: {e.message}")
                except Exception as e:
                    logger.warning(f"Skipping thumbnail {index}: {str(e)}")

        await asyncio.gather(*(analyze_one(i, url) for i, url in enumerate(urls)))
        return [item for item in results if item is not None]

    def build_pattern(
        self,
        features: List[ImageFeatures],
        pattern_id: str,
        titles: Optional[List[str]] = None
    ) -> ChannelPattern:
        """Aggregate per-image features into a channel pattern."""
        palettes = self._aggregate_palettes(features)
        layouts = self._aggregate_layouts(features)
        text_styles = self._aggregate_text_styles(features)
        series = self._detect_series(titles or [])
        trends = self._detect_trends(features, palettes)

        return ChannelPattern(
            id=pattern_id,
            text_styles=text_styles,
            color_palettes=palettes,
            layouts=layouts,
            series_patterns=series,
            temporal_trends=trends,
            confidence=self.calculate_confidence(text_styles, palettes, layouts),
            sample_size=len(features)
        )

    @staticmethod
    def calculate_confidence(
        text_styles: List[TextStyle],
        palettes: List[ColorPalette],
        layouts: List[LayoutPattern]
    ) -> float:
        """Mean of the per-category mean frequencies, capped when evidence is thin."""
        def mean_frequency(items) -> float:
            return sum(item.frequency for item in items) / len(items) if items else 0.0

        confidence = (
            mean_frequency(text_styles) + mean_frequency(palettes) + mean_frequency(layouts)
        ) / 3

        if len(text_styles) + len(palettes) + len(layouts) < MIN_CONFIDENT_INSTANCES:
            confidence = min(confidence, LOW_EVIDENCE_CAP)

        return round(max(0.0, min(1.0, confidence)), 4)

    def _aggregate_palettes(self, features: List[ImageFeatures]) -> List[ColorPalette]:
        groups: Dict[str, List[ImageFeatures]] = {}
        for item in features:
            groups.setdefault(quantize_hex(item.dominant_color), []).append(item)

        total = len(features)
        # stable sort keeps first-seen order between equally frequent groups
        ordered = sorted(groups.values(), key=lambda members: -len(members))

        palettes = []
        for index, members in enumerate(ordered, start=1):
            palettes.append(ColorPalette(
                id=f"palette-{index}",
                primary=_most_common([m.dominant_color for m in members], 3),
                secondary=_most_common([m.palette[1] for m in members if len(m.palette) > 1], 3),
                accent=_most_common([m.palette[2] for m in members if len(m.palette) > 2], 3),
                frequency=round(len(members) / total, 4)
            ))
        return palettes

    def _aggregate_layouts(self, features: List[ImageFeatures]) -> List[LayoutPattern]:
        counts = Counter(item.layout for item in features)
        total = len(features)
        ordered = sorted(
            (layout for layout in LAYOUT_TYPES if counts[layout]),
            key=lambda layout: -counts[layout]
        )
        return [
            LayoutPattern(id=f"layout-{layout}", type=layout, frequency=round(counts[layout] / total, 4))
            for layout in ordered
        ]

    def _aggregate_text_styles(self, features: List[ImageFeatures]) -> List[TextStyle]:
        groups: Dict[str, List] = {}
        for item in features:
            if item.text is not None:
                groups.setdefault(item.text.style_key, []).append(item.text)

        total = len(features)
        ordered = sorted(groups.items(), key=lambda entry: -len(entry[1]))

        styles = []
        for key, members in ordered:
            contrast = sum(m.contrast for m in members) / len(members)
            color = _most_common([m.color for m in members], 1)[0]
            styles.append(TextStyle(
                id=f"text-{key}",
                role=members[0].role,
                size=int(round(sum(m.height_ratio for m in members) / len(members) * 720)),
                color=color,
                effects=_text_effects(contrast),
                position=TextPosition(
                    x=round(sum(m.x for m in members) / len(members), 2),
                    y=round(sum(m.y for m in members) / len(members), 2),
                    alignment=_most_common([m.alignment for m in members], 1)[0]
                ),
                frequency=round(len(members) / total, 4)
            ))
        return styles

    def _detect_series(self, titles: List[str]) -> List[SeriesPattern]:
        titles = [t for t in titles if t and t.strip()]
        if not titles:
            return []

        series = []
        for name, regex in SERIES_CATALOG:
            matches = sum(1 for title in titles if regex.search(title))
            if matches >= MIN_SERIES_MATCHES:
                series.append(SeriesPattern(
                    id=f"series-{name}",
                    name=name,
                    frequency=round(matches / len(titles), 4)
                ))
        return series

    def _detect_trends(
        self,
        features: List[ImageFeatures],
        palettes: List[ColorPalette]
    ) -> List[TemporalTrend]:
        """Report a palette shift when the newest half leans to another colour group."""
        if len(features) < 2 or not palettes:
            return []

        recent = features[:(len(features) + 1) // 2]
        recent_palettes = self._aggregate_palettes(recent)
        overall_lead = quantize_hex(palettes[0].primary[0])
        recent_lead = recent_palettes[0]

        if quantize_hex(recent_lead.primary[0]) == overall_lead:
            return []

        return [TemporalTrend(
            id="trend-palette-shift",
            description=(
                f"Recent thumbnails move from {palettes[0].primary[0]} "
                f"towards {recent_lead.primary[0]} as the dominant colour"
            ),
            color_palettes=[recent_lead],
            confidence=recent_lead.frequency
        )]

    @staticmethod
    def _pattern_id(channel_id: Optional[str], urls: List[str]) -> str:
        if channel_id:
            return f"pattern-{channel_id}"
        digest = hashlib.md5("|".join(urls).encode()).hexdigest()[:12]
        return f"pattern-{digest}"


def _most_common(values: List[str], limit: int) -> List[str]:
    """Distinct values by count, first-seen order between ties."""
    counts = Counter(values)
    ordered = sorted(dict.fromkeys(values), key=lambda value: -counts[value])
    return ordered[:limit]


def _text_effects(contrast: float) -> List[TextEffect]:
    if contrast >= 0.8:
        return [TextEffect(type="outline", value="#000000")]
    if contrast >= 0.5:
        return [TextEffect(type="shadow", value="rgba(0,0,0,0.5)")]
    return []
