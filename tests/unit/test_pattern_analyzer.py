"""Unit tests for channel pattern analysis."""
import pytest

from conftest import FakeClock, FakeImageLoader, solid_image, split_image
from thumbgen.core.exceptions import InsufficientSampleSizeError
from thumbgen.models.channel import ColorPalette, LayoutPattern, TextStyle, TextPosition
from thumbgen.services.cache_service import TTLCache
from thumbgen.services.pattern_analyzer import ChannelPatternAnalyzer

RED = (255, 0, 0)
BLUE = (0, 0, 255)


def urls(count, prefix="thumb"):
    return [f"https://img.example.com/{prefix}{i}.jpg" for i in range(count)]


def loader_for(colors):
    images = {url: solid_image(color) for url, color in zip(urls(len(colors)), colors)}
    return FakeImageLoader(images)


class TestChannelPatternAnalyzer:
    """Test ChannelPatternAnalyzer."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def cache(self, clock):
        return TTLCache(ttl_hours=24, clock=clock)

    @pytest.mark.asyncio
    async def test_two_thumbnails_rejected_before_loading(self, cache):
        loader = loader_for([RED, RED])
        analyzer = ChannelPatternAnalyzer(loader, cache, min_samples=3)

        with pytest.raises(InsufficientSampleSizeError) as exc_info:
            await analyzer.analyze(urls(2), channel_id="chan")

        assert exc_info.value.details == {"required": 3, "received": 2}
        assert loader.loads == []

    @pytest.mark.asyncio
    async def test_three_thumbnails_analyzed(self, cache):
        analyzer = ChannelPatternAnalyzer(loader_for([RED, RED, RED]), cache, min_samples=3)

        result = await analyzer.analyze(urls(3), channel_id="chan")

        pattern = result.pattern
        assert result.cache_hit is False
        assert pattern.id == "pattern-chan"
        assert pattern.sample_size == 3
        assert len(pattern.color_palettes) == 1
        assert pattern.color_palettes[0].frequency == 1.0
        assert [(l.type, l.frequency) for l in pattern.layouts] == [("centered", 1.0)]
        assert pattern.text_styles == []
        assert pattern.confidence == 0.4

    @pytest.mark.asyncio
    async def test_unloadable_thumbnails_count_against_minimum(self, cache):
        loader = loader_for([RED, RED])
        analyzer = ChannelPatternAnalyzer(loader, cache, min_samples=3)

        with pytest.raises(InsufficientSampleSizeError) as exc_info:
            await analyzer.analyze(urls(3), channel_id="chan")

        assert exc_info.value.details["received"] == 2
        assert len(loader.loads) == 3

    @pytest.mark.asyncio
    async def test_cache_hit_skips_loading(self, cache):
        loader = loader_for([RED, RED, BLUE])
        analyzer = ChannelPatternAnalyzer(loader, cache, min_samples=3)

        first = await analyzer.analyze(urls(3), channel_id="chan")
        second = await analyzer.analyze(urls(3), channel_id="chan")

        assert second.cache_hit is True
        assert second.pattern == first.pattern
        assert len(loader.loads) == 3

    @pytest.mark.asyncio
    async def test_cache_expiry_reanalyzes(self, cache, clock):
        loader = loader_for([RED, RED, BLUE])
        analyzer = ChannelPatternAnalyzer(loader, cache, min_samples=3)

        await analyzer.analyze(urls(3), channel_id="chan")
        clock.advance(25)
        result = await analyzer.analyze(urls(3), channel_id="chan")

        assert result.cache_hit is False
        assert len(loader.loads) == 6

    @pytest.mark.asyncio
    async def test_force_refresh_bypasses_cache(self, cache):
        loader = loader_for([RED, RED, BLUE])
        analyzer = ChannelPatternAnalyzer(loader, cache, min_samples=3)

        await analyzer.analyze(urls(3), channel_id="chan")
        result = await analyzer.analyze(urls(3), channel_id="chan", force_refresh=True)

        assert result.cache_hit is False
        assert len(loader.loads) == 6

    @pytest.mark.asyncio
    async def test_without_channel_id_nothing_is_cached(self, cache):
        analyzer = ChannelPatternAnalyzer(loader_for([RED, RED, RED]), cache, min_samples=3)

        result = await analyzer.analyze(urls(3))

        assert result.pattern.id.startswith("pattern-")
        assert cache.get_stats()["total_items"] == 0

    @pytest.mark.asyncio
    async def test_palette_groups_and_layouts(self, cache):
        images = {
            "https://img.example.com/a.jpg": solid_image(RED),
            "https://img.example.com/b.jpg": solid_image(RED),
            "https://img.example.com/c.jpg": split_image(RED, BLUE),
            "https://img.example.com/d.jpg": solid_image(BLUE),
        }
        analyzer = ChannelPatternAnalyzer(FakeImageLoader(images), cache, min_samples=3)

        result = await analyzer.analyze(list(images))

        layouts = {l.type: l.frequency for l in result.pattern.layouts}
        assert layouts == {"centered": 0.75, "split": 0.25}
        assert result.pattern.layouts[0].type == "centered"
        frequencies = [p.frequency for p in result.pattern.color_palettes]
        assert frequencies == sorted(frequencies, reverse=True)
        assert sum(frequencies) == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_palette_shift_trend(self, cache):
        # newest first: two blue thumbnails after three red ones
        analyzer = ChannelPatternAnalyzer(loader_for([BLUE, BLUE, RED, RED, RED]), cache, min_samples=3)

        result = await analyzer.analyze(urls(5))

        trends = result.pattern.temporal_trends
        assert len(trends) == 1
        assert trends[0].id == "trend-palette-shift"

    @pytest.mark.asyncio
    async def test_no_trend_for_stable_palette(self, cache):
        analyzer = ChannelPatternAnalyzer(loader_for([RED, RED, RED, RED]), cache, min_samples=3)

        result = await analyzer.analyze(urls(4))

        assert result.pattern.temporal_trends == []

    @pytest.mark.asyncio
    async def test_series_patterns_from_titles(self, cache):
        analyzer = ChannelPatternAnalyzer(loader_for([RED, RED, RED]), cache, min_samples=3)
        titles = ["Hardcore Ep. 1", "Hardcore Episode 2", "Building a base?", "Tier list"]

        result = await analyzer.analyze(urls(3), titles=titles)

        names = {s.name: s.frequency for s in result.pattern.series_patterns}
        assert names == {"episode": 0.5}


class TestPatternConfidence:
    def test_mean_of_category_means(self):
        styles = [
            TextStyle(id=f"t{i}", role="title", size=100, color="#ffffff",
                      position=TextPosition(x=50, y=20), frequency=0.5)
            for i in range(2)
        ]
        palettes = [ColorPalette(id=f"p{i}", frequency=0.5) for i in range(2)]
        layouts = [LayoutPattern(id=f"l{i}", type="centered", frequency=f) for i, f in enumerate([1.0, 0.0])]

        assert ChannelPatternAnalyzer.calculate_confidence(styles, palettes, layouts) == 0.5

    def test_capped_with_few_instances(self):
        palettes = [ColorPalette(id="p1", frequency=1.0)]
        layouts = [LayoutPattern(id="l1", type="centered", frequency=1.0)]

        assert ChannelPatternAnalyzer.calculate_confidence([], palettes, layouts) == 0.4

    def test_empty_is_zero(self):
        assert ChannelPatternAnalyzer.calculate_confidence([], [], []) == 0.0
