"""Unit tests for style variation selection."""
import pytest

from thumbgen.models.generation import CreativeDirection
from thumbgen.services.style_selector import DEFAULT_ORDER, STYLE_CATALOG, StyleSelector


class TestStyleSelector:
    """Test StyleSelector."""

    @pytest.fixture
    def selector(self):
        return StyleSelector()

    def test_known_direction_returns_single_style(self, selector):
        """A named direction returns only its own style, whatever the count."""
        styles = selector.select(CreativeDirection.GAMING, 3)

        assert len(styles) == 1
        assert styles[0].label == "Gaming"

    def test_direction_accepts_plain_string(self, selector):
        styles = selector.select("Tutorial", 2)

        assert [s.label for s in styles] == ["Tutorial"]

    def test_no_direction_uses_default_order(self, selector):
        styles = selector.select(None, 3)

        assert styles == DEFAULT_ORDER[:3]
        assert [s.label for s in styles] == ["Original Style", "Dynamic", "Artistic"]

    def test_unknown_direction_uses_default_order(self, selector):
        styles = selector.select("watercolor", 2)

        assert [s.label for s in styles] == ["Original Style", "Dynamic"]

    def test_count_is_bounded(self, selector):
        assert len(selector.select(None, 10)) == 3
        assert len(selector.select(None, 0)) == 1

    def test_expand_cycles_single_style(self, selector):
        """One selected style repeated for every requested render."""
        styles = selector.select(CreativeDirection.DYNAMIC, 2)
        expanded = selector.expand(styles, 2)

        assert [s.label for s in expanded] == ["Dynamic", "Dynamic"]

    def test_expand_keeps_distinct_styles(self, selector):
        styles = selector.select(None, 3)

        assert selector.expand(styles, 3) == styles

    def test_expand_empty(self, selector):
        assert selector.expand([], 3) == []

    def test_catalog_is_complete(self, selector):
        catalog = selector.get_catalog()

        assert len(catalog) == len(CreativeDirection)
        assert {s.key for s in catalog} == {d.value for d in CreativeDirection}
        assert all(s.style_directive for s in STYLE_CATALOG.values())
