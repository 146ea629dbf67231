"""Tests for chart orientations."""

import pytest

from pedigreechart.orientation import ChartLayout, Orientation, get_orientation


class TestChartLayout:
    """Tests for ChartLayout parsing."""

    def test_parse_value(self):
        """Test parsing by enum value."""
        assert ChartLayout.parse("down") is ChartLayout.TOP_BOTTOM
        assert ChartLayout.parse("left") is ChartLayout.RIGHT_LEFT

    def test_parse_name(self):
        """Test parsing by name, with underscores or hyphens."""
        assert ChartLayout.parse("bottom_top") is ChartLayout.BOTTOM_TOP
        assert ChartLayout.parse("Left-Right") is ChartLayout.LEFT_RIGHT

    def test_parse_unknown(self):
        """Test that unknown layouts are rejected."""
        with pytest.raises(ValueError, match="Unknown chart layout"):
            ChartLayout.parse("diagonal")

    def test_is_horizontal(self):
        """Test the horizontal layout family."""
        assert ChartLayout.LEFT_RIGHT.is_horizontal
        assert ChartLayout.RIGHT_LEFT.is_horizontal
        assert not ChartLayout.TOP_BOTTOM.is_horizontal
        assert not ChartLayout.BOTTOM_TOP.is_horizontal


class TestOrientation:
    """Tests for orientation capabilities."""

    @pytest.mark.parametrize("layout,rtl,expected", [
        (ChartLayout.TOP_BOTTOM, False, 1),
        (ChartLayout.TOP_BOTTOM, True, 1),
        (ChartLayout.BOTTOM_TOP, False, -1),
        (ChartLayout.LEFT_RIGHT, False, 1),
        (ChartLayout.LEFT_RIGHT, True, -1),
        (ChartLayout.RIGHT_LEFT, False, -1),
        (ChartLayout.RIGHT_LEFT, True, -1),
    ])
    def test_direction(self, layout, rtl, expected):
        """Test the growth direction of every layout."""
        assert get_orientation(layout, rtl=rtl).direction() == expected

    def test_default_box_sizes(self):
        """Test the default box size of each layout family."""
        vertical = get_orientation(ChartLayout.TOP_BOTTOM)
        horizontal = get_orientation(ChartLayout.LEFT_RIGHT)

        assert (vertical.box_width, vertical.box_height) == (160, 175)
        assert (horizontal.box_width, horizontal.box_height) == (325, 95)

    def test_node_size_vertical(self):
        """Test that vertical layouts use box width for breadth."""
        orientation = get_orientation(ChartLayout.BOTTOM_TOP)

        assert orientation.node_width() == 160 + 30
        assert orientation.node_height() == 175 + 40

    def test_node_size_horizontal(self):
        """Test that horizontal layouts swap the axes."""
        orientation = get_orientation(ChartLayout.RIGHT_LEFT)

        assert orientation.node_width() == 95 + 20
        assert orientation.node_height() == 325 + 40

    def test_custom_box_size(self):
        """Test that a custom box size replaces the default."""
        orientation = get_orientation(ChartLayout.RIGHT_LEFT, box_width=190, box_height=80)

        assert orientation.node_height() == 230
        assert orientation.norm(0, 2 * orientation.node_height()) == (-460, 0)

    def test_norm(self):
        """Test mapping generic coordinates onto the chart."""
        assert get_orientation(ChartLayout.TOP_BOTTOM).norm(10, 20) == (10, 20)
        assert get_orientation(ChartLayout.BOTTOM_TOP).norm(10, 20) == (10, -20)
        assert get_orientation(ChartLayout.LEFT_RIGHT).norm(10, 20) == (20, 10)
        assert get_orientation(ChartLayout.RIGHT_LEFT).norm(10, 20) == (-20, 10)
        assert get_orientation(ChartLayout.LEFT_RIGHT, rtl=True).norm(10, 20) == (-20, 10)

    def test_split_names(self):
        """Test that only vertical boxes split names over two lines."""
        assert get_orientation(ChartLayout.TOP_BOTTOM).split_names
        assert not get_orientation(ChartLayout.LEFT_RIGHT).split_names

    def test_layout_from_string(self):
        """Test that get_orientation accepts layout strings."""
        assert get_orientation("up").layout is ChartLayout.BOTTOM_TOP

    def test_base_orientation_not_implemented(self):
        """Test that an orientation without a layout refuses every capability."""
        orientation = Orientation(layout=None, box_width=100, box_height=50, x_offset=0, y_offset=0)

        with pytest.raises(NotImplementedError):
            orientation.direction()
        with pytest.raises(NotImplementedError):
            orientation.node_width()
        with pytest.raises(NotImplementedError):
            orientation.node_height()
        with pytest.raises(NotImplementedError):
            orientation.norm(0, 0)
        with pytest.raises(NotImplementedError):
            orientation.is_horizontal
