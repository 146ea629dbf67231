"""Tests for name and date fitting."""

import logging

import pytest
from conftest import make_person

from pedigreechart.text import (
    ELLIPSIS,
    NameComponent,
    PillowTextMeasurer,
    TextFitter,
    alternative_name_components,
    build_name_components,
    estimate_text_width,
    order_by_name,
)


@pytest.fixture
def fitter(measure):
    return TextFitter(measure)


@pytest.fixture
def johannes():
    return [
        NameComponent("Johannes", is_preferred=True),
        NameComponent("Wilhelm"),
        NameComponent("Müller", is_last_name=True),
    ]


def _labels(components):
    return [component.label for component in components]


class TestFitNameLabels:
    """Tests for abbreviating names."""

    def test_fits_unchanged(self, fitter, johannes):
        """Test that a name that fits is left alone."""
        result = fitter.fit_name_labels(johannes, 230)

        assert result == johannes

    def test_other_given_names_first(self, fitter, johannes):
        """Test that non-preferred given names are abbreviated first."""
        result = fitter.fit_name_labels(johannes, 180)

        assert _labels(result) == ["Johannes", "W.", "Müller"]

    def test_preferred_name_second(self, fitter, johannes):
        """Test that the preferred name is abbreviated when still too long."""
        result = fitter.fit_name_labels(johannes, 120)

        assert _labels(result) == ["J.", "W.", "Müller"]

    def test_last_names_last(self, fitter, johannes):
        """Test that last names are abbreviated only as a last resort."""
        result = fitter.fit_name_labels(johannes, 10)

        assert _labels(result) == ["J.", "W.", "M."]

    def test_walks_from_the_end(self, fitter):
        """Test that later given names are abbreviated before earlier ones."""
        components = [
            NameComponent("Anna"),
            NameComponent("Maria"),
            NameComponent("Luise"),
            NameComponent("Schmidt", is_last_name=True),
        ]

        result = fitter.fit_name_labels(components, 210)

        assert _labels(result) == ["Anna", "Maria", "L.", "Schmidt"]

    def test_single_letters_kept(self, fitter):
        """Test that one-letter names are never abbreviated."""
        components = [NameComponent("J"), NameComponent("Q"), NameComponent("Public", is_last_name=True)]

        result = fitter.fit_name_labels(components, 10)

        assert _labels(result) == ["J", "Q", "P."]

    def test_flags_preserved(self, fitter, johannes):
        """Test that abbreviated components keep their flags."""
        result = fitter.fit_name_labels(johannes, 10)

        assert result[0].is_preferred
        assert result[2].is_last_name
        assert johannes[0].label == "Johannes"

    def test_empty(self, fitter):
        """Test fitting an empty name."""
        assert fitter.fit_name_labels([], 100) == []


class TestFitDateLabel:
    """Tests for truncating dates."""

    def test_fits_unchanged(self, fitter):
        """Test that a date that fits is left alone."""
        assert fitter.fit_date_label("12 MAR 1875", 110) == "12 MAR 1875"

    def test_truncated_with_ellipsis(self, fitter):
        """Test that long dates are cut and marked with an ellipsis."""
        assert fitter.fit_date_label("12 MAR 1875", 60) == "12 MAR" + ELLIPSIS

    def test_trailing_dot_removed(self, fitter):
        """Test that a trailing dot is dropped before the ellipsis."""
        assert fitter.fit_date_label("3. MAR. 1875", 70) == "3. MAR" + ELLIPSIS

    def test_keeps_one_character(self, fitter):
        """Test that at least one character remains."""
        assert fitter.fit_date_label("1875", 0) == "1" + ELLIPSIS


class TestMeasure:
    """Tests for text measurement and its fallback."""

    def test_estimate(self):
        """Test the width estimate."""
        assert estimate_text_width("abcd", "serif", 10) == pytest.approx(26.0)
        assert estimate_text_width("abcd", "serif", 10, 700) == pytest.approx(28.0)

    def test_default_measure_is_estimate(self):
        """Test that a fitter without measure function estimates widths."""
        fitter = TextFitter(font_size=10)

        assert fitter.measure("abcd") == pytest.approx(26.0)

    def test_fallback_on_error(self, caplog):
        """Test that measurement errors fall back to the estimate."""
        def broken(text, font_family, font_size, font_weight):
            raise OSError("cannot open resource")

        fitter = TextFitter(broken, font_size=10)

        with caplog.at_level(logging.WARNING, logger="pedigreechart.text"):
            width = fitter.measure("abcd")

        assert width == pytest.approx(26.0)
        assert "Could not measure" in caplog.text
        assert fitter.fit_date_label("1875", 1000) == "1875"

    def test_fallback_on_unexpected_error(self, caplog):
        """Test that any failure of the measure function still yields a label."""
        def broken(text, font_family, font_size, font_weight):
            raise RuntimeError("canvas unavailable")

        fitter = TextFitter(broken, font_size=10)

        with caplog.at_level(logging.WARNING, logger="pedigreechart.text"):
            label = fitter.fit_date_label("12 MAR 1875", 30)

        assert label == "12 M" + ELLIPSIS
        assert "canvas unavailable" in caplog.text

    def test_estimate_capitals_wider(self):
        """Test that capital letters are estimated wider than other glyphs."""
        assert estimate_text_width("AB", "serif", 10) == pytest.approx(16.0)
        assert estimate_text_width("AB", "serif", 10) > estimate_text_width("ab", "serif", 10)

    @pytest.mark.parametrize("text", ["MÜLLER WAGNER", "Wilhelm", "Johannes Wilhelm Müller"])
    def test_estimate_not_narrower_than_font(self, text):
        """Test that the estimate does not undercut real font metrics."""
        measured = PillowTextMeasurer()(text, "DejaVu Sans", 14)

        assert estimate_text_width(text, "DejaVu Sans", 14) >= measured

    def test_pillow_measurer(self):
        """Test measuring with Pillow font metrics."""
        measurer = PillowTextMeasurer()

        short = measurer("Anna", "DejaVu Sans", 14)
        long = measurer("Anna Maria Schmidt", "DejaVu Sans", 14)

        assert short > 0
        assert long > short

    def test_pillow_fonts_cached(self):
        """Test that loaded fonts are reused."""
        measurer = PillowTextMeasurer()

        first = measurer.load_font("Nonexistent Font, sans-serif", 14)
        second = measurer.load_font("Nonexistent Font, sans-serif", 14)

        assert first is second


class TestNameComponents:
    """Tests for building name components from records."""

    def test_order_by_name(self):
        """Test that components follow their order in the full name."""
        components = [NameComponent("Johannes"), NameComponent("Müller", is_last_name=True)]

        result = order_by_name("Müller Johannes", components)

        assert _labels(result) == ["Müller", "Johannes"]

    def test_order_by_name_repeated_word(self):
        """Test that a repeated word is matched to distinct occurrences."""
        components = [
            NameComponent("Anton"),
            NameComponent("Paul"),
            NameComponent("Paul", is_last_name=True),
        ]

        result = order_by_name("Paul Anton Paul", components)

        assert _labels(result) == ["Paul", "Anton", "Paul"]
        assert [c.is_last_name for c in result] == [False, False, True]

    def test_order_by_name_missing(self):
        """Test that components not in the name keep their order at the end."""
        components = [NameComponent("Karl"), NameComponent("Schmidt", is_last_name=True)]

        result = order_by_name("Schmidt", components)

        assert _labels(result) == ["Schmidt", "Karl"]

    def test_build_name_components(self):
        """Test tagging preferred and last names."""
        record = make_person(
            1,
            name="Johannes Wilhelm Müller",
            first_names=("Johannes", "Wilhelm"),
            last_names=("Müller",),
            preferred_name="Wilhelm",
            is_name_rtl=True,
        )

        result = build_name_components(record)

        assert _labels(result) == ["Johannes", "Wilhelm", "Müller"]
        assert [c.is_preferred for c in result] == [False, True, False]
        assert [c.is_last_name for c in result] == [False, False, True]
        assert all(c.is_rtl for c in result)

    def test_build_first_or_last_only(self):
        """Test building only first or only last names."""
        record = make_person(1, first_names=("Anna",), last_names=("Schmidt",))

        assert _labels(build_name_components(record, last_names=False)) == ["Anna"]
        assert _labels(build_name_components(record, first_names=False)) == ["Schmidt"]

    def test_alternative_name(self):
        """Test splitting the alternative name."""
        record = make_person(1, alternative_name="Иван Петров", is_alt_rtl=False)

        assert _labels(alternative_name_components(record)) == ["Иван", "Петров"]
