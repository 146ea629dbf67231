"""
Text Fitting

Shortens names and dates so they fit the fixed width of a person box.

Names are shortened greedily, one component at a time, in a fixed priority:
plain given names first, then the preferred given name, then last names.
Each pass walks its components from last to first and stops as soon as the
whole line fits, so as many components as possible keep their full length.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from PIL import ImageFont

from .records import PersonRecord

logger = logging.getLogger(__name__)

# measure(text, font_family, font_size, font_weight) -> width in px
MeasureFn = Callable[[str, str, float, int], float]

ELLIPSIS = "…"
NAME_SEPARATOR = " "

# Glyph widths in em, erring wide so estimated labels never overflow
ESTIMATE_EM_WIDTH = 0.65
ESTIMATE_BOLD_EM_WIDTH = 0.7
ESTIMATE_UPPER_EM_WIDTH = 0.8
ESTIMATE_BOLD_UPPER_EM_WIDTH = 0.85


@dataclass(frozen=True)
class NameComponent:
    """One word of a name line."""
    label: str
    is_preferred: bool = False
    is_last_name: bool = False
    is_rtl: bool = False


def estimate_text_width(
    text: str, font_family: str, font_size: float, font_weight: int = 400
) -> float:
    """Estimate the rendered width of a text without any font metrics."""
    bold = font_weight >= 600
    em = ESTIMATE_BOLD_EM_WIDTH if bold else ESTIMATE_EM_WIDTH
    upper_em = ESTIMATE_BOLD_UPPER_EM_WIDTH if bold else ESTIMATE_UPPER_EM_WIDTH
    return sum(upper_em if char.isupper() else em for char in text) * float(font_size)


class PillowTextMeasurer:
    """Measures text with Pillow font metrics.

    The CSS font family list is tried in order, then a few common system
    fonts, then Pillow's built-in default font. Loaded fonts are cached.
    """

    GENERIC_FAMILIES = ("serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui")

    FALLBACK_FONTS = (
        # Linux
        "DejaVuSans.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "LiberationSans-Regular.ttf",
        # macOS
        "/System/Library/Fonts/Helvetica.ttc",
        "/Library/Fonts/Arial.ttf",
        # Windows
        "arial.ttf",
        "C:/Windows/Fonts/arial.ttf",
    )

    FALLBACK_BOLD_FONTS = (
        "DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "LiberationSans-Bold.ttf",
        "/Library/Fonts/Arial Bold.ttf",
        "arialbd.ttf",
        "C:/Windows/Fonts/arialbd.ttf",
    )

    def __init__(self):
        self._fonts: Dict[Tuple[str, int, bool], ImageFont.ImageFont] = {}

    def __call__(
        self, text: str, font_family: str, font_size: float, font_weight: int = 400
    ) -> float:
        font = self.load_font(font_family, int(round(float(font_size))), font_weight >= 600)
        return float(font.getlength(text))

    def load_font(self, font_family: str, font_size: int, bold: bool = False):
        key = (font_family, font_size, bold)
        if key not in self._fonts:
            self._fonts[key] = self._load_font(font_family, font_size, bold)
        return self._fonts[key]

    def _candidates(self, font_family: str, bold: bool) -> List[str]:
        candidates = []
        for family in font_family.split(","):
            name = family.strip().strip("'\"")
            if not name or name.lower() in self.GENERIC_FAMILIES:
                continue
            compact = name.replace(" ", "")
            if bold:
                candidates.extend([f"{name} Bold", f"{compact}-Bold.ttf", f"{compact}bd.ttf"])
            else:
                candidates.extend([name, f"{compact}.ttf", f"{compact}-Regular.ttf"])
        candidates.extend(self.FALLBACK_BOLD_FONTS if bold else self.FALLBACK_FONTS)
        return candidates

    def _load_font(self, font_family: str, font_size: int, bold: bool):
        for candidate in self._candidates(font_family, bold):
            try:
                return ImageFont.truetype(candidate, font_size)
            except OSError:
                continue

        logger.debug("No TrueType font found for %r, using Pillow's default font", font_family)
        try:
            return ImageFont.load_default(size=font_size)
        except TypeError:
            # Older Pillow versions don't support the size parameter
            return ImageFont.load_default()


def _find_free(name: str, label: str, taken: List[Tuple[int, int]]) -> int:
    """Index of the first occurrence of label not overlapping a taken span."""
    start = name.find(label)
    while start != -1:
        end = start + len(label)
        if all(end <= used_start or start >= used_end for used_start, used_end in taken):
            return start
        start = name.find(label, start + 1)
    return -1


def order_by_name(name: str, components: Sequence[NameComponent]) -> List[NameComponent]:
    """Order name components as they appear in the full name.

    A component that occurs several times claims its first occurrence not
    already claimed by an earlier component. Components missing from the
    name keep their relative order after the ones that were found.
    """
    if not name:
        return list(components)

    taken: List[Tuple[int, int]] = []
    keyed = []
    for index, component in enumerate(components):
        position = _find_free(name, component.label, taken) if component.label else -1
        if position == -1:
            position = len(name) + index
        else:
            taken.append((position, position + len(component.label)))
        keyed.append((position, index, component))

    return [component for _, _, component in sorted(keyed, key=lambda item: (item[0], item[1]))]


def build_name_components(
    record: PersonRecord, first_names: bool = True, last_names: bool = True
) -> List[NameComponent]:
    """Tag the given and last names of a record as name components."""
    components: List[NameComponent] = []

    if first_names:
        components.extend(
            NameComponent(
                label=first_name,
                is_preferred=first_name == record.preferred_name,
                is_rtl=record.is_name_rtl,
            )
            for first_name in record.first_names
        )

    if last_names:
        components.extend(
            NameComponent(label=last_name, is_last_name=True, is_rtl=record.is_name_rtl)
            for last_name in record.last_names
        )

    if first_names and last_names:
        return order_by_name(record.name, components)
    return components


def alternative_name_components(record: PersonRecord) -> List[NameComponent]:
    return [
        NameComponent(label=word, is_rtl=record.is_alt_rtl)
        for word in record.alternative_name.split()
    ]


class TextFitter:
    """Truncates labels to an available width using an injected measure function."""

    def __init__(
        self,
        measure: Optional[MeasureFn] = None,
        font_family: str = "DejaVu Sans",
        font_size: float = 14,
        font_weight: int = 400,
    ):
        self.measure_fn = measure or estimate_text_width
        self.font_family = font_family
        self.font_size = font_size
        self.font_weight = font_weight

    def measure(self, text: str) -> float:
        """Width of text; falls back to an estimate if measuring fails."""
        try:
            return float(self.measure_fn(text, self.font_family, self.font_size, self.font_weight))
        except Exception as e:
            logger.warning("Could not measure text %r, using estimate: %s", text, e)
            return estimate_text_width(text, self.font_family, self.font_size, self.font_weight)

    def fit_name_labels(
        self, components: Sequence[NameComponent], available_width: float
    ) -> List[NameComponent]:
        """Abbreviate name components until the joined line fits."""
        labels = [component.label for component in components]

        passes = (
            lambda c: not c.is_preferred and not c.is_last_name,
            lambda c: c.is_preferred,
            lambda c: c.is_last_name,
        )

        for selected in passes:
            for i in reversed(range(len(components))):
                if not selected(components[i]) or len(labels[i]) <= 1:
                    continue
                if self.measure(NAME_SEPARATOR.join(labels)) > available_width:
                    # Keep only the first letter
                    labels[i] = labels[i][:1] + "."

        return [
            component if component.label == label else replace(component, label=label)
            for component, label in zip(components, labels)
        ]

    def fit_date_label(self, text: str, available_width: float) -> str:
        """Cut a date label from the end until it fits, marking the cut with an ellipsis."""
        truncated = False

        while len(text) > 1 and self.measure(text) > available_width:
            text = text[:-1].strip()
            truncated = True

        if not truncated:
            return text

        if text.endswith("."):
            text = text[:-1].strip()

        return text + ELLIPSIS
