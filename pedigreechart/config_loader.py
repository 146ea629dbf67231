"""
Chart Configuration

Chart options (layout, generations, empty boxes, fonts) with their defaults,
loaded from an HCL file such as::

    layout           = "right"
    generations      = 5
    show_empty_boxes = true

    font {
      family = "DejaVu Sans"
      size   = 14
    }

Command line options override file values.
"""

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import hcl2
from lark.exceptions import UnexpectedInput, UnexpectedToken

from .orientation import ChartLayout

logger = logging.getLogger(__name__)

MIN_GENERATIONS = 2
MAX_GENERATIONS = 25
DEFAULT_GENERATIONS = 4


def clamp_generations(value: int) -> int:
    return max(MIN_GENERATIONS, min(MAX_GENERATIONS, int(value)))


@dataclass
class ChartConfig:
    """Configuration of a pedigree chart."""
    layout: ChartLayout = ChartLayout.LEFT_RIGHT
    generations: int = DEFAULT_GENERATIONS
    show_empty_boxes: bool = False
    show_alternative_name: bool = True
    rtl: bool = False

    # Fonts
    font_family: str = "DejaVu Sans"
    font_size: float = 14
    date_font_size: float = 13
    name_font_weight: int = 400

    # Box size, None keeps the layout's default
    box_width: Optional[float] = None
    box_height: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.layout, ChartLayout):
            self.layout = ChartLayout.parse(self.layout)
        self.generations = clamp_generations(self.generations)

    def with_overrides(self, **overrides: Any) -> "ChartConfig":
        """Return a copy with every override that is not None applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def _unquote(value: Any) -> Any:
    # Some python-hcl2 releases keep the quotes of string literals
    if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off", ""):
            return False
        raise ValueError(f"Not a boolean: {value!r}")
    return bool(value)


_CONVERTERS = {
    "layout": ChartLayout.parse,
    "generations": lambda value: clamp_generations(int(value)),
    "show_empty_boxes": _as_bool,
    "show_alternative_name": _as_bool,
    "rtl": _as_bool,
    "font_family": str,
    "font_size": float,
    "date_font_size": float,
    "name_font_weight": int,
    "box_width": float,
    "box_height": float,
}

# Keys accepted inside a "font" block, mapped to config fields
_FONT_KEYS = {
    "family": "font_family",
    "size": "font_size",
    "date_size": "date_font_size",
    "weight": "name_font_weight",
}


class ConfigLoader:
    """Loads a ChartConfig from an HCL options file."""

    def __init__(self, base: Optional[ChartConfig] = None):
        self.base = base or ChartConfig()

    def load(self, path: Union[str, Path, None]) -> ChartConfig:
        """Load options from path on top of the base config.

        Unreadable files and invalid values are logged and skipped, leaving
        the defaults in place.
        """
        if path is None:
            return self.base

        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = hcl2.load(f)
        except OSError as e:
            logger.warning("Could not read config file %s: %s", path, e)
            return self.base
        except (UnexpectedInput, UnexpectedToken) as e:
            logger.warning("Could not parse config file %s: %s", path, e)
            return self.base

        return self.apply(content, source=str(path))

    def apply(self, content: Dict[str, Any], source: str = "<config>") -> ChartConfig:
        """Apply a parsed options mapping to the base config."""
        options = self._flatten(content)

        known = {f.name for f in fields(ChartConfig)}
        changes: Dict[str, Any] = {}
        for key, raw in options.items():
            if key not in known:
                logger.warning("Ignoring unknown option %r in %s", key, source)
                continue
            try:
                changes[key] = _CONVERTERS[key](_unquote(raw))
            except (TypeError, ValueError) as e:
                logger.warning("Invalid value for %r in %s: %s", key, source, e)

        logger.debug("Loaded %d option(s) from %s", len(changes), source)
        return replace(self.base, **changes)

    def _flatten(self, content: Dict[str, Any]) -> Dict[str, Any]:
        """Merge top-level attributes with "chart" and "font" blocks."""
        options: Dict[str, Any] = {}

        for key, value in content.items():
            if key.startswith("__"):
                continue
            if key == "chart":
                for block in self._blocks(value):
                    options.update(self._flatten(block))
            elif key == "font":
                for block in self._blocks(value):
                    for font_key, font_value in block.items():
                        if font_key.startswith("__"):
                            continue
                        options[_FONT_KEYS.get(font_key, f"font_{font_key}")] = font_value
            else:
                options[key] = value

        return options

    def _blocks(self, value: Any):
        if isinstance(value, dict):
            return [value]
        if isinstance(value, list):
            return [block for block in value if isinstance(block, dict)]
        return []
