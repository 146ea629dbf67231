"""Pedigree Chart Generator - Render ancestor trees as SVG pedigree charts."""

__version__ = "1.0.0"

from .chart import ChartBuilder
from .config_loader import ChartConfig, ConfigLoader
from .hierarchy import HierarchyBuilder
from .layout import TreeLayoutEngine
from .links import LinkRouter
from .orientation import ChartLayout, get_orientation
from .records import load_records
from .renderer import SVGRenderer
from .text import TextFitter

__all__ = [
    "__version__",
    "ChartBuilder",
    "ChartConfig",
    "ConfigLoader",
    "HierarchyBuilder",
    "TreeLayoutEngine",
    "LinkRouter",
    "ChartLayout",
    "get_orientation",
    "load_records",
    "SVGRenderer",
    "TextFitter",
]
