"""
Chart Assembly

Runs the pipeline (hierarchy, layout, link routing) and derives the
per-node geometry a renderer needs: box and image rectangles, label anchor
points and the fitted label text.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .config_loader import ChartConfig
from .geometry import BoxGeometry, Rect
from .hierarchy import HierarchyBuilder
from .layout import LayoutConfig, LayoutResult, Link, PositionedNode, TreeLayoutEngine
from .links import ConnectorPath, LinkRouter
from .orientation import Orientation, get_orientation
from .records import PersonRecord
from .text import (
    MeasureFn,
    NameComponent,
    TextFitter,
    alternative_name_components,
    build_name_components,
)

logger = logging.getLogger(__name__)

BIRTH_ICON = "★"
DEATH_ICON = "†"


@dataclass
class LabelLine:
    """A single line of text inside a person box."""
    kind: str  # name, first-names, last-names, alternative-name, timespan, birth, death
    x: float
    y: float
    anchor: str = "start"
    rtl: bool = False
    spans: List[NameComponent] = field(default_factory=list)
    title: str = ""
    icon: Optional[str] = None

    @property
    def text(self) -> str:
        return " ".join(span.label for span in self.spans)


@dataclass
class NodeGeometry:
    """Derived drawing geometry of one positioned node."""
    node: PositionedNode
    box: Rect
    image: Optional[Rect] = None
    labels: List[LabelLine] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.node.id


@dataclass
class Chart:
    """Everything needed to draw a pedigree chart."""
    config: ChartConfig
    orientation: Orientation
    layout: LayoutResult
    paths: List[Tuple[Link, ConnectorPath]]
    nodes: List[NodeGeometry]

    def bounds(self) -> Tuple[float, float, float, float]:
        return self.layout.bounds(self.orientation.box_width, self.orientation.box_height)


class ChartBuilder:
    """Builds charts from ancestor records for one configuration."""

    def __init__(
        self,
        config: Optional[ChartConfig] = None,
        measure: Optional[MeasureFn] = None,
        layout_config: Optional[LayoutConfig] = None,
    ):
        self.config = config or ChartConfig()
        self.orientation = get_orientation(
            self.config.layout,
            rtl=self.config.rtl,
            box_width=self.config.box_width,
            box_height=self.config.box_height,
        )
        self.geometry = BoxGeometry(self.orientation)
        self.name_fitter = TextFitter(
            measure,
            font_family=self.config.font_family,
            font_size=self.config.font_size,
            font_weight=self.config.name_font_weight,
        )
        self.date_fitter = TextFitter(
            measure,
            font_family=self.config.font_family,
            font_size=self.config.date_font_size,
        )
        self.hierarchy_builder = HierarchyBuilder(show_empty_boxes=self.config.show_empty_boxes)
        self.layout_engine = TreeLayoutEngine(layout_config)
        self.router = LinkRouter(self.orientation)

    def build(self, root: Optional[PersonRecord]) -> Optional[Chart]:
        """Build a chart, or return None when there is nothing to draw."""
        hierarchy = self.hierarchy_builder.build(root)
        if hierarchy is None:
            return None

        result = self.layout_engine.layout(hierarchy, self.orientation)
        paths = self.router.route(result)
        nodes = [self.node_geometry(node) for node in result.nodes]

        logger.info(
            "Built %s chart with %d boxes and %d links",
            self.config.layout.value, len(nodes), len(paths),
        )
        return Chart(
            config=self.config,
            orientation=self.orientation,
            layout=result,
            paths=paths,
            nodes=nodes,
        )

    def node_geometry(self, node: PositionedNode) -> NodeGeometry:
        geometry = NodeGeometry(node=node, box=self.geometry.box)

        if node.is_placeholder:
            return geometry

        record = node.data
        if record.has_thumbnail:
            geometry.image = self.geometry.image

        if self.orientation.is_horizontal:
            geometry.labels = self._horizontal_labels(record)
        else:
            geometry.labels = self._vertical_labels(record)
        return geometry

    def _full_name(self, record: PersonRecord) -> List[NameComponent]:
        return [NameComponent(label=record.name, is_rtl=record.is_name_rtl)]

    def _has_name_parts(self, record: PersonRecord) -> bool:
        return bool(record.first_names or record.last_names)

    def _anchor(self, is_rtl: bool) -> str:
        if is_rtl and self.orientation.rtl:
            return "start"
        if is_rtl or self.orientation.rtl:
            return "end"
        return "start"

    def _vertical_labels(self, record: PersonRecord) -> List[LabelLine]:
        geo = self.geometry
        width = geo.name_width(with_image=True)
        y = geo.text_y
        labels = []

        if self._has_name_parts(record):
            first = self.name_fitter.fit_name_labels(
                build_name_components(record, last_names=False), width
            )
            last = self.name_fitter.fit_name_labels(
                build_name_components(record, first_names=False), width
            )
        else:
            first, last = self._full_name(record), []

        labels.append(LabelLine("first-names", 0, y - 5, "middle", record.is_name_rtl, first, record.name))
        if last:
            labels.append(LabelLine("last-names", 0, y + 15, "middle", record.is_name_rtl, last, record.name))

        if self.config.show_alternative_name and record.alternative_name:
            alternative = self.name_fitter.fit_name_labels(
                alternative_name_components(record), width
            )
            labels.append(LabelLine(
                "alternative-name", 0, y + 37, "middle", record.is_alt_rtl,
                alternative, record.alternative_name,
            ))

        if record.timespan:
            text = self.date_fitter.fit_date_label(record.timespan, geo.date_width(True))
            labels.append(LabelLine(
                "timespan", 0, y + 75, "middle",
                spans=[NameComponent(label=text)], title=record.timespan,
            ))

        return labels

    def _horizontal_labels(self, record: PersonRecord) -> List[LabelLine]:
        geo = self.geometry
        with_image = record.has_thumbnail
        width = geo.name_width(with_image)
        x = geo.label_x(with_image)
        y = geo.text_y
        labels = []

        if self._has_name_parts(record):
            names = self.name_fitter.fit_name_labels(build_name_components(record), width)
        else:
            names = self._full_name(record)

        labels.append(LabelLine(
            "name", x, y - 10, self._anchor(record.is_name_rtl), record.is_name_rtl,
            names, record.name,
        ))

        if self.config.show_alternative_name and record.alternative_name:
            alternative = self.name_fitter.fit_name_labels(
                alternative_name_components(record), width
            )
            labels.append(LabelLine(
                "alternative-name", x, y + 8, self._anchor(record.is_alt_rtl), record.is_alt_rtl,
                alternative, record.alternative_name,
            ))

        dates = [
            (kind, icon, value)
            for kind, icon, value in (("birth", BIRTH_ICON, record.birth), ("death", DEATH_ICON, record.death))
            if value
        ]
        for i, (kind, icon, value) in enumerate(dates):
            text = self.date_fitter.fit_date_label(value, geo.date_width(with_image))
            labels.append(LabelLine(
                kind, x, y + 30 + i * 20, self._anchor(False),
                spans=[NameComponent(label=text)], title=value, icon=icon,
            ))

        return labels
