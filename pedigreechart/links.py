"""
Link Router

Computes the orthogonal ("elbow") connector paths drawn between a person box
and the boxes of its parents. Paths start and end on the box edges, never at
box centers, so boxes and links can be drawn in any order.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Tuple

if TYPE_CHECKING:
    from .layout import LayoutResult, Link
    from .orientation import Orientation

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

# Gap left between consecutive straight segments of a stacked connector
LINE_CLEARANCE = 2


def format_number(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


@dataclass
class ConnectorPath:
    """One or more orthogonal polylines making up a single connector."""
    segments: List[List[Point]] = field(default_factory=list)

    @property
    def points(self) -> List[Point]:
        return [point for segment in self.segments for point in segment]

    @property
    def start(self) -> Point:
        return self.segments[0][0]

    @property
    def end(self) -> Point:
        return self.segments[-1][-1]

    @property
    def is_empty(self) -> bool:
        return not self.segments

    def to_svg(self) -> str:
        """Return the SVG path data ("d" attribute)."""
        parts = []
        for segment in self.segments:
            (x, y), rest = segment[0], segment[1:]
            parts.append(f"M {format_number(x)} {format_number(y)}")
            parts.extend(f"L {format_number(px)} {format_number(py)}" for px, py in rest)
        return " ".join(parts)


def elbow_horizontal(link: "Link", orientation: "Orientation") -> ConnectorPath:
    """Connector for left/right layouts: across, down/up, across."""
    if link.target is None:
        return stacked_segments(link, orientation)

    half_width = orientation.box_width / 2
    direction = orientation.direction()

    source_x = link.source.x + direction * half_width
    source_y = link.source.y
    target_x = link.target.x - direction * half_width
    target_y = link.target.y
    middle_x = source_x + (target_x - source_x) / 2

    return ConnectorPath([[
        (source_x, source_y),
        (middle_x, source_y),
        (middle_x, target_y),
        (target_x, target_y),
    ]])


def elbow_vertical(link: "Link", orientation: "Orientation") -> ConnectorPath:
    """Connector for top/bottom layouts: down/up, across, down/up."""
    if link.target is None:
        return stacked_segments(link, orientation)

    half_height = orientation.box_height / 2
    direction = orientation.direction()

    source_x = link.source.x
    source_y = link.source.y + direction * half_height
    target_x = link.target.x
    target_y = link.target.y - direction * half_height
    middle_y = source_y + (target_y - source_y) / 2

    return ConnectorPath([[
        (source_x, source_y),
        (source_x, middle_y),
        (target_x, middle_y),
        (target_x, target_y),
    ]])


def stacked_segments(link: "Link", orientation: "Orientation") -> ConnectorPath:
    """Straight segments joining the boxes stacked before the source box.

    Used for links without a target. Every segment but the outermost ones
    keeps LINE_CLEARANCE away from the box it touches, so that consecutive
    segments read as separate lines.
    """
    boxes = list(link.stack) + [link.source]
    path = ConnectorPath()

    for i in range(len(boxes) - 1):
        start_gap = LINE_CLEARANCE if i > 0 else 0
        end_gap = LINE_CLEARANCE if i + 1 < len(boxes) - 1 else 0

        if orientation.is_horizontal:
            half = orientation.box_height / 2
            x = link.source.x
            path.segments.append([
                (x, boxes[i].y + half + start_gap),
                (x, boxes[i + 1].y - half - end_gap),
            ])
        else:
            half = orientation.box_width / 2
            y = link.source.y
            path.segments.append([
                (boxes[i].x + half + start_gap, y),
                (boxes[i + 1].x - half - end_gap, y),
            ])

    return path


class LinkRouter:
    """Routes the links of a layout for one orientation."""

    def __init__(self, orientation: "Orientation"):
        self.orientation = orientation

    def path(self, link: "Link") -> ConnectorPath:
        return self.orientation.elbow(link)

    def route(self, result: "LayoutResult") -> List[Tuple["Link", ConnectorPath]]:
        """Compute connector paths for every link of a layout result.

        Links pointing at a node outside the result are skipped.
        """
        # Identity, not id: ids are reassigned on every build
        members = {id(node) for node in result.nodes}
        routed = []

        for link in result.links:
            if id(link.source) not in members or (
                link.target is not None and id(link.target) not in members
            ):
                logger.warning(
                    "Skipping link %s -> %s: node not part of the layout",
                    link.source.id,
                    link.target.id if link.target is not None else None,
                )
                continue
            routed.append((link, self.path(link)))

        return routed
