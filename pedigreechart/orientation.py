"""
Chart Orientation

The four tree orientations. Each one knows which axis is the depth axis,
which sign is "forward" and how box sizes map onto the generic layout.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

from .links import ConnectorPath, elbow_horizontal, elbow_vertical

if TYPE_CHECKING:
    from .layout import Link

# Box sizes per layout family
HORIZONTAL_BOX_WIDTH = 325
HORIZONTAL_BOX_HEIGHT = 95
VERTICAL_BOX_WIDTH = 160
VERTICAL_BOX_HEIGHT = 175


class ChartLayout(Enum):
    """Tree growth direction."""
    TOP_BOTTOM = "down"
    BOTTOM_TOP = "up"
    LEFT_RIGHT = "right"
    RIGHT_LEFT = "left"

    @property
    def is_horizontal(self) -> bool:
        return self in (ChartLayout.LEFT_RIGHT, ChartLayout.RIGHT_LEFT)

    @classmethod
    def parse(cls, value: str) -> "ChartLayout":
        """Parse a layout from its value ("down") or name ("top_bottom")."""
        key = str(value).strip().lower()
        for layout in cls:
            if key in (layout.value, layout.name.lower(), layout.name.lower().replace("_", "-")):
                return layout
        raise ValueError(
            f"Unknown chart layout {value!r}, expected one of: "
            + ", ".join(layout.value for layout in cls)
        )


@dataclass(frozen=True)
class Orientation:
    """Orientation strategy for one chart layout.

    Created through get_orientation(). An Orientation without a layout is a
    bare base value and refuses every capability.
    """
    layout: Optional[ChartLayout]
    box_width: float
    box_height: float
    x_offset: float
    y_offset: float
    rtl: bool = False

    def _require_layout(self) -> ChartLayout:
        if self.layout is None:
            raise NotImplementedError("Orientation has no chart layout configured")
        return self.layout

    @property
    def is_horizontal(self) -> bool:
        return self._require_layout().is_horizontal

    @property
    def split_names(self) -> bool:
        """Vertical boxes put first and last names on separate lines."""
        return not self.is_horizontal

    def direction(self) -> int:
        layout = self._require_layout()
        if layout is ChartLayout.TOP_BOTTOM:
            return 1
        if layout is ChartLayout.LEFT_RIGHT:
            return -1 if self.rtl else 1
        return -1

    def node_width(self) -> float:
        """Breadth-axis size of a layout cell."""
        if self.is_horizontal:
            return self.box_height + self.y_offset
        return self.box_width + self.x_offset

    def node_height(self) -> float:
        """Depth-axis size of a layout cell."""
        if self.is_horizontal:
            return self.box_width + self.x_offset
        return self.box_height + self.y_offset

    def norm(self, x: float, y: float) -> Tuple[float, float]:
        """Map generic (breadth, depth) coordinates to chart (x, y)."""
        if self.is_horizontal:
            return y * self.direction(), x
        return x, y * self.direction()

    def elbow(self, link: "Link") -> ConnectorPath:
        if self.is_horizontal:
            return elbow_horizontal(link, self)
        return elbow_vertical(link, self)


def get_orientation(
    layout: ChartLayout,
    rtl: bool = False,
    box_width: Optional[float] = None,
    box_height: Optional[float] = None,
) -> Orientation:
    """Return the orientation for a layout, with the default box size unless given."""
    if not isinstance(layout, ChartLayout):
        layout = ChartLayout.parse(layout)

    if layout.is_horizontal:
        return Orientation(
            layout=layout,
            box_width=box_width or HORIZONTAL_BOX_WIDTH,
            box_height=box_height or HORIZONTAL_BOX_HEIGHT,
            x_offset=40,
            y_offset=20,
            rtl=rtl,
        )

    return Orientation(
        layout=layout,
        box_width=box_width or VERTICAL_BOX_WIDTH,
        box_height=box_height or VERTICAL_BOX_HEIGHT,
        x_offset=30,
        y_offset=40,
        rtl=rtl,
    )
