"""
Box Geometry

Box, image and text placement inside a person box, relative to the box
center. Shared by the link router, the text fitter and the renderer so they
agree on where the box edges are.
"""

from dataclasses import dataclass

from .orientation import Orientation

CORNER_RADIUS = 20
IMAGE_INSET = 5
VERTICAL_IMAGE_SIZE = 60

# Width of the birth/death icon column in horizontal boxes
DATE_ICON_WIDTH = 25


@dataclass(frozen=True)
class Rect:
    """A rectangle with rounded corners, relative to the box center."""
    x: float
    y: float
    width: float
    height: float
    rx: float = 0.0
    ry: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


class BoxGeometry:
    """Geometry of a person box for one orientation."""

    def __init__(self, orientation: Orientation):
        self.orientation = orientation
        horizontal = orientation.is_horizontal

        self.text_padding_x = 15 if horizontal else 5
        self.text_padding_y = 15

        self.box = Rect(
            x=-(orientation.box_width / 2),
            y=-(orientation.box_height / 2),
            width=orientation.box_width,
            height=orientation.box_height,
            rx=CORNER_RADIUS,
            ry=CORNER_RADIUS,
        )
        self.image = self._image_rect(horizontal)

    def _image_rect(self, horizontal: bool) -> Rect:
        radius = CORNER_RADIUS - IMAGE_INSET
        if horizontal:
            # Square image on the leading side (right in RTL charts), as tall as the box allows
            size = self.orientation.box_height - 2 * IMAGE_INSET
            x = self.box.x + IMAGE_INSET
            if self.orientation.rtl:
                x = self.box.right - IMAGE_INSET - size
            return Rect(
                x=x,
                y=self.box.y + IMAGE_INSET,
                width=size,
                height=size,
                rx=radius,
                ry=radius,
            )

        # Centered at the top of the box
        size = VERTICAL_IMAGE_SIZE
        return Rect(
            x=-(size / 2),
            y=self.box.y + IMAGE_INSET,
            width=size,
            height=size,
            rx=radius,
            ry=radius,
        )

    @property
    def text_x(self) -> float:
        """X-coordinate of the text start."""
        return self.box.x + self.text_padding_x

    @property
    def text_y(self) -> float:
        """Y-coordinate of the text baseline block."""
        if self.orientation.is_horizontal:
            return -self.text_padding_y
        return self.image.bottom + self.text_padding_y * 2

    @property
    def text_width(self) -> float:
        """Box width minus the left/right text padding."""
        return self.orientation.box_width - self.text_padding_x * 2

    def name_width(self, with_image: bool) -> float:
        """Width available to a name line."""
        if with_image and self.orientation.is_horizontal:
            return self.text_width - self.image.width
        return self.text_width

    def date_width(self, with_image: bool) -> float:
        """Width available to a date label."""
        if self.orientation.is_horizontal:
            return self.name_width(with_image) - DATE_ICON_WIDTH
        return self.text_width

    def label_x(self, with_image: bool) -> float:
        """Horizontal start of left aligned labels, mirrored for RTL charts."""
        x = self.text_x + (self.image.width if with_image else 0)
        return -x if self.orientation.rtl else x
