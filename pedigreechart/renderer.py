"""
SVG Renderer

Generates a static SVG document for a pedigree chart. Links are drawn
first, person boxes on top of them.
"""

import html
import logging
from typing import List, Optional

from .chart import Chart, LabelLine, NodeGeometry
from .geometry import Rect
from .links import format_number
from .records import SEX_FEMALE, SEX_MALE

logger = logging.getLogger(__name__)

CHART_PADDING = 20

STYLE = """
        .link { fill: none; stroke: rgb(200, 200, 200); stroke-width: 2px; }
        .person rect.male { fill: rgb(172, 220, 255); stroke: rgb(108, 179, 227); }
        .person rect.female { fill: rgb(255, 202, 222); stroke: rgb(231, 140, 172); }
        .person rect.unknown { fill: rgb(235, 235, 235); stroke: rgb(190, 190, 190); }
        .person rect.empty { fill: rgb(250, 250, 250); stroke: rgb(220, 220, 220); stroke-dasharray: 4,3; }
        .name tspan.preferred { text-decoration: underline; }
        .name tspan.lastName { font-weight: 600; }
        .name-alt { font-style: italic; fill: rgb(90, 90, 90); }
        .date { fill: rgb(70, 70, 70); }
"""


class SVGRenderer:
    """Renders pedigree charts as SVG."""

    def __init__(self, padding: int = CHART_PADDING):
        self.padding = padding

    def render_svg(self, chart: Optional[Chart]) -> str:
        """Generate SVG content for the chart. An empty chart gives an empty SVG."""
        if chart is None:
            return '<svg xmlns="http://www.w3.org/2000/svg" width="0" height="0"/>'

        min_x, min_y, max_x, max_y = chart.bounds()
        view_x = min_x - self.padding
        view_y = min_y - self.padding
        width = (max_x - min_x) + 2 * self.padding
        height = (max_y - min_y) + 2 * self.padding
        config = chart.config

        svg_parts = [
            f"""<svg xmlns="http://www.w3.org/2000/svg"
            xmlns:xlink="http://www.w3.org/1999/xlink"
            viewBox="{format_number(view_x)} {format_number(view_y)} {format_number(width)} {format_number(height)}"
            width="{format_number(width)}" height="{format_number(height)}"
            direction="{'rtl' if config.rtl else 'ltr'}"
            font-family="{html.escape(config.font_family)}" font-size="{format_number(config.font_size)}">"""
        ]

        svg_parts.append(self._render_defs(chart))

        svg_parts.append('<g class="links">')
        for link, path in chart.paths:
            if path.is_empty:
                continue
            target = link.target.id if link.target is not None else ""
            svg_parts.append(
                f'<path class="link" data-source="{link.source.id}" data-target="{target}" d="{path.to_svg()}"/>'
            )
        svg_parts.append("</g>")

        svg_parts.append('<g class="persons">')
        for node in chart.nodes:
            svg_parts.append(self._render_person(node, chart))
        svg_parts.append("</g>")

        svg_parts.append("</svg>")

        logger.debug("Rendered SVG with %d persons", len(chart.nodes))
        return "\n".join(svg_parts)

    def _render_defs(self, chart: Chart) -> str:
        """Render SVG definitions (image clip path, styles)."""
        image = next((node.image for node in chart.nodes if node.image is not None), None)
        clip = ""
        if image is not None:
            clip = f"""
            <clipPath id="clip-image">
                {self._rect(image)}
            </clipPath>"""

        return f"""
        <defs>{clip}
            <style>{STYLE}</style>
        </defs>
        """

    def _rect(self, rect: Rect, **attributes: str) -> str:
        extra = "".join(f' {key.rstrip("_").replace("_", "-")}="{value}"' for key, value in attributes.items())
        return (
            f'<rect x="{format_number(rect.x)}" y="{format_number(rect.y)}" width="{format_number(rect.width)}" '
            f'height="{format_number(rect.height)}" rx="{format_number(rect.rx)}" ry="{format_number(rect.ry)}"{extra}/>'
        )

    def _sex_class(self, node: NodeGeometry) -> str:
        if node.node.is_placeholder:
            return "empty"
        sex = node.node.data.sex
        if sex == SEX_FEMALE:
            return "female"
        if sex == SEX_MALE:
            return "male"
        return "unknown"

    def _render_person(self, node: NodeGeometry, chart: Chart) -> str:
        """Render one person box with image and labels."""
        position = node.node
        parts: List[str] = [
            f'<g class="person" data-id="{position.id}" '
            f'transform="translate({format_number(position.x)},{format_number(position.y)})">',
            self._rect(node.box, class_=self._sex_class(node), fill_opacity="0.5"),
        ]

        if not position.is_placeholder:
            record = position.data
            parts.append(f"<title>{html.escape(record.name)}</title>")

            if node.image is not None:
                parts.append(
                    f"""<g class="image">
                {self._rect(node.image, fill="rgb(255, 255, 255)")}
                <image x="{format_number(node.image.x)}" y="{format_number(node.image.y)}"
                    width="{format_number(node.image.width)}" height="{format_number(node.image.height)}"
                    xlink:href="{html.escape(record.thumbnail)}" clip-path="url(#clip-image)"/>
                {self._rect(node.image, fill="none", stroke="rgb(200, 200, 200)", stroke_width="1.5")}
            </g>"""
                )

            parts.extend(self._render_label(label, chart) for label in node.labels)

        parts.append("</g>")
        return "\n".join(parts)

    def _render_label(self, label: LabelLine, chart: Chart) -> str:
        direction = "rtl" if label.rtl else "ltr"

        if label.kind in ("birth", "death", "timespan"):
            title = f"<title>{html.escape(label.title)}</title>"
            text = html.escape(label.text)
            if label.icon is None:
                return (
                    f'<text class="date" x="{format_number(label.x)}" y="{format_number(label.y)}" '
                    f'text-anchor="{label.anchor}" font-size="{format_number(chart.config.date_font_size)}">'
                    f"{title}<tspan>{text}</tspan></text>"
                )

            sign = -1 if chart.config.rtl else 1
            return (
                f'<text x="{format_number(label.x)}" y="{format_number(label.y)}" dominant-baseline="middle">'
                f'<tspan dx="{sign * 5}">{label.icon}</tspan></text>\n'
                f'<text class="date" x="{format_number(label.x)}" y="{format_number(label.y)}" '
                f'text-anchor="{label.anchor}" dominant-baseline="middle" '
                f'font-size="{format_number(chart.config.date_font_size)}">'
                f'{title}<tspan dx="{sign * 15}">{text}</tspan></text>'
            )

        css_class = "name name-alt" if label.kind == "alternative-name" else "name"
        spans = []
        for i, span in enumerate(label.spans):
            classes = " ".join(
                name for name, enabled in (("preferred", span.is_preferred), ("lastName", span.is_last_name))
                if enabled
            )
            class_attr = f' class="{classes}"' if classes else ""
            dx = ""
            if i:
                dx = f' dx="{(-1 if span.is_rtl else 1) * 0.25}em"'
            spans.append(f"<tspan{class_attr}{dx}>{html.escape(span.label)}</tspan>")

        return (
            f'<text class="{css_class}" x="{format_number(label.x)}" y="{format_number(label.y)}" '
            f'text-anchor="{label.anchor}" direction="{direction}">{"".join(spans)}</text>'
        )
