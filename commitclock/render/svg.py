"""
SVG serialization for activity charts.

Turns an ActivityMatrix plus a RenderConfig into a standalone SVG document.
Colors and dimensions come from the configuration mapping handed in by the
caller, so a test can render with overridden settings. Cells with no
activity emit no primitive at all.
"""

from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape, quoteattr

from commitclock.config.loader import DEFAULT_CONFIG, get_theme_colors
from commitclock.core.bucketer import window_dates
from commitclock.core.geometry import (
    GridLayout,
    PolarPoint,
    RadialLayout,
    bar_length,
    gradient_color,
    intensity,
    map_to_grid,
    map_to_polar,
    marker_opacity,
    marker_size,
    polar_to_cartesian,
    slot_angle,
)
from commitclock.models.entities import ActivityMatrix, ChartType, RenderConfig, Theme
from commitclock.utils.timestamps import to_date_string

DAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

SVG_NS = "http://www.w3.org/2000/svg"


def _num(value: float) -> str:
    """Format a coordinate with at most two decimals."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _text(x: float, y: float, content: str, cls: str = "label",
          anchor: str = "middle", extra: str = "") -> str:
    return (
        f'<text class="{cls}" x="{_num(x)}" y="{_num(y)}" '
        f'text-anchor="{anchor}"{extra}>{escape(content)}</text>'
    )


def _data_attrs(row: int, col: int, value: int) -> str:
    return f'data-row="{row}" data-col="{col}" data-value="{value}"'


def _cell_color(theme: Theme, colors: Dict[str, str], i: float) -> str:
    if theme == Theme.COLORFUL:
        return gradient_color(i)
    return colors["accent"]


def _row_label(matrix: ActivityMatrix, row: int) -> str:
    if matrix.rows == len(DAY_LABELS):
        return DAY_LABELS[row]
    return ""


def _caption(matrix: ActivityMatrix, config: RenderConfig) -> str:
    noun = "contributions" if config.chart_type == ChartType.CIRCULAR_BARS else "commits"
    return (
        f"{config.username}: {matrix.total} {noun}, "
        f"{to_date_string(matrix.start)} to {to_date_string(matrix.end)} "
        f"({config.timezone})"
    )


def _document(width: float, height: float, colors: Dict[str, str],
              settings: Dict[str, Any], body: List[str], label: str = "") -> str:
    chart = settings["chart"]
    w, h = _num(width), _num(height)
    aria = f' role="img" aria-label={quoteattr(label)}' if label else ""
    parts = [
        f'<svg xmlns="{SVG_NS}" width="{w}" height="{h}" viewBox="0 0 {w} {h}"{aria}>',
        "<style>"
        f"text {{ font-family: {chart['font_family']}; "
        f"font-size: {chart['font_size']}px; fill: {colors['text']}; }}"
        "</style>",
        f'<rect class="background" width="{w}" height="{h}" fill="{colors["background"]}"/>',
    ]
    parts.extend(body)
    parts.append("</svg>")
    return "\n".join(parts) + "\n"


def _render_grid(matrix: ActivityMatrix, config: RenderConfig,
                 colors: Dict[str, str], settings: Dict[str, Any]) -> str:
    chart = settings["chart"]
    g = chart["grid"]
    cell = g["cell_size"]
    pitch = cell + g["cell_gap"]
    layout = GridLayout(pitch, pitch, g["offset_x"], g["offset_y"])
    width = g["offset_x"] + matrix.cols * pitch + g["padding"]
    height = g["offset_y"] + matrix.rows * pitch + g["caption_height"]

    body = []
    for row in range(matrix.rows):
        label = _row_label(matrix, row)
        if label:
            _, y = map_to_grid(row, 0, layout)
            body.append(_text(g["offset_x"] - 6, y + cell - 3, label, anchor="end"))

    for col in range(0, matrix.cols, chart["label_every_hours"]):
        x, _ = map_to_grid(0, col, layout)
        body.append(_text(x + cell / 2, g["offset_y"] - 8, f"{col}h"))

    max_value = matrix.max_value
    for row, col, value in matrix.nonzero():
        i = intensity(value, max_value)
        x, y = map_to_grid(row, col, layout)
        body.append(
            f'<rect class="cell" x="{_num(x)}" y="{_num(y)}" '
            f'width="{_num(cell)}" height="{_num(cell)}" rx="2" '
            f'fill="{_cell_color(config.theme, colors, i)}" '
            f'opacity="{_num(marker_opacity(i))}" {_data_attrs(row, col, value)}/>'
        )

    caption = _caption(matrix, config)
    body.append(_text(g["offset_x"], height - 10, caption, cls="caption", anchor="start"))
    return _document(width, height, colors, settings, body, caption)


def _render_radial(matrix: ActivityMatrix, config: RenderConfig,
                   colors: Dict[str, str], settings: Dict[str, Any]) -> str:
    chart = settings["chart"]
    r = chart["radial"]
    size = r["size"]
    cx = cy = size / 2
    layout = RadialLayout(cx, cy, r["base_radius"], r["ring_spacing"])
    height = size + r["caption_height"]

    body = []
    for row in range(matrix.rows):
        radius = layout.base_radius + row * layout.ring_spacing
        body.append(
            f'<circle class="ring" cx="{_num(cx)}" cy="{_num(cy)}" r="{_num(radius)}" '
            f'fill="none" stroke="{colors["muted"]}" stroke-width="1"/>'
        )
        label = _row_label(matrix, row)
        if label:
            # Left of 12 o'clock so hour-0 markers stay readable
            body.append(_text(cx - 8, cy - radius + 3, label, anchor="end"))

    outer = layout.base_radius + (matrix.rows - 1) * layout.ring_spacing
    label_point_radius = outer + r["label_offset"]
    for col in range(0, matrix.cols, chart["label_every_hours"]):
        point = PolarPoint(slot_angle(col, matrix.cols), label_point_radius)
        x, y = polar_to_cartesian(point, cx, cy)
        body.append(_text(x, y, f"{col}:00", extra=' dominant-baseline="middle"'))

    max_value = matrix.max_value
    for row, col, value in matrix.nonzero():
        i = intensity(value, max_value)
        x, y = polar_to_cartesian(map_to_polar(row, col, matrix.shape, layout), cx, cy)
        body.append(
            f'<circle class="cell" cx="{_num(x)}" cy="{_num(y)}" '
            f'r="{_num(marker_size(i, r["min_marker"], r["max_marker"]))}" '
            f'fill="{_cell_color(config.theme, colors, i)}" '
            f'opacity="{_num(marker_opacity(i))}" {_data_attrs(row, col, value)}/>'
        )

    caption = _caption(matrix, config)
    body.append(_text(cx, size + r["caption_height"] / 2, caption, cls="caption"))
    return _document(size, height, colors, settings, body, caption)


def _render_circular_bars(matrix: ActivityMatrix, config: RenderConfig,
                          colors: Dict[str, str], settings: Dict[str, Any]) -> str:
    b = settings["chart"]["circular_bars"]
    size = b["size"]
    cx = cy = size / 2
    inner = b["inner_radius"]
    max_bar = b["max_bar_length"]
    height = size + b["caption_height"]

    body = []
    for row in range(matrix.rows):
        radius = inner + row * b["bar_width"] * 2
        body.append(
            f'<circle class="ring" cx="{_num(cx)}" cy="{_num(cy)}" r="{_num(radius)}" '
            f'fill="none" stroke="{colors["muted"]}" stroke-width="1"/>'
        )

    dates = window_dates(matrix)
    for col in range(0, matrix.cols, b["label_every_days"]):
        point = PolarPoint(slot_angle(col, matrix.cols), inner + max_bar + b["label_offset"])
        x, y = polar_to_cartesian(point, cx, cy)
        label = str(dates[col].day) if dates else str(col)
        body.append(_text(x, y, label, extra=' dominant-baseline="middle"'))

    max_value = matrix.max_value
    for row, col, value in matrix.nonzero():
        i = intensity(value, max_value)
        angle = slot_angle(col, matrix.cols)
        x1, y1 = polar_to_cartesian(PolarPoint(angle, inner), cx, cy)
        x2, y2 = polar_to_cartesian(PolarPoint(angle, inner + bar_length(value, max_value, max_bar)), cx, cy)
        body.append(
            f'<line class="cell" x1="{_num(x1)}" y1="{_num(y1)}" x2="{_num(x2)}" y2="{_num(y2)}" '
            f'stroke="{_cell_color(config.theme, colors, i)}" stroke-width="{_num(b["bar_width"])}" '
            f'stroke-linecap="round" opacity="1" {_data_attrs(row, col, value)}/>'
        )

    body.append(_text(cx, cy, str(matrix.total), cls="total",
                      extra=' dominant-baseline="middle" font-size="22" font-weight="bold"'))
    caption = _caption(matrix, config)
    body.append(_text(cx, size + b["caption_height"] / 2, caption, cls="caption"))
    return _document(size, height, colors, settings, body, caption)


_RENDERERS = {
    ChartType.GRID: _render_grid,
    ChartType.RADIAL: _render_radial,
    ChartType.CIRCULAR_BARS: _render_circular_bars,
}


def render(matrix: ActivityMatrix, config: RenderConfig,
           settings: Optional[Dict[str, Any]] = None) -> str:
    """Render a matrix as an SVG document.

    Args:
        matrix: Bucketed activity
        config: Username, theme, chart type and timezone for this render
        settings: Full configuration mapping (themes and chart dimensions),
            DEFAULT_CONFIG when omitted

    Returns:
        SVG markup; identical inputs always give identical output.
    """
    settings = settings or DEFAULT_CONFIG
    theme = Theme(config.theme)
    colors = get_theme_colors(settings, theme.value)
    renderer = _RENDERERS[ChartType(config.chart_type)]
    return renderer(matrix, config, colors, settings)


def render_error(message: str, theme: str = "light",
                 settings: Optional[Dict[str, Any]] = None) -> str:
    """Fixed-size SVG carrying a readable error message."""
    settings = settings or DEFAULT_CONFIG
    colors = get_theme_colors(settings, getattr(theme, "value", theme))
    e = settings["chart"]["error"]
    body = [
        _text(10, e["height"] / 2, message, cls="error", anchor="start",
              extra=f' dominant-baseline="middle" font-size="{e["font_size"]}" fill="{e["color"]}"')
    ]
    return _document(e["width"], e["height"], colors, settings, body)
