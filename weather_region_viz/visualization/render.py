#!/usr/bin/env python3
"""
Render Loop

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Turn one snapshot of map state into an ordered display list.
render_frame() is pure: same RenderInputs, same Frame. The browser canvas (or
the plotly rendition) only replays the commands.

Paint order (fixed):
1. Clear
2. Background gradient (theme dependent)
3. Grid: spacing 50 * zoom px, offset by (center * zoom) mod spacing
4. Each region: drop shadow, translucent fill, outline, vertex markers,
   vertex numbers when hovered, label at the centroid
5. Drawing in progress: connecting lines, dashed preview to the pointer,
   numbered point markers
6. HUD: "Zoom: 1.0x" and "Center: (x, y)"

Key Components:
- Command dataclasses (Clear, FillRect, Line, PolygonShape, Circle, Text)
- RenderInputs: hashable snapshot; region colors resolved beforehand
- RenderLoop: dirty check so unchanged inputs are not re-rendered

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from weather_region_viz.color_utils import with_alpha
from weather_region_viz.config_types import RenderStyleConfig
from weather_region_viz.geometry.transform import to_screen
from weather_region_viz.models.data_models import CanvasSize, Point, Region, Viewport

logger = logging.getLogger(__name__)

WHITE = "#ffffff"
SHADOW_FILL = "rgba(0, 0, 0, 0.1)"
SHADOW_OFFSET = 2.0
LABEL_CHAR_WIDTH = 7.0
LABEL_PADDING = 6.0


# ═══════════════════════════════════════════════════════════════════════════
# 🖌️ DISPLAY-LIST COMMANDS
# ═══════════════════════════════════════════════════════════════════════════


def _points(points: Tuple[Point, ...]) -> List[List[float]]:
    return [[round(p.x, 2), round(p.y, 2)] for p in points]


@dataclass(frozen=True)
class Clear:
    width: float
    height: float

    kind = "clear"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class FillRect:
    """Filled rectangle; gradient_to paints a top-left to bottom-right gradient."""

    x: float
    y: float
    width: float
    height: float
    color: str
    gradient_to: Optional[str] = None
    stroke: Optional[str] = None
    corner_radius: float = 0.0

    kind = "rect"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "color": self.color,
            "gradientTo": self.gradient_to,
            "stroke": self.stroke,
            "cornerRadius": self.corner_radius,
        }


@dataclass(frozen=True)
class Line:
    """Open polyline."""

    points: Tuple[Point, ...]
    color: str
    width: float = 1.0
    alpha: float = 1.0
    dash: Tuple[float, ...] = ()

    kind = "line"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "points": _points(self.points),
            "color": self.color,
            "width": self.width,
            "alpha": self.alpha,
            "dash": list(self.dash),
        }


@dataclass(frozen=True)
class PolygonShape:
    """Closed polygon with optional fill and outline."""

    points: Tuple[Point, ...]
    fill: Optional[str]
    stroke: Optional[str] = None
    stroke_width: float = 0.0
    region_id: Optional[str] = None

    kind = "polygon"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "points": _points(self.points),
            "fill": self.fill,
            "stroke": self.stroke,
            "strokeWidth": self.stroke_width,
            "regionId": self.region_id,
        }


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float
    fill: str
    glow: Optional[str] = None
    glow_blur: float = 0.0

    kind = "circle"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "center": [round(self.center.x, 2), round(self.center.y, 2)],
            "radius": self.radius,
            "fill": self.fill,
            "glow": self.glow,
            "glowBlur": self.glow_blur,
        }


@dataclass(frozen=True)
class Text:
    position: Point
    text: str
    color: str
    size: int = 12
    align: str = "center"

    kind = "text"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "position": [round(self.position.x, 2), round(self.position.y, 2)],
            "text": self.text,
            "color": self.color,
            "size": self.size,
            "align": self.align,
        }


Command = Union[Clear, FillRect, Line, PolygonShape, Circle, Text]


@dataclass(frozen=True)
class Frame:
    """Ordered display list for one repaint."""

    width: float
    height: float
    commands: Tuple[Command, ...] = ()

    def of_kind(self, kind: str) -> List[Command]:
        return [c for c in self.commands if c.kind == kind]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "commands": [c.to_dict() for c in self.commands],
        }


# ═══════════════════════════════════════════════════════════════════════════
# 📥 INPUTS
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class RenderInputs:
    """
    Everything a repaint depends on.

    region_colors is aligned with regions and already resolved by the
    classification engine at the current simulated time, so two inputs
    compare equal exactly when the frames they produce are equal.
    drawing_points and pointer are screen-space.
    """

    canvas_size: CanvasSize
    viewport: Viewport
    regions: Tuple[Region, ...] = ()
    region_colors: Tuple[str, ...] = ()
    hovered_region_id: Optional[str] = None
    is_drawing: bool = False
    drawing_points: Tuple[Point, ...] = ()
    pointer: Optional[Point] = None
    dark_mode: bool = False
    style: RenderStyleConfig = field(default_factory=RenderStyleConfig)

    def __post_init__(self) -> None:
        if len(self.region_colors) != len(self.regions):
            raise ValueError(
                f"region_colors has {len(self.region_colors)} entries "
                f"for {len(self.regions)} regions"
            )


# ═══════════════════════════════════════════════════════════════════════════
# 🎨 FRAME BUILDING
# ═══════════════════════════════════════════════════════════════════════════


def _grid_lines(inputs: RenderInputs, color: str) -> List[Line]:
    width, height = inputs.canvas_size
    viewport = inputs.viewport
    spacing = inputs.style.grid_spacing_world * viewport.zoom
    offset_x = (viewport.center.x * viewport.zoom) % spacing
    offset_y = (viewport.center.y * viewport.zoom) % spacing
    alpha = inputs.style.grid_alpha

    lines: List[Line] = []
    x = -offset_x
    while x < width + spacing:
        lines.append(Line((Point(x, 0.0), Point(x, height)), color, 1.0, alpha))
        x += spacing
    y = -offset_y
    while y < height + spacing:
        lines.append(Line((Point(0.0, y), Point(width, y)), color, 1.0, alpha))
        y += spacing
    return lines


def _region_commands(
    inputs: RenderInputs, region: Region, color: str, text_color: str
) -> List[Command]:
    if len(region.vertices) < 3:
        return []

    style = inputs.style
    hovered = region.id == inputs.hovered_region_id
    screen = tuple(
        to_screen(v, inputs.viewport, inputs.canvas_size) for v in region.vertices
    )
    shadow = tuple(Point(p.x + SHADOW_OFFSET, p.y + SHADOW_OFFSET) for p in screen)

    commands: List[Command] = [
        PolygonShape(shadow, SHADOW_FILL),
        PolygonShape(
            screen,
            fill=with_alpha(color, style.hover_fill_alpha if hovered else style.fill_alpha),
            stroke=color,
            stroke_width=3.0 if hovered else 2.0,
            region_id=region.id,
        ),
    ]

    for number, point in enumerate(screen, start=1):
        commands.append(
            Circle(point, 6.0 if hovered else 4.0, WHITE, glow=color,
                   glow_blur=10.0 if hovered else 5.0)
        )
        commands.append(Circle(point, 3.0 if hovered else 2.0, color))
        if hovered:
            commands.append(Text(Point(point.x, point.y + 3), str(number), WHITE, size=10))

    # Label box sized from an average glyph width
    label_at = to_screen(region.centroid, inputs.viewport, inputs.canvas_size)
    text_width = len(region.label) * LABEL_CHAR_WIDTH
    commands.append(
        FillRect(
            x=label_at.x - text_width / 2 - LABEL_PADDING,
            y=label_at.y - 8 - LABEL_PADDING,
            width=text_width + LABEL_PADDING * 2,
            height=16 + LABEL_PADDING * 2,
            color="rgba(0, 0, 0, 0.9)" if inputs.dark_mode else "rgba(255, 255, 255, 0.9)",
            stroke=color,
            corner_radius=4.0,
        )
    )
    commands.append(Text(Point(label_at.x, label_at.y + 3), region.label, text_color))
    return commands


def _drawing_commands(inputs: RenderInputs) -> List[Command]:
    points = inputs.drawing_points
    if not inputs.is_drawing or not points:
        return []

    color = inputs.style.drawing_color
    commands: List[Command] = []
    if len(points) > 1:
        commands.append(Line(tuple(points), color, 2.0))
    if inputs.pointer is not None:
        commands.append(Line((points[-1], inputs.pointer), color, 2.0, dash=(5.0, 5.0)))
    for number, point in enumerate(points, start=1):
        commands.append(Circle(point, 8.0, WHITE, glow=color, glow_blur=10.0))
        commands.append(Circle(point, 5.0, color))
        commands.append(Text(Point(point.x, point.y + 3), str(number), WHITE, size=10))
    return commands


def render_frame(inputs: RenderInputs) -> Frame:
    """
    Build the display list for one repaint.

    Args:
        inputs: Snapshot of viewport, regions (with resolved colors), drawing
            session, pointer and theme

    Returns:
        Frame whose commands are in paint order
    """
    width, height = inputs.canvas_size
    style = inputs.style
    if inputs.dark_mode:
        background = style.dark_background
        grid_color = style.dark_grid_color
        text_color = style.dark_text_color
    else:
        background = style.light_background
        grid_color = style.light_grid_color
        text_color = style.light_text_color

    commands: List[Command] = [
        Clear(width, height),
        FillRect(0.0, 0.0, width, height, background[0], gradient_to=background[1]),
    ]
    if not inputs.canvas_size.is_empty:
        commands.extend(_grid_lines(inputs, grid_color))

    for region, color in zip(inputs.regions, inputs.region_colors):
        commands.extend(_region_commands(inputs, region, color, text_color))

    commands.extend(_drawing_commands(inputs))

    viewport = inputs.viewport
    commands.append(
        Text(Point(15.0, 25.0), f"Zoom: {viewport.zoom:.1f}x", text_color, 14, "left")
    )
    commands.append(
        Text(
            Point(15.0, 45.0),
            f"Center: ({viewport.center.x:.0f}, {viewport.center.y:.0f})",
            text_color,
            14,
            "left",
        )
    )
    return Frame(width=width, height=height, commands=tuple(commands))


# ═══════════════════════════════════════════════════════════════════════════
# 🔁 RENDER LOOP
# ═══════════════════════════════════════════════════════════════════════════


class RenderLoop:
    """Re-renders only when the inputs differ from the previous ones."""

    def __init__(self) -> None:
        self._last_inputs: Optional[RenderInputs] = None
        self.last_frame: Optional[Frame] = None
        self.render_count = 0

    def update(self, inputs: RenderInputs) -> Frame:
        if self.last_frame is not None and inputs == self._last_inputs:
            return self.last_frame
        self.last_frame = render_frame(inputs)
        self._last_inputs = inputs
        self.render_count += 1
        logger.debug(
            f"🖌️ Frame {self.render_count}: {len(self.last_frame.commands)} commands"
        )
        return self.last_frame
