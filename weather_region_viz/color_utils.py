#!/usr/bin/env python3
"""
Color Utility Functions

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Pure color conversions shared by the data model (validation),
the classification engine and the render loop.
No external dependencies on Plotly or Flask.

Key Functions:
1. Hex validation
2. Hex to RGB conversion
3. Alpha-blended CSS color strings for fills

Navigation Guide:
- Use VS Code outline (Ctrl+Shift+O) to jump between functions
"""

import re
from typing import Tuple

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def is_hex_color(value: object) -> bool:
    """Return True for "#RRGGBB" strings."""
    return isinstance(value, str) and bool(_HEX_COLOR.match(value))


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """
    Convert hex color string to RGB tuple.

    Args:
        hex_color: Color string like "#FF5733" or "FF5733"

    Returns:
        Tuple of (R, G, B) integers 0-255
    """
    hex_color = hex_color.lstrip("#")
    return tuple(int(hex_color[i : i + 2], 16) for i in (0, 2, 4))


def with_alpha(hex_color: str, alpha: float) -> str:
    """
    Build an rgba() CSS color from a hex color and an opacity.

    Args:
        hex_color: Color string like "#3b82f6"
        alpha: Opacity 0-1 (clamped)

    Returns:
        String like "rgba(59, 130, 246, 0.6)"
    """
    r, g, b = hex_to_rgb(hex_color)
    alpha = min(1.0, max(0.0, alpha))
    return f"rgba({r}, {g}, {b}, {alpha:g})"
