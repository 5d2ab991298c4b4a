"""
Visualization Package

Responsibility: Display-list rendering of the map (render) and its plotly
rendition (plotly_frame).

Usage:
    from weather_region_viz.visualization.render import RenderLoop, render_frame
    from weather_region_viz.visualization.plotly_frame import build_frame_figure
"""
