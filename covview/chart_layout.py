"""
chart_layout.py — Maps stacked coverage onto chart coordinates

Produces a plain-dict scene description (panel, bar rows, rules, legend,
axis label) that the SVG renderer draws and the JSON endpoint returns.
Nothing here touches a page; the same summary always gives the same scene.
"""

from typing import Any, Dict, List, Tuple

from covview.coverage_stacker import stack_coverage

PANEL_WIDTH = 225
ROW_HEIGHT = 16
MARGINS = {"bottom": 0, "left": 190, "right": 10, "top": 110}
BAND_FRACTION = 0.90

PALETTE = ["#339900", "#66cc00", "#009999", "#33cccc", "#669999"]

RULE_STEP = 20
RULE_COLORS = {0: "#AAA", 80: "#F00", 100: "#CCC"}
DEFAULT_RULE_COLOR = "rgba(255,255,255,.3)"
RULE_TICK_HEIGHT = 5

LEGEND_OFFSET = {"left": -185, "top": -100}
LEGEND_SPACING = 15
LEGEND_SWATCH_SIZE = 8

AXIS_LABEL = {"text": "coverage (%)", "left": 90, "top": -25, "font": "bold 14px sans-serif"}
LABEL_MARGIN = 5


def depth_color(index: int) -> str:
    """Palette entry for a depth band; cycles past the fifth band."""
    return PALETTE[index % len(PALETTE)]


def linear_scale(value: float, domain: Tuple[float, float], extent: Tuple[float, float]) -> float:
    """Map value from domain onto extent."""
    d0, d1 = domain
    r0, r1 = extent
    return r0 + (value - d0) * (r1 - r0) / (d1 - d0)


def split_banded(count: int, start: float, end: float, band: float) -> Tuple[List[float], float]:
    """
    Evenly spaced row offsets with padding between rows.

    Returns (offsets, band_height); each row occupies `band` of its step and
    the leftover space sits before the first row and between rows.
    """
    step = (end - start) / (count + (1 - band))
    offsets = [start + step * (1 - band) + i * step for i in range(count)]
    return offsets, step * band


def format_number(value: float) -> str:
    """Shortest form of a number: 90.0 -> '90', 10.25 -> '10.25'."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def build_rules(width: float) -> List[Dict[str, Any]]:
    """Vertical rules at every multiple of 20 percent."""
    rules = []
    for tick in range(0, 101, RULE_STEP):
        rules.append({
            "percent": tick,
            "x": linear_scale(tick, (0, 100), (0, width)),
            "color": RULE_COLORS.get(tick, DEFAULT_RULE_COLOR),
            "tick_height": RULE_TICK_HEIGHT,
            "tick_color": DEFAULT_RULE_COLOR,
            "label": str(tick),
        })
    return rules


def build_legend(depths: List[int]) -> Dict[str, Any]:
    entries = []
    for i, depth in enumerate(depths):
        entries.append({
            "depth": depth,
            "color": depth_color(i),
            "top": i * LEGEND_SPACING,
            "size": LEGEND_SWATCH_SIZE,
            "label": f"depth {depth}",
        })
    return {"left": LEGEND_OFFSET["left"], "top": LEGEND_OFFSET["top"], "entries": entries}


def build_rows(stack: Dict[str, Any], x_extent: float, panel_height: float) -> List[Dict[str, Any]]:
    """One bar row per model, segments stacked from the left."""
    depths = stack["depths"]
    offsets, band_height = split_banded(len(stack["models"]), 0, panel_height, BAND_FRACTION)

    rows = []
    for row_index, model in enumerate(stack["models"]):
        bands = stack["stacked"][row_index]
        full = stack["full"][row_index]
        y = offsets[row_index]

        segments = []
        running = 0.0
        for depth_index, band in enumerate(bands):
            x = linear_scale(running, (0, 100), (0, x_extent))
            width = linear_scale(band, (0, 100), (0, x_extent))
            segment = {
                "depth": depths[depth_index],
                "x": x,
                "y": y,
                "width": width,
                "height": band_height,
                "value": band,
                "full": full[depth_index],
                "color": depth_color(depth_index),
                "title": (
                    f"depth: {depths[depth_index]}; "
                    f"target space covered: {format_number(full[depth_index])}%"
                ),
                "label": None,
            }
            # Only the innermost (highest depth) segment carries a value.
            if depth_index == 0:
                segment["label"] = {"text": f"{band:.1f}", "x": x + width, "color": "white"}
            segments.append(segment)
            running += band
        rows.append({
            "model_id": model["id"],
            "label": stack["labels"][row_index],
            "label_x": -LABEL_MARGIN,
            "y": y,
            "height": band_height,
            "segments": segments,
        })
    return rows


def build_coverage_scene(summary: Dict[Any, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Lay out the stacked coverage chart for a parsed summary.

    Raises InvalidSummaryError (via the stacker) before any layout work
    when the summary breaks a precondition.
    """
    stack = stack_coverage(summary)

    width = PANEL_WIDTH
    height = ROW_HEIGHT * len(stack["models"])
    x_extent = width - 10

    return {
        "panel": {
            "width": width,
            "height": height,
            "margins": dict(MARGINS),
            "canvas_width": MARGINS["left"] + width + MARGINS["right"],
            "canvas_height": MARGINS["top"] + height + MARGINS["bottom"],
        },
        "depths": stack["depths"],
        "rows": build_rows(stack, x_extent, height),
        "rules": build_rules(x_extent),
        "legend": build_legend(stack["depths"]),
        "axis_label": dict(AXIS_LABEL),
    }
