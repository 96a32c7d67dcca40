"""
CovView SVG Renderer - Scene Drawing

Purpose:
- Draw a scene from chart_layout as a standalone SVG document.

Core Functions:
- render_coverage_svg(): scene dict -> SVG markup via the coverage_chart.svg template.

Every call returns a fresh document; callers decide where it goes on the page.
"""

import logging
from typing import Any, Dict

from jinja2 import Environment, PackageLoader, select_autoescape

logger = logging.getLogger(__name__)


def _px(value: float) -> str:
    """Trim coordinates to two decimals without trailing zeros."""
    text = f"{float(value):.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


_env = Environment(
    loader=PackageLoader("covview", "templates"),
    autoescape=select_autoescape(["html", "svg", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["px"] = _px


def render_coverage_svg(scene: Dict[str, Any]) -> str:
    """Render a coverage scene to SVG markup."""
    template = _env.get_template("coverage_chart.svg")
    svg = template.render(scene=scene)
    logger.debug("Rendered coverage SVG with %d rows", len(scene["rows"]))
    return svg
