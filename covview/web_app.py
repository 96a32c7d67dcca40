"""
CovView Web Application - Flask UI for Coverage Charts

Purpose:
- Browser entry point for genome model coverage charts.
- Accepts a pasted/uploaded coverage summary or pulls one from the summary endpoint.
- Returns the chart inline in a page, as a standalone SVG, or as a JSON scene.

Core Functions:
- Parse and validate coverage summaries before anything is drawn.
- Fall back to a message when the summary endpoint cannot be reached.
"""

import gzip
import json
import logging

from flask import Flask, Response, jsonify, render_template, request

from covview import config
from covview.chart_layout import build_coverage_scene
from covview.summary_loader import fetch_coverage_summary
from covview.summary_parser import InvalidSummaryError, parse_coverage_summary
from covview.svg_renderer import render_coverage_svg

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.update(
    SUMMARY_URL=config.SUMMARY_URL,
    FETCH_TIMEOUT=config.FETCH_TIMEOUT,
)

# Pre-filled in the form so the page is usable without an upstream endpoint.
EXAMPLE_SUMMARY = {
    "101": {"subject_name": "H_KA-174556", "lane": "2", "id": 101,
            "pc_target_space_covered": {"1": 98.7, "10": 93.2, "20": 85.4, "30": 71.9, "40": 55.0}},
    "102": {"subject_name": "H_KA-174556", "lane": "3", "id": 102,
            "pc_target_space_covered": {"1": 97.9, "10": 90.1, "20": 79.6, "30": 62.3, "40": 41.8}},
    "103": {"subject_name": "H_KA-174557", "lane": "1", "id": 103,
            "pc_target_space_covered": {"1": 99.1, "10": 95.5, "20": 88.0, "30": 76.4, "40": 60.2}},
}


def render_summary_chart(summary):
    """Lay out and draw a parsed summary; returns the SVG markup."""
    scene = build_coverage_scene(summary)
    logger.info("Rendered coverage chart: %d models, depths %s", len(scene["rows"]), scene["depths"])
    return render_coverage_svg(scene)


def _read_submitted_summary():
    """Summary text from the uploaded file if present, otherwise from the textarea."""
    upload = request.files.get("summary_file")
    if upload and upload.filename:
        data = upload.read()
        if upload.filename.endswith(".gz"):
            data = gzip.decompress(data)
        return data.decode("utf-8")
    return request.form.get("summary_json", "")


def _fetch_upstream_summary():
    return fetch_coverage_summary(
        app.config["SUMMARY_URL"],
        params=request.args.to_dict(flat=False) or None,
        timeout=app.config["FETCH_TIMEOUT"],
    )


@app.route("/", methods=["GET", "POST"])
def index():
    chart = None
    error = None
    summary_text = json.dumps(EXAMPLE_SUMMARY, indent=2)

    if request.method == "POST":
        summary_text = ""
        try:
            summary_text = _read_submitted_summary().strip()
            if not summary_text:
                raise InvalidSummaryError("Paste a coverage summary or choose a file.")
            summary = parse_coverage_summary(json.loads(summary_text))
            chart = render_summary_chart(summary)
        except (OSError, UnicodeDecodeError):
            error = "Uploaded file is not UTF-8 JSON or gzip-compressed JSON."
        except json.JSONDecodeError as e:
            error = f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})"
        except InvalidSummaryError as e:
            error = f"Invalid coverage summary: {e}"

    return render_template("index.html", chart=chart, error=error, summary_text=summary_text)


@app.route("/coverage")
def coverage_page():
    chart = None
    error = None

    try:
        summary = _fetch_upstream_summary()
        if summary is None:
            error = config.FETCH_FAILURE_MESSAGE
        else:
            chart = render_summary_chart(summary)
    except InvalidSummaryError as e:
        error = f"Invalid coverage summary: {e}"

    return render_template("index.html", chart=chart, error=error, summary_text=None)


@app.route("/coverage.svg")
def coverage_svg():
    try:
        summary = _fetch_upstream_summary()
        if summary is None:
            return Response(config.FETCH_FAILURE_MESSAGE, status=502, mimetype="text/plain")
        svg = render_summary_chart(summary)
    except InvalidSummaryError as e:
        return Response(str(e), status=422, mimetype="text/plain")

    return Response(svg, mimetype="image/svg+xml")


@app.route("/coverage.json", methods=["POST"])
def coverage_scene():
    raw = request.get_json(silent=True)
    if raw is None:
        return jsonify({"error": "Request body must be a JSON coverage summary."}), 400

    try:
        scene = build_coverage_scene(parse_coverage_summary(raw))
    except InvalidSummaryError as e:
        return jsonify({"error": str(e)}), 422

    return jsonify(scene)


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    app.run(host="0.0.0.0", port=5000, debug=False)
