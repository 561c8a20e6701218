"""
Dashboard view: renders transformer output as a self-contained HTML page.

Charts are drawn client-side by Plotly (loaded from CDN); tables come from
pandas. Nothing here computes metrics, it only lays out what transform.py
returns.
"""

import html
import json

import pandas as pd

from . import transform
from .config import ViewerConfig

# Palette shared by the charts
COLORS = {
    "blue": "#3b82f6",
    "green": "#10b981",
    "yellow": "#f59e0b",
    "red": "#ef4444",
    "purple": "#8b5cf6",
    "grid": "rgba(255, 255, 255, 0.1)",
    "text_secondary": "#a0a0a0",
}
PIE_COLORS = ["#3b82f6", "#10b981", "#f59e0b", "#8b5cf6", "#ec4899", "#6366f1"]


def _load_summary_table(report):
    summary = transform.load_summary(report)
    rows = [
        {"Metric": "Total Requests", "Value": f"{summary['total_requests']}"},
        {"Metric": "Success Rate", "Value": f"{summary['success_rate']:.1f}%"},
        {"Metric": "Virtual Users", "Value": f"{summary['virtual_users']}"},
        {"Metric": "Avg Response", "Value": f"{summary['avg_response']:.2f}s"},
    ]
    return pd.DataFrame(rows, columns=["Metric", "Value"]).to_html(
        classes="table table-dark table-sm", index=False, border=0
    )


def _performance_bars(report):
    bars = []
    for row in transform.http_performance(report):
        width = max(0.0, min(row["percent"], 100.0))
        bars.append(f"""
            <div class='d-flex align-items-center mb-2'>
                <div class='perf-label'>{row['metric']}</div>
                <div class='perf-track'><div class='perf-bar' style='width:{width:.1f}%'></div></div>
                <div class='perf-value'>{row['seconds']:.2f}s</div>
            </div>""")
    return "".join(bars)


def build_chart_data(stored, config):
    """Everything the page's JavaScript needs, as plain JSON-ready values."""
    report = stored.data
    tz = config.tz
    return {
        "responseTime": transform.derive_response_time_series(report, tz, config.time_format),
        "requests": transform.derive_request_rate_series(report, tz, config.time_format),
        "scenarios": transform.derive_scenario_breakdown(report),
    }


def render_dashboard(stored, config=None):
    """Render one stored report as a full HTML document."""
    config = config or ViewerConfig()
    report = stored.data
    duration = transform.compute_duration(report)
    # scenario names are user data; keep them from closing the script tag
    js_DATA = json.dumps(build_chart_data(stored, config)).replace("</", "<\\/")
    js_COLORS = json.dumps(COLORS)
    js_PIE_COLORS = json.dumps(PIE_COLORS)

    return f"""
<!doctype html>
<html>
<head>
<meta charset='utf-8'>
<title>{html.escape(config.title)} - {html.escape(stored.name)}</title>
<link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css" rel="stylesheet">
<script src="https://cdn.plot.ly/plotly-2.33.0.min.js"></script>
<style>
    body{{background:#1a1a1a;color:#ffffff;font-family:'Inter',-apple-system,BlinkMacSystemFont,"Segoe UI",Roboto,Arial,sans-serif;padding:24px;}}
    .card{{background:#242424;border:1px solid #333333;border-radius:12px;margin-bottom:16px;color:#ffffff;}}
    .card-body{{padding:20px;}}
    .text-secondary{{color:#a0a0a0 !important;}}
    .perf-label{{width:80px;font-size:0.875rem;color:#a0a0a0;}}
    .perf-track{{flex:1;height:32px;background:#1a1a1a;border-radius:4px;overflow:hidden;}}
    .perf-bar{{height:100%;background:#3b82f6;}}
    .perf-value{{width:96px;text-align:right;font-size:0.875rem;}}
    .chart{{height:256px;}}
</style>
</head>
<body>

<div class='container-fluid'>
    <h1 class='mb-4'>{html.escape(config.title)}</h1>

    <div class='mb-4'>
        <h2 class='h4 mb-1'>Load Test Results</h2>
        <p class='text-secondary mb-0'>{html.escape(stored.name)} &middot; Duration: {duration:.1f}min</p>
    </div>

    <div class='row'>
        <div class='col-md-4'><div class='card'><div class='card-body'>
            <h3 class='h5 mb-3'>Load Summary</h3>
            {_load_summary_table(report)}
        </div></div></div>

        <div class='col-md-4'><div class='card'><div class='card-body'>
            <h3 class='h5 mb-3'>Scenarios</h3>
            <div id='chart_scenarios' class='chart'></div>
        </div></div></div>

        <div class='col-md-4'><div class='card'><div class='card-body'>
            <h3 class='h5 mb-3'>HTTP Performance</h3>
            {_performance_bars(report)}
        </div></div></div>
    </div>

    <div class='card'><div class='card-body'>
        <h3 class='h5 mb-3'>Request Rate &amp; Virtual Users</h3>
        <div id='chart_requests' class='chart'></div>
    </div></div>

    <div class='card'><div class='card-body'>
        <h3 class='h5 mb-3'>Response Time Distribution</h3>
        <div id='chart_response_time' class='chart'></div>
    </div></div>
</div>

<script>
const DATA = {js_DATA};
const COLORS = {js_COLORS};
const PIE_COLORS = {js_PIE_COLORS};

const baseLayout = {{
    paper_bgcolor: 'rgba(0,0,0,0)',
    plot_bgcolor: 'rgba(0,0,0,0)',
    font: {{ color: '#ffffff' }},
    margin: {{t: 20, b: 60, l: 50, r: 20}},
    hovermode: 'x unified',
    xaxis: {{ color: COLORS.text_secondary, gridcolor: COLORS.grid }},
    yaxis: {{ color: COLORS.text_secondary, gridcolor: COLORS.grid, rangemode: 'tozero' }},
    legend: {{ orientation: 'h', y: -0.25, x: 0.5, xanchor: 'center' }}
}};

function column(rows, key) {{
    return rows.map(r => r[key]);
}}

document.addEventListener('DOMContentLoaded', function () {{
    // Scenarios pie
    if (DATA.scenarios.length > 0) {{
        Plotly.newPlot('chart_scenarios', [{{
            labels: column(DATA.scenarios, 'name'),
            values: column(DATA.scenarios, 'count'),
            type: 'pie',
            marker: {{ colors: PIE_COLORS }},
            textinfo: 'label+percent'
        }}], Object.assign({{}}, baseLayout, {{ hovermode: false }}), {{responsive: true}});
    }}

    // Request rate & virtual users
    const rx = column(DATA.requests, 'timestamp');
    Plotly.newPlot('chart_requests', [
        {{ x: rx, y: column(DATA.requests, 'requests'), name: 'Requests', mode: 'lines', fill: 'tozeroy',
           line: {{color: COLORS.blue}}, fillcolor: 'rgba(59, 130, 246, 0.1)' }},
        {{ x: rx, y: column(DATA.requests, 'vusers'), name: 'Virtual Users', mode: 'lines',
           line: {{color: COLORS.purple, width: 2}} }}
    ], baseLayout, {{responsive: true}});

    // Response time distribution (seconds)
    const tx = column(DATA.responseTime, 'timestamp');
    Plotly.newPlot('chart_response_time', [
        {{ x: tx, y: column(DATA.responseTime, 'mean'), name: 'Mean', mode: 'lines', line: {{color: COLORS.blue, width: 2}} }},
        {{ x: tx, y: column(DATA.responseTime, 'p95'), name: 'p95', mode: 'lines', line: {{color: COLORS.green, width: 2}} }},
        {{ x: tx, y: column(DATA.responseTime, 'p99'), name: 'p99', mode: 'lines', line: {{color: COLORS.yellow, width: 2}} }},
        {{ x: tx, y: column(DATA.responseTime, 'max'), name: 'Max', mode: 'lines', line: {{color: COLORS.red, width: 2, dash: 'dot'}} }}
    ], Object.assign({{}}, baseLayout, {{ yaxis: Object.assign({{}}, baseLayout.yaxis, {{ ticksuffix: 's' }}) }}), {{responsive: true}});
}});
</script>
</body>
</html>
"""


def write_dashboard(page, output_path):
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(page)
