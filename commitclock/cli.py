#!/usr/bin/env python3
"""
commit-clock

Renders a GitHub user's commit activity as an embeddable SVG chart, or
serves the charts over HTTP.

Usage:
    commit-clock --render octocat --type radial --output clock.svg
    commit-clock --summary octocat --tz Europe/Berlin
    commit-clock --serve --port 8080
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional

from commitclock.config.loader import load_config
from commitclock.errors import ActivityError, ValidationError
from commitclock.github.client import GitHubClient
from commitclock.models.entities import ChartType, RenderConfig, Theme
from commitclock.pipeline import SOURCES, build_matrix
from commitclock.render.svg import render


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all CLI flags."""
    parser = argparse.ArgumentParser(
        prog='commit-clock',
        description='GitHub commit activity as embeddable SVG charts'
    )

    # Actions (mutually exclusive group)
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument('--render', metavar='USERNAME',
                         help='Render a chart for USERNAME')
    actions.add_argument('--summary', metavar='USERNAME',
                         help='Print a text summary of activity for USERNAME')
    actions.add_argument('--serve', action='store_true',
                         help='Start the HTTP server')

    # Chart options
    chart = parser.add_argument_group('chart options')
    chart.add_argument('--type', dest='chart_type', default=ChartType.GRID.value,
                       choices=[c.value for c in ChartType],
                       help='Chart type (default: grid)')
    chart.add_argument('--theme', default=Theme.GREEN.value,
                       choices=[t.value for t in Theme],
                       help='Color theme (default: green)')
    chart.add_argument('--tz', default='UTC',
                       help='IANA timezone for hour-of-day bucketing (default: UTC)')
    chart.add_argument('--source', default='events', choices=list(SOURCES),
                       help='Commit data source (default: events)')

    # Output options
    parser.add_argument('--output', '-o', metavar='FILE',
                        help='Write SVG to FILE instead of stdout')
    parser.add_argument('--json', action='store_true',
                        help='Output the bucketed matrix as JSON')
    parser.add_argument('--no-color', action='store_true',
                        help='Disable colors')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    # Server
    parser.add_argument('--port', type=int, default=None,
                        help='Port for the HTTP server (default: 8080)')
    parser.add_argument('--host', default=None,
                        help='Host for the HTTP server (default: 0.0.0.0)')
    parser.add_argument('--no-browser', action='store_true',
                        help='Don\'t open browser on serve')

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


def matrix_to_dict(matrix, username: str, timezone: str) -> Dict[str, Any]:
    """JSON-ready form of a matrix."""
    return {
        "username": username,
        "timezone": timezone,
        "rows": matrix.rows,
        "cols": matrix.cols,
        "start": matrix.start.isoformat() if matrix.start else None,
        "end": matrix.end.isoformat() if matrix.end else None,
        "total": matrix.total,
        "max_value": matrix.max_value,
        "cells": matrix.cells,
    }


async def _fetch_matrix(config: Dict[str, Any], render_config: RenderConfig, source: str):
    async with GitHubClient(config) as client:
        return await build_matrix(client, render_config, source, settings=config)


def run_render(config: Dict[str, Any], args) -> str:
    """Fetch, bucket and render according to CLI args; returns the output text."""
    username = args.render or args.summary
    render_config = RenderConfig(
        username=username,
        theme=Theme(args.theme),
        chart_type=ChartType(args.chart_type),
        timezone=args.tz,
    )
    matrix = asyncio.run(_fetch_matrix(config, render_config, args.source))

    if args.json:
        return json.dumps(matrix_to_dict(matrix, username, args.tz), indent=2)

    if args.summary:
        from commitclock.output.formatter import format_rolling_summary, format_weekly_summary
        color_enabled = not args.no_color
        if matrix.rows == 1:
            return format_rolling_summary(matrix, username, color_enabled)
        return format_weekly_summary(matrix, username, color_enabled)

    return render(matrix, render_config, config)


def main(argv: Optional[list] = None):
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    config = load_config()

    if args.serve:
        _run_serve(config, args)
        return

    if not (args.render or args.summary):
        parser.print_help()
        return

    try:
        output = run_render(config, args)
    except ValidationError as e:
        print(f"Error: {e.message}")
        sys.exit(2)
    except ActivityError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(output)
        print(f"Wrote {args.output}")
    else:
        print(output)


def _run_serve(config, args):
    """Start the HTTP server."""
    import uvicorn

    from commitclock.server.app import create_app
    app = create_app(config=config)

    host = args.host or config["server"]["host"]
    port = args.port or config["server"]["port"]
    url = f"http://{host}:{port}"
    print(f"\nStarting commit-clock at {url}")
    print("Press Ctrl+C to stop\n")

    if not args.no_browser:
        import threading
        import webbrowser
        threading.Timer(1.0, webbrowser.open, args=[f"{url}/docs"]).start()

    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == '__main__':
    main()
