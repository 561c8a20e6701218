#!/usr/bin/env python3
"""
Artillery Report Viewer command line.

Uploads Artillery JSON reports into a local store and renders any stored
report as an interactive HTML dashboard:
 - upload:  parse a report file, store it and optionally render it
 - list:    show stored reports, newest first
 - rename:  change a stored report's name
 - delete:  remove a stored report
 - render:  write the dashboard for a stored report (newest by default)
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

import pandas as pd

from .config import load_config
from .dashboard import render_dashboard, write_dashboard
from .model import ParseError
from .storage import FileStorage
from .store import ReportStore
from .upload import UploadController


def build_parser():
    parser = argparse.ArgumentParser(
        prog="artillery-viewer", description="Store Artillery JSON reports and render them as HTML dashboards."
    )
    parser.add_argument("--config", default=None, help="Optional YAML config file.")
    parser.add_argument("--store-dir", default=None, help="Directory holding stored reports (default: ~/.artillery-viewer).")
    parser.add_argument("--timezone", default=None, help="Timezone for chart time labels (default: US/Eastern).")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("upload", help="Parse and store an Artillery JSON report.")
    p.add_argument("file", help="Artillery JSON report file.")
    p.add_argument("--name", default=None, help="Display name (default: the file name).")
    p.add_argument("--output", default=None, help="Also render the dashboard to this HTML file.")

    sub.add_parser("list", help="List stored reports, newest first.")

    p = sub.add_parser("rename", help="Rename a stored report.")
    p.add_argument("timestamp", type=int, help="Timestamp id of the stored report.")
    p.add_argument("name", help="New name.")

    p = sub.add_parser("delete", help="Delete a stored report.")
    p.add_argument("timestamp", type=int, help="Timestamp id of the stored report.")

    p = sub.add_parser("render", help="Render a stored report as an HTML dashboard.")
    p.add_argument("timestamp", type=int, nargs="?", default=None, help="Timestamp id (default: newest report).")
    p.add_argument("--output", required=True, help="Output HTML file path.")
    return parser


def _format_created(timestamp, tz):
    return datetime.fromtimestamp(timestamp / 1000.0, tz=tz).strftime("%Y-%m-%d %H:%M:%S %z")


def _render(entry, config, output):
    try:
        write_dashboard(render_dashboard(entry, config), output)
    except OSError as e:
        print(f"❌ Error writing output HTML file: {e}")
        return 1
    print(f"✅ Dashboard for '{entry.name}' written to: {output}")
    return 0


def cmd_upload(args, store, config):
    path = Path(args.file).resolve()
    if not path.exists():
        print(f"❌ Error: File not found: {path}")
        return 1

    controller = UploadController(store, on_error=lambda message: print(f"❌ {message}"))
    try:
        entry = controller.upload_file(path, name=args.name)
    except ParseError as e:
        print(f"    ({e.reason}) {e}")
        return 1
    print(f"✅ Stored '{entry.name}' (id {entry.timestamp}).")
    if args.output:
        return _render(controller.selected, config, args.output)
    return 0


def cmd_list(args, store, config):
    reports = store.list()
    if not reports:
        print("ℹ️ No stored reports.")
        return 0
    tz = config.tz
    df = pd.DataFrame(
        [{"Id": r.timestamp, "Name": r.name, "Created": _format_created(r.timestamp, tz)} for r in reports],
        columns=["Id", "Name", "Created"],
    )
    print(df.to_string(index=False))
    return 0


def cmd_rename(args, store, config):
    if store.get(args.timestamp) is None:
        print(f"❌ Error: No stored report with id {args.timestamp}.")
        return 1
    if not args.name.strip():
        print("⚠️ Warning: Name is blank. Keeping the current name.")
    store.rename(args.timestamp, args.name)
    print(f"✅ Report {args.timestamp} is named '{store.get(args.timestamp).name}'.")
    return 0


def cmd_delete(args, store, config):
    if store.get(args.timestamp) is None:
        print(f"⚠️ Warning: No stored report with id {args.timestamp}. Nothing deleted.")
    store.remove(args.timestamp)
    print(f"✅ {len(store)} report(s) remain.")
    return 0


def cmd_render(args, store, config):
    controller = UploadController(store)
    if args.timestamp is None:
        reports = store.list()
        entry = controller.select(reports[0].timestamp) if reports else None
    else:
        entry = controller.select(args.timestamp)
    if entry is None:
        print("❌ Error: No matching stored report to render.")
        return 1
    return _render(entry, config, args.output)


COMMANDS = {
    "upload": cmd_upload,
    "list": cmd_list,
    "rename": cmd_rename,
    "delete": cmd_delete,
    "render": cmd_render,
}


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = load_config(args.config, store_dir=args.store_dir, timezone=args.timezone)
    store = ReportStore(FileStorage(config.store_path))
    return COMMANDS[args.command](args, store, config)


if __name__ == "__main__":
    sys.exit(main())
