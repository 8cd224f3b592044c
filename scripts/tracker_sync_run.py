#!/usr/bin/env python3
"""Run tracker sync passes from the command line, once or on an interval."""
import argparse
import json
import random
import time
from datetime import datetime

from config import get_config
from tools.csv_transfer import export_jobs_csv
from tools.sync_jobs import sync_jobs
from tools.tracker_context import build_context


def log(message: str) -> None:
    print(message, flush=True)


def timestamp() -> str:
    return datetime.now().isoformat(timespec="seconds")


def run_once(ctx, args) -> bool:
    log(f"[{timestamp()}] sync: start")
    result = sync_jobs({}, ctx)
    if "error" in result:
        log(f"[{timestamp()}] sync: failed {json.dumps(result['error'])}")
        return False
    for line in result["message"].splitlines():
        log(f"[{timestamp()}] sync: {line}")

    if args.export:
        export_args = {"output_path": args.export_path} if args.export_path else {}
        exported = export_jobs_csv(export_args, ctx)
        if "error" in exported:
            log(f"[{timestamp()}] export: failed {json.dumps(exported['error'])}")
            return False
        log(f"[{timestamp()}] export: {exported['exported_count']} job(s) -> {exported['output_path']}")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Sync the local job tracker with the remote sheet.")
    parser.add_argument(
        "--export",
        action="store_true",
        help="Export all jobs to CSV after each successful sync.",
    )
    parser.add_argument(
        "--export-path",
        default=None,
        help="CSV output path (default: timestamped file in JOBTRACKER_EXPORT_DIR).",
    )
    parser.add_argument(
        "--interval-hours",
        type=float,
        default=None,
        help="If set, run in a loop every N hours.",
    )
    parser.add_argument(
        "--interval-jitter-seconds",
        type=float,
        default=0,
        help="Random extra sleep (0..N seconds) added to each interval loop.",
    )
    args = parser.parse_args()

    config = get_config()
    config.setup_logging()
    for warning in config.validate():
        log(f"[{timestamp()}] config: {warning}")
    ctx = build_context(config)

    if args.interval_hours and args.interval_hours > 0:
        interval_seconds = args.interval_hours * 3600
        while True:
            run_once(ctx, args)
            sleep_for = interval_seconds
            if args.interval_jitter_seconds and args.interval_jitter_seconds > 0:
                sleep_for += random.uniform(0, args.interval_jitter_seconds)
            log(f"[{timestamp()}] sleep: {sleep_for:.1f}s")
            time.sleep(sleep_for)

    return 0 if run_once(ctx, args) else 1


if __name__ == "__main__":
    raise SystemExit(main())
