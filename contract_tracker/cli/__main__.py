from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import Any

from contract_tracker.config.loader import ConfigError, load_config, resolve_config_path
from contract_tracker.dates.arithmetic import format_date
from contract_tracker.dates.parser import parse_iso
from contract_tracker.logging.init import log_summary, set_debug, setup_logging
from contract_tracker.logging.warning_log import WarningLogBuffer
from contract_tracker.models.config_models import TrackerConfig
from contract_tracker.models.contract_record import ContractRecord
from contract_tracker.models.ingestion_result import IngestionResult
from contract_tracker.services.ingestor import IngestionError, ingest_file
from contract_tracker.services.metrics import (
    ContractClass,
    StatusFilter,
    classify,
    compute_stats,
    events_on,
    filter_records,
)
from contract_tracker.services.progress import ImportProgress
from contract_tracker.services.sample_data import write_sample_workbook
from contract_tracker.services.summary import render_files_line, render_summary_line

"""Console front end.

A thin presentation layer over the import pipeline:

- ``report FILE...``  import workbooks and print the contract table
- ``inspect FILE``    print header row and the first raw rows
- ``sample OUT``      write the 10-row sample workbook

Exit codes: 0 all files imported, 2 at least one file failed to decode,
1 fatal (config error, bad arguments).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

BADGE_LABELS = {
    ContractClass.EXPIRED: "Abgelaufen",
    ContractClass.DUE_SOON: "Fällig",
    ContractClass.ACTIVE_ONLINE: "Online",
}


def _date_arg(value: str) -> date:
    parsed = parse_iso(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"not an ISO date: {value!r}")
    return parsed


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="contract-tracker", description="Contract spreadsheet importer")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", default=None, help="Path to tracker.yml")
    sub = p.add_subparsers(dest="command", required=True)

    rep = sub.add_parser("report", help="Import workbooks and print the contract table")
    rep.add_argument("files", nargs="+", type=Path)
    rep.add_argument("--today", type=_date_arg, default=None, help="Reference date (YYYY-MM-DD)")
    rep.add_argument(
        "--filter",
        dest="status_filter",
        choices=[f.value for f in StatusFilter],
        default=StatusFilter.ALL.value,
    )
    rep.add_argument("--search", default="", help="Case-insensitive name filter")
    rep.add_argument("--on", type=_date_arg, default=None, help="List contracts ending on this date")
    rep.add_argument("--raw", action="store_true", help="Also print the raw view (4th column onward)")
    rep.add_argument("--json", action="store_true", help="Print records as JSON instead of a table")
    rep.add_argument("--warnings-log", action="store_true", help="Write field warnings as JSON Lines")

    ins = sub.add_parser("inspect", help="Print headers and the first raw rows")
    ins.add_argument("file", type=Path)
    ins.add_argument("--rows", type=int, default=3)

    smp = sub.add_parser("sample", help="Write the sample workbook")
    smp.add_argument("output", type=Path)
    return p.parse_args(argv)


def _badge(record: ContractRecord, cfg: TrackerConfig) -> str:
    cls = classify(record, due_soon_days=cfg.due_soon_days, online_status=cfg.online_status)
    return BADGE_LABELS.get(cls, record.status)


def _remaining_label(record: ContractRecord) -> str:
    return f"{record.days_remaining} Tage" if record.days_remaining > 0 else "Abgelaufen"


def _printable(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def _print_table(records: list[ContractRecord], cfg: TrackerConfig) -> None:
    fmt = cfg.date_display_format
    print(f"{'ID':>4}  {'Name':<30} {'Status':<11} {'Start':<10} {'Ende':<10} Rest")
    for r in records:
        print(
            f"{r.id:>4}  {r.name[:30]:<30} {_badge(r, cfg):<11} "
            f"{format_date(r.start_date, fmt):<10} {format_date(r.end_date, fmt):<10} {_remaining_label(r)}"
        )


def _print_raw_view(result: IngestionResult) -> None:
    headers = result.raw_view_headers
    print("RAW " + " | ".join(headers))
    for values in result.raw_view_rows():
        print("RAW " + " | ".join("" if v is None else str(_printable(v)) for v in values))


def _print_day(result: IngestionResult, day: date, cfg: TrackerConfig) -> None:
    events = events_on(result.records, day, due_soon_days=cfg.due_soon_days)
    print(f"Ablaufende Verträge am {format_date(day, cfg.date_display_format)}:")
    if not events:
        print("  Keine Verträge an diesem Tag")
    for e in events:
        marker = "expired" if e.is_expired else "due" if e.is_due else "ok"
        print(f"  [{marker}] {e.title}")


def _report(args: argparse.Namespace, cfg: TrackerConfig, logger) -> int:
    warning_log = WarningLogBuffer(Path(cfg.logs_directory))
    status_filter = StatusFilter(args.status_filter)

    with ImportProgress(len(args.files)) as progress:
        for path in args.files:
            progress.begin(path)
            try:
                result = ingest_file(path, reference_now=args.today, config=cfg)
            except IngestionError as e:
                logger.error(f"{path.name}: {e}")
                progress.rejected()
                continue
            progress.imported(len(result.records))

            if args.warnings_log:
                warning_log.extend(result.warnings, source=path.name)

            rows = filter_records(
                result.records,
                status_filter,
                args.search,
                due_soon_days=cfg.due_soon_days,
                online_status=cfg.online_status,
            )
            if args.json:
                print(json.dumps([r.to_dict() for r in rows], ensure_ascii=False, indent=2))
            else:
                print(f"FILE: {path.name} ({len(rows)} von {len(result.records)} Verträgen)")
                _print_table(rows, cfg)
            if args.raw:
                _print_raw_view(result)
            if args.on is not None:
                _print_day(result, args.on, cfg)

            stats = compute_stats(
                result.records, due_soon_days=cfg.due_soon_days, online_status=cfg.online_status
            )
            log_summary(render_summary_line(result, stats)[len("SUMMARY "):])

    counts = warning_log.code_counts()
    written = warning_log.flush()
    if written is not None:
        detail = ", ".join(f"{code}={n}" for code, n in sorted(counts.items()))
        logger.info(f"field warnings written to {written} ({detail})")

    if len(args.files) > 1:
        line = render_files_line(len(args.files), progress.succeeded, progress.failed, progress.records)
        log_summary(line[len("SUMMARY "):])
    return EXIT_PARTIAL_FAILURE if progress.failed else EXIT_SUCCESS_ALL


def _inspect(args: argparse.Namespace, cfg: TrackerConfig, logger) -> int:
    try:
        result = ingest_file(args.file, config=cfg)
    except IngestionError as e:
        logger.error(f"{args.file.name}: {e}")
        return EXIT_PARTIAL_FAILURE
    print(f"FILE: {args.file.name}")
    print(f"  SHEET: {result.sheet_name} cols={list(result.headers)}")
    # datetime を含むので isoformat に寄せてから表示
    sample = [{k: _printable(v) for k, v in row.items()} for row in result.raw_rows[: args.rows]]
    print("    sample_rows=", sample)
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む ([] はテストからの明示呼び出し)
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = _parse_args(argv)
    except SystemExit as e:
        return EXIT_FATAL if e.code else EXIT_SUCCESS_ALL

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(resolve_config_path(args.config))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "sample":
        out = write_sample_workbook(args.output)
        logger.info(f"sample workbook written to {out}")
        return EXIT_SUCCESS_ALL
    if args.command == "inspect":
        return _inspect(args, cfg, logger)
    return _report(args, cfg, logger)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
