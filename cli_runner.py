#!/usr/bin/env python3
"""
CLI Runner for the Situation Report Registry.

Handles all file system operations:
- Reading report fields, markup and photos from disk
- Calling sitrep modules for compiling, rendering, consolidation and weekly summaries
- Saving markup, HTML and Word documents to disk

Usage:
    python cli_runner.py compile FIELDS.json [--image PHOTO ...] [--output-dir DIR]
    python cli_runner.py render MARKUP.txt [--output-dir DIR]
    python cli_runner.py consolidate RECORDS.json --days N [--output-dir DIR]
    python cli_runner.py weekly REPORTS.txt --start YYYY-MM-DD --end YYYY-MM-DD [--output-dir DIR]

Examples:
    python cli_runner.py compile day1.json --image patrol.jpg --image camp.png
    python cli_runner.py consolidate registry.json --days 3
"""

import argparse
import asyncio
import json
import logging
import sys
import uuid
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

# Import all core functionality
from sitrep import (
    DAILY_REPORT_POLICY,
    DEFAULT_OUTPUT_DIR,
    MODEL_NAME,
    ExportedDocument,
    ReportFields,
    ReportRecord,
    SitrepError,
    add_attachments,
    classify,
    compile_report,
    configure_gemini,
    consolidate_reports,
    export_briefing,
    export_report,
    export_weekly_summary,
    render,
    render_report_page,
    report_title,
    split_daily_reports,
    summarize_week,
    validate_config,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


# =============================================================================
# FILE SYSTEM OPERATIONS (CLI-SPECIFIC)
# =============================================================================

def read_file_bytes(path: Path) -> Optional[bytes]:
    """
    Read a file and return its contents as bytes.

    Returns:
        File content as bytes, or None if error
    """
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        logger.error(f"Error reading {path.name}: {e}")
        return None


def save_text(content: str, output_path: Path) -> bool:
    """
    Save a text file (markup or HTML) to disk.

    Returns:
        True if successful, False otherwise
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(content)
        return True
    except OSError as e:
        logger.error(f"Error saving {output_path}: {e}")
        return False


def save_document(document: ExportedDocument, output_dir: Path) -> bool:
    """Save an exported Word document under its own filename."""
    output_path = output_dir / document.filename
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'wb') as f:
            f.write(document.content)
        logger.info(f"Document saved to: {output_path}")
        return True
    except OSError as e:
        logger.error(f"Error saving document to {output_path}: {e}")
        return False


def load_json(path: Path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read {path}: {e}")
        return None


# =============================================================================
# COMMANDS
# =============================================================================

def run_compile(fields_path: Path, image_paths: List[Path], output_dir: Path) -> int:
    """Compile a report from structured fields and export it in all formats."""
    data = load_json(fields_path)
    if data is None:
        return 1
    try:
        fields = ReportFields.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid report fields in {fields_path.name}: {e}")
        return 1

    raws = []
    for path in image_paths:
        raw = read_file_bytes(path)
        if raw is None:
            return 1
        raws.append(raw)

    attachments = asyncio.run(add_attachments([], raws, DAILY_REPORT_POLICY))
    record = ReportRecord(
        id=uuid.uuid4().hex,
        owner_id="cli",
        report_date=fields.report_date.strip(),
        unit=fields.unit_name.strip(),
        title=report_title(fields),
        signing_officer=fields.commander_name.strip(),
        markup_text=compile_report(fields),
        attachments=attachments,
    )
    logger.info(f"Compiled '{record.title}' with {len(attachments)} attachment(s)")

    report_dir = output_dir / fields_path.stem
    if not save_text(record.markup_text, report_dir / "report.txt"):
        return 1
    if not save_text(render_report_page(record), report_dir / "report.html"):
        return 1
    return 0 if save_document(export_report(record), report_dir) else 1


def run_render(markup_path: Path, output_dir: Path) -> int:
    """Print the classified blocks of a markup file and save its HTML fragment."""
    try:
        markup = markup_path.read_text(encoding='utf-8')
    except OSError as e:
        logger.error(f"Could not read {markup_path}: {e}")
        return 1

    blocks = classify(markup)
    for block in blocks:
        print(f"{block.kind.value.upper():<8} {block.text}")

    tree = render(blocks)
    output_path = output_dir / f"{markup_path.stem}.html"
    if not save_text(tree.to_html(), output_path):
        return 1
    logger.info(f"Rendered {len(tree.elements)} element(s) to: {output_path}")
    return 0


def run_consolidate(records_path: Path, days: int, output_dir: Path) -> int:
    """Synthesize a consolidated briefing from a saved registry."""
    data = load_json(records_path)
    if data is None:
        return 1
    try:
        records = TypeAdapter(List[ReportRecord]).validate_python(data)
    except ValidationError as e:
        logger.error(f"Invalid records in {records_path.name}: {e}")
        return 1

    is_valid, errors = validate_config()
    if not is_valid:
        for error in errors:
            logger.error(error)
        return 1

    try:
        model = configure_gemini()
    except Exception as e:
        logger.error(f"Failed to configure Gemini: {e}")
        return 1

    logger.info(f"Consolidating first {days} day(s) from {len(records)} report(s) with {MODEL_NAME}")
    briefing = consolidate_reports(records, days, model)
    save_text(briefing.model_dump_json(indent=2), output_dir / f"briefing_{days}_days.json")
    return 0 if save_document(export_briefing(briefing, days), output_dir) else 1


def run_weekly(reports_path: Path, start_date: str, end_date: str, output_dir: Path) -> int:
    """Summarize a week of daily reports pasted into one '---' separated file."""
    try:
        reports = split_daily_reports(reports_path.read_text(encoding='utf-8'))
    except OSError as e:
        logger.error(f"Could not read {reports_path}: {e}")
        return 1

    is_valid, errors = validate_config()
    if not is_valid:
        for error in errors:
            logger.error(error)
        return 1

    try:
        model = configure_gemini()
    except Exception as e:
        logger.error(f"Failed to configure Gemini: {e}")
        return 1

    summary = summarize_week(start_date, end_date, reports, model)
    save_text(summary.model_dump_json(indent=2), output_dir / f"weekly_{start_date}_{end_date}.json")
    return 0 if save_document(export_weekly_summary(summary, start_date, end_date), output_dir) else 1


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Directory for generated files (default: {DEFAULT_OUTPUT_DIR})",
    )

    parser = argparse.ArgumentParser(description="Situation Report Registry command line")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser(
        "compile", parents=[common], help="Compile a report from a fields JSON file"
    )
    compile_parser.add_argument("fields", type=Path, help="JSON file with the report fields")
    compile_parser.add_argument(
        "--image",
        dest="images",
        type=Path,
        action="append",
        default=[],
        help="Evidence photo to attach (repeatable, in order)",
    )

    render_parser = subparsers.add_parser("render", parents=[common], help="Render a markup file to HTML")
    render_parser.add_argument("markup", type=Path, help="Markup text file")

    consolidate_parser = subparsers.add_parser(
        "consolidate", parents=[common], help="Generate a consolidated briefing"
    )
    consolidate_parser.add_argument("records", type=Path, help="JSON file with a list of report records")
    consolidate_parser.add_argument("--days", type=int, required=True, help="Number of reporting days")

    weekly_parser = subparsers.add_parser(
        "weekly", parents=[common], help="Generate a weekly summary from pasted daily reports"
    )
    weekly_parser.add_argument("reports", type=Path, help="Text file of daily reports separated by '---' lines")
    weekly_parser.add_argument("--start", required=True, help="First day of the week (YYYY-MM-DD)")
    weekly_parser.add_argument("--end", required=True, help="Last day of the week (YYYY-MM-DD)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        if args.command == "compile":
            return run_compile(args.fields, args.images, args.output_dir)
        if args.command == "render":
            return run_render(args.markup, args.output_dir)
        if args.command == "consolidate":
            return run_consolidate(args.records, args.days, args.output_dir)
        return run_weekly(args.reports, args.start, args.end, args.output_dir)
    except SitrepError as e:
        logger.error(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
