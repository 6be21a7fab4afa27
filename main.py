#!/usr/bin/env python3
"""
Vendor EDI Engine - Main Entry Point

Parses X12 850/855/810 transaction sets into normalized JSON and generates
X12 text back from normalized JSON.
"""
import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from edi_engine.batch import parse_batch
from edi_engine.config import build_code_tables, build_options, load_config
from edi_engine.edi_generator import generate_x12
from edi_engine.edi_parser import create_edi_summary, parse_x12
from edi_engine.exceptions import ConfigurationError, EdiError
from edi_engine.excel_writer import write_document_workbook
from edi_engine.logger import setup_logger
from edi_engine.models import ParseResult

DEFAULT_CONFIG_PATH = "config.yaml"


def document_json(result: ParseResult) -> Dict[str, Any]:
    """camelCase JSON of a parsed document."""
    return result.document.model_dump(mode="json", by_alias=True)


def write_json(data: Any, output: Optional[str]) -> None:
    text = json.dumps(data, indent=2)
    if output:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        Path(output).write_text(text + "\n", encoding="utf-8")
    else:
        print(text)


def run_parse(args, config, logger) -> int:
    options = build_options(config)
    tables = build_code_tables(config)

    text = Path(args.file).read_text(encoding="utf-8")
    result = parse_x12(text, options=options, tables=tables)

    if args.summary:
        print(create_edi_summary(result.segments))

    write_json(document_json(result), args.json)
    if args.json:
        logger.info(f"JSON written: {args.json}")

    if args.excel:
        write_document_workbook(result, args.excel, tables=tables)

    for warning in result.warnings:
        logger.warning(f"Warning: {warning}")
    return 0


def run_generate(args, config, logger) -> int:
    options = build_options(config)
    tables = build_code_tables(config)

    with open(args.file, "r", encoding="utf-8") as f:
        data = json.load(f)

    text = generate_x12(data, options=options, tables=tables)

    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        Path(args.output).write_text(text, encoding="utf-8")
        logger.info(f"X12 written: {args.output}")
    else:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
    return 0


def run_batch(args, config, logger) -> int:
    input_dir = Path(args.directory)
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Input directory not found: {input_dir}")

    files = sorted(input_dir.glob(args.pattern))
    if not files:
        logger.warning(f"No files matching '{args.pattern}' in {input_dir}")
        return 0

    # Bytes, so a file that is not UTF-8 fails alone inside the batch
    texts = {f.name: f.read_bytes() for f in files}
    report = parse_batch(
        texts,
        options=build_options(config),
        tables=build_code_tables(config),
        max_threads=config["max_threads"],
    )

    write_failures = 0
    for outcome in report.outcomes:
        if outcome.ok:
            result = outcome.result
            logger.info(
                f"  OK    {outcome.key}: {result.doc_type}, {result.line_count} lines, "
                f"{len(result.warnings)} warnings"
            )
            if args.output:
                out_file = Path(args.output) / f"{Path(outcome.key).stem}.json"
                try:
                    write_json(document_json(result), str(out_file))
                except OSError as e:
                    logger.error(f"  FAIL  {outcome.key}: could not write {out_file}: {e}")
                    write_failures += 1
        else:
            logger.error(f"  FAIL  {outcome.key}: {outcome.error}")

    logger.info(
        f"Batch complete: {len(report.succeeded)} succeeded, {len(report.failed)} failed, "
        f"{write_failures} output files not written"
    )
    return 0 if report.all_ok and not write_failures else 1


def build_arg_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config", "-c",
        default=DEFAULT_CONFIG_PATH,
        help="Configuration file path (default: config.yaml)"
    )
    common.add_argument(
        "--logs", "-l",
        default=None,
        help="Log directory (default: log_dir from config, else logs)"
    )

    parser = argparse.ArgumentParser(
        description="Parse and generate EDI X12 850/855/810 transaction sets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example usage:
  python main.py parse input/sample_850.txt --summary
  python main.py parse input/sample_810.txt --json output/810.json --excel output
  python main.py generate input/sample_850.json --output output/850.x12
  python main.py batch input --pattern "*.txt"
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", parents=[common], help="Parse an X12 file to JSON")
    parse_cmd.add_argument("file", help="X12 file (850, 855 or 810)")
    parse_cmd.add_argument("--json", help="Write normalized JSON here instead of stdout")
    parse_cmd.add_argument("--excel", help="Directory for an Excel export of the document")
    parse_cmd.add_argument("--summary", action="store_true", help="Print the segment summary")
    parse_cmd.set_defaults(handler=run_parse)

    generate_cmd = subparsers.add_parser("generate", parents=[common], help="Generate X12 from JSON")
    generate_cmd.add_argument("file", help="Normalized JSON document (must contain docType)")
    generate_cmd.add_argument("--output", "-o", help="Write X12 here instead of stdout")
    generate_cmd.set_defaults(handler=run_generate)

    batch_cmd = subparsers.add_parser("batch", parents=[common], help="Parse every matching file in a directory")
    batch_cmd.add_argument("directory", help="Directory of X12 files")
    batch_cmd.add_argument("--pattern", default="*.txt", help="Glob pattern (default: *.txt)")
    batch_cmd.add_argument("--output", "-o", help="Directory for one JSON file per parsed document")
    batch_cmd.set_defaults(handler=run_batch)

    return parser


def main(argv=None):
    """Main entry point for the EDI engine CLI."""
    args = build_arg_parser().parse_args(argv)

    config_path = args.config
    if config_path == DEFAULT_CONFIG_PATH and not Path(config_path).exists():
        config_path = None

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logger = setup_logger(
        log_dir=args.logs or config["log_dir"],
        log_retention_days=config["log_retention_days"],
    )
    logger.info("=" * 60)
    logger.info(f"EDI Engine: {args.command}")
    logger.info("=" * 60)

    start_time = time.time()

    try:
        exit_code = args.handler(args, config, logger)
        logger.info(f"Processing time: {time.time() - start_time:.2f} seconds")
        return exit_code

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1

    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON: {e}")
        return 1

    except ValidationError as e:
        logger.error(f"Invalid document: {e}")
        return 1

    except EdiError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
