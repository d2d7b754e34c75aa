"""Suggest a column mapping for a lead sheet."""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from src.config import settings
from src.matching.automap import auto_map_headers, save_mapping, summarize
from src.utils.io import read_headers
from src.utils.logs import setup_job_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Suggest CSV header to lead field mapping")
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Path to lead CSV or XLSX file"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        help=f"Minimum match score 0-1 (default: {settings.mapping_threshold})"
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Where to write the mapping JSON (default: out/mapping_<file>.json)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the mapping suggestion job."""
    args = build_parser().parse_args(argv)
    setup_job_logging("suggest_mapping")

    start_time = datetime.now()
    threshold = settings.mapping_threshold if args.threshold is None else args.threshold
    if not 0.0 <= threshold <= 1.0:
        logger.error(f"Threshold must be within [0, 1], got {threshold}")
        return 2

    try:
        headers, sample = read_headers(args.input, settings.sample_rows)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Cannot read headers: {e}")
        return 1

    logger.info(f"{len(headers)} columns detected in {args.input} ({len(sample)} sample rows)")

    result = auto_map_headers(headers, threshold=threshold)

    for header, match in result.matches:
        if match is None:
            logger.info(f"  {header!r}: no match")
        else:
            logger.info(f"  {header!r} -> {match.field} ({match.match_type}, {match.score:.2f})")

    output = Path(args.output) if args.output else settings.out_dir / f"mapping_{Path(args.input).stem}.json"
    save_mapping(result.mapping, output)

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(f"{summarize(result)} in {duration:.2f} seconds", extra={"duration": duration})
    return 0


if __name__ == "__main__":
    sys.exit(main())
