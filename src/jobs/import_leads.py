"""Import leads from a CSV/XLSX sheet into DuckDB."""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd

from src.config import settings
from src.ingest.leads_csv import import_leads, write_error_report
from src.matching.automap import auto_map_headers, load_mapping, map_row_to_lead
from src.utils.io import read_data_file, read_headers, write_preview_csv
from src.utils.logs import setup_job_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import leads from CSV or XLSX")
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Path to lead CSV or XLSX file"
    )
    parser.add_argument(
        "--mapping",
        type=str,
        help="Reviewed mapping JSON (default: auto-suggest from headers)"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        help=f"Minimum match score when auto-suggesting (default: {settings.mapping_threshold})"
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        help=f"Rows per chunk (default: {settings.import_chunk_size})"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="DuckDB path (overrides config)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Map rows and write a preview CSV without touching the database"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the lead import job."""
    args = build_parser().parse_args(argv)
    setup_job_logging("import_leads")

    start_time = datetime.now()
    stem = Path(args.input).stem
    threshold = settings.mapping_threshold if args.threshold is None else args.threshold
    if not 0.0 <= threshold <= 1.0:
        logger.error(f"Threshold must be within [0, 1], got {threshold}")
        return 2

    try:
        if args.mapping:
            mapping = load_mapping(args.mapping)
            logger.info(f"Using mapping from {args.mapping} ({len(mapping)} fields)")
        else:
            headers, _ = read_headers(args.input, settings.sample_rows)
            mapping = auto_map_headers(headers, threshold=threshold).mapping
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Cannot prepare mapping: {e}")
        return 1

    if not mapping:
        logger.error("No columns mapped, nothing to import")
        return 1

    if args.dry_run:
        try:
            df = read_data_file(args.input)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"Cannot read {args.input}: {e}")
            return 1
        leads = pd.DataFrame([map_row_to_lead(row, mapping) for row in df.to_dict(orient="records")])
        write_preview_csv(leads, settings.out_dir / f"import_preview_{stem}.csv")
        logger.info(f"Dry run: mapped {len(leads)} rows, database untouched")
        return 0

    try:
        progress = import_leads(
            args.input,
            mapping,
            db_path=args.db_path,
            chunk_size=args.chunk_size
        )
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Import aborted: {e}")
        return 1

    if progress.errors:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M")
        write_error_report(progress, settings.out_dir / f"import_errors_{stem}_{timestamp}.csv")

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(
        f"Import {progress.status}: {progress.inserted_rows} rows inserted in {duration:.2f} seconds",
        extra={"duration": duration}
    )
    return 0 if progress.status == "completed" else 1


if __name__ == "__main__":
    sys.exit(main())
