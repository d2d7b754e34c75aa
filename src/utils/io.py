"""File I/O utilities for CSV and XLSX."""
import csv
import pandas as pd
from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging

logger = logging.getLogger(__name__)

# Separators spreadsheet exports use; anything else is part of a header
CSV_DELIMITERS = ",;\t"


def sniff_delimiter(file_path: Union[str, Path]) -> str:
    """
    Guess the CSV separator from the header line.

    Args:
        file_path: Path to CSV file

    Returns:
        One of CSV_DELIMITERS; "," when the header line has none of them
    """
    with open(file_path, encoding="utf-8-sig", newline="") as f:
        header_line = f.readline()

    try:
        return csv.Sniffer().sniff(header_line, delimiters=CSV_DELIMITERS).delimiter
    except csv.Error:
        return ","


def read_data_file(file_path: Union[str, Path], nrows: Optional[int] = None) -> pd.DataFrame:
    """
    Read CSV or XLSX file into DataFrame.

    Every cell is read as text; blanks stay as empty strings so that the
    mapping step decides what counts as missing.

    Args:
        file_path: Path to CSV or XLSX file
        nrows: Optional number of data rows to read

    Returns:
        DataFrame with file contents

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file format is not supported
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    suffix = file_path.suffix.lower()

    try:
        if suffix == ".csv":
            # utf-8-sig drops the BOM spreadsheet exports put before the first header
            df = pd.read_csv(
                file_path,
                dtype=str,
                keep_default_na=False,
                nrows=nrows,
                encoding="utf-8-sig",
                sep=sniff_delimiter(file_path)
            )
        elif suffix == ".xlsx":
            df = pd.read_excel(file_path, engine="openpyxl", dtype=str, keep_default_na=False, nrows=nrows)
        elif suffix == ".xls":
            # Old Excel format - use xlrd
            try:
                df = pd.read_excel(file_path, engine="xlrd", dtype=str, keep_default_na=False, nrows=nrows)
            except Exception as xlrd_error:
                # If xlrd fails, try openpyxl in case file is misnamed
                logger.warning(f"xlrd failed for {file_path}, trying openpyxl: {xlrd_error}")
                try:
                    df = pd.read_excel(file_path, engine="openpyxl", dtype=str, keep_default_na=False, nrows=nrows)
                except Exception:
                    # Re-raise original xlrd error
                    raise xlrd_error
        else:
            raise ValueError(f"Unsupported file format: {suffix}")

        logger.info(f"Loaded {len(df)} rows from {file_path}")
        return df

    except Exception as e:
        logger.error(f"Error reading {file_path}: {e}")
        raise


def read_headers(file_path: Union[str, Path], sample_rows: int = 10) -> Tuple[List[str], pd.DataFrame]:
    """
    Read the header row and a few sample rows.

    Args:
        file_path: Path to CSV or XLSX file
        sample_rows: Number of data rows to keep as sample

    Returns:
        Tuple of (headers, sample DataFrame)
    """
    sample = read_data_file(file_path, nrows=sample_rows)
    headers = [str(h) for h in sample.columns]
    return headers, sample


def write_preview_csv(df: pd.DataFrame, output_path: Union[str, Path], max_rows: int = 1000):
    """
    Write a preview CSV with first N rows.

    Args:
        df: DataFrame to write
        output_path: Output file path
        max_rows: Maximum number of rows to write
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    preview_df = df.head(max_rows)
    preview_df.to_csv(output_path, index=False)
    logger.info(f"Wrote preview CSV with {len(preview_df)} rows to {output_path}")
