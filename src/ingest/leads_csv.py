"""Lead CSV/XLSX import into DuckDB."""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
import pandas as pd
import duckdb
from pydantic import BaseModel, Field
from tqdm import tqdm

from src.config import settings
from src.matching.automap import ColumnMapping, map_row_to_lead, validate_mapping
from src.matching.fields import DEFAULT_LEAD_FIELDS, FieldMapping
from src.matching.transforms import coerce_value
from src.utils.io import read_data_file

logger = logging.getLogger(__name__)

LEADS_TABLE = "leads"

SQL_TYPES = {
    "text": "VARCHAR",
    "number": "DOUBLE",
    "boolean": "BOOLEAN",
    "date": "TIMESTAMP",
}

# Spreadsheet line of the first data row: 1-based plus the header line
FIRST_DATA_LINE = 2


class RowError(BaseModel):
    row: int
    data: Dict[str, Any] = Field(default_factory=dict)
    error: str


class ImportProgress(BaseModel):
    """Running state of an import; status is processing until it ends."""

    status: str = "processing"
    total_rows: int = 0
    processed_rows: int = 0
    inserted_rows: int = 0
    failed_rows: int = 0
    errors: List[RowError] = Field(default_factory=list)
    error_message: Optional[str] = None
    started_at: datetime = Field(default_factory=datetime.now)


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def init_leads_table(db_path: str, fields: Sequence[FieldMapping] = DEFAULT_LEAD_FIELDS):
    """
    Create the leads table if it doesn't exist.

    Args:
        db_path: DuckDB path
        fields: Field catalog defining the columns
    """
    columns = [f"{_quote(f.name)} {SQL_TYPES[f.data_type]}" for f in fields]
    columns += ["import_file VARCHAR", "imported_at TIMESTAMP"]

    conn = duckdb.connect(db_path)
    conn.execute(f"CREATE TABLE IF NOT EXISTS {LEADS_TABLE} ({', '.join(columns)})")
    conn.close()


def build_lead_record(lead: Dict[str, Any], fields_by_name: Dict[str, FieldMapping]) -> Dict[str, Any]:
    """
    Validate and type a mapped lead.

    Args:
        lead: Output of map_row_to_lead
        fields_by_name: Field catalog keyed by name

    Returns:
        Record with typed values

    Raises:
        ValueError: If required fields are missing or a value doesn't fit its type
    """
    if not lead:
        raise ValueError("Row has no mapped values")

    missing = [name for name, f in fields_by_name.items() if f.is_required and name not in lead]
    if missing:
        raise ValueError(f"Missing required field(s): {', '.join(missing)}")

    record = {}
    for name, value in lead.items():
        field = fields_by_name[name]
        try:
            converted = coerce_value(value, field)
        except ValueError as e:
            raise ValueError(f"{name}: {e}") from e
        if converted is not None:
            record[name] = converted

    return record


def _insert_record(conn, record: Dict[str, Any], import_file: str):
    columns = [_quote(c) for c in record] + ["import_file", "imported_at"]
    placeholders = ["?"] * len(record) + ["?", "CURRENT_TIMESTAMP"]
    conn.execute(
        f"INSERT INTO {LEADS_TABLE} ({', '.join(columns)}) VALUES ({', '.join(placeholders)})",
        list(record.values()) + [import_file]
    )


def import_leads(
    file_path: Union[str, Path],
    mapping: ColumnMapping,
    db_path: Optional[str] = None,
    fields: Sequence[FieldMapping] = DEFAULT_LEAD_FIELDS,
    chunk_size: Optional[int] = None,
    cancel_check: Optional[Callable[[], bool]] = None
) -> ImportProgress:
    """
    Import every row of a lead sheet using a column mapping.

    Rows are inserted one by one so a bad row is reported with its
    spreadsheet line instead of failing the whole chunk. Cancellation is
    checked between chunks.

    Args:
        file_path: CSV or XLSX file
        mapping: Column mapping (target field -> priority slots)
        db_path: DuckDB path (default: settings.duckdb_path)
        fields: Field catalog
        chunk_size: Rows per chunk (default: settings.import_chunk_size)
        cancel_check: Called before each chunk; True stops the import

    Returns:
        Final ImportProgress

    Raises:
        ValueError: If the mapping is empty or targets unknown fields
    """
    if not mapping:
        raise ValueError("Map at least one column before importing")
    validate_mapping(mapping)

    fields_by_name = {f.name: f for f in fields}
    unknown = [t for t in mapping if t not in fields_by_name]
    if unknown:
        raise ValueError(f"Unknown target fields in mapping: {unknown}")

    db_path = db_path or settings.duckdb_path
    chunk_size = chunk_size or settings.import_chunk_size
    import_file = Path(file_path).name

    df = read_data_file(file_path)
    rows = df.to_dict(orient="records")

    progress = ImportProgress(total_rows=len(rows))
    logger.info(f"Importing {progress.total_rows} rows from {import_file} into {LEADS_TABLE}")

    init_leads_table(db_path, fields)
    conn = duckdb.connect(db_path)

    try:
        with tqdm(total=len(rows), desc="Importing leads") as bar:
            for start in range(0, len(rows), chunk_size):
                if cancel_check is not None and cancel_check():
                    progress.status = "cancelled"
                    progress.error_message = "Cancelled by user"
                    logger.warning(f"Import cancelled after {progress.processed_rows} rows")
                    return progress

                for offset, row in enumerate(rows[start:start + chunk_size]):
                    line = start + offset + FIRST_DATA_LINE
                    lead = map_row_to_lead(row, mapping)

                    try:
                        record = build_lead_record(lead, fields_by_name)
                        _insert_record(conn, record, import_file)
                        progress.inserted_rows += 1
                    except (ValueError, duckdb.Error) as e:
                        progress.failed_rows += 1
                        progress.errors.append(RowError(row=line, data=lead, error=str(e)))
                        logger.debug(f"Row {line} failed: {e}")

                    progress.processed_rows += 1
                    bar.update(1)
    finally:
        conn.close()

    if progress.total_rows == 0:
        progress.status = "failed"
        progress.error_message = "No rows to import"
    elif progress.failed_rows == progress.total_rows:
        progress.status = "failed"
        progress.error_message = "All rows failed"
    else:
        progress.status = "completed"

    logger.info(
        f"Import {progress.status}: {progress.inserted_rows} inserted, "
        f"{progress.failed_rows} failed of {progress.total_rows}"
    )
    return progress


def write_error_report(progress: ImportProgress, output_path: Union[str, Path]) -> Path:
    """
    Write failed rows to CSV (row, error, data as JSON).

    Args:
        progress: Finished import
        output_path: Destination CSV

    Returns:
        Path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    report = pd.DataFrame(
        [
            {"row": e.row, "error": e.error, "data": json.dumps(e.data, ensure_ascii=False, default=str)}
            for e in progress.errors
        ],
        columns=["row", "error", "data"]
    )
    report.to_csv(output_path, index=False, encoding="utf-8")
    logger.info(f"Wrote {len(report)} row errors to {output_path}")
    return output_path
