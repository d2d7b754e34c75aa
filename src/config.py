"""Configuration management using Pydantic BaseSettings."""
from pathlib import Path
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )

    # Data paths
    data_dir: Path = Field(default_factory=lambda: Path("./data"), alias="DATA_DIR")
    out_dir: Path = Field(default_factory=lambda: Path("./out"), alias="OUT_DIR")
    log_dir: Path = Field(default_factory=lambda: Path("./logs"), alias="LOG_DIR")

    # Database
    db_path: Path = Field(default_factory=lambda: Path("./data/leads.duckdb"), alias="DB_PATH")

    # Header auto-mapping
    mapping_threshold: float = Field(default=0.6, alias="MAPPING_THRESHOLD")
    sample_rows: int = Field(default=10, alias="SAMPLE_ROWS")

    # Import
    import_chunk_size: int = Field(default=100, alias="IMPORT_CHUNK_SIZE")

    @field_validator("mapping_threshold")
    @classmethod
    def _threshold_in_range(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"mapping_threshold must be within [0, 1], got {value}")
        return value

    @field_validator("import_chunk_size", "sample_rows")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError(f"must be a positive integer, got {value}")
        return value

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Ensure directories exist
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.out_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    @property
    def duckdb_path(self) -> str:
        """Return DuckDB path as string."""
        return str(self.db_path)


# Global settings instance
settings = Settings()
