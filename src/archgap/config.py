"""Environment-based configuration and application constants."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

# tree-sitter grammar used for every analyzed source file
GRAMMAR_MODULE = "tree_sitter_c_sharp"


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Logging
    log_level: str = "INFO"

    # Analysis
    analysis_max_concurrency: int = 5
    max_file_size_bytes: int = 2_000_000

    # Ingestion
    source_extensions: Annotated[list[str], NoDecode] = [".cs"]
    project_extensions: Annotated[list[str], NoDecode] = [".csproj"]
    skip_directories: Annotated[list[str], NoDecode] = [
        "bin",
        "obj",
        "packages",
        "node_modules",
        "TestResults",
        ".git",
        ".vs",
        ".idea",
    ]

    @field_validator("analysis_max_concurrency")
    @classmethod
    def _validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError(
                "analysis_max_concurrency must be at least 1"
            )
        return v

    @field_validator("source_extensions", "project_extensions", mode="before")
    @classmethod
    def _parse_extensions(cls, v: Any) -> Any:
        """Accept comma-separated string or list; normalize to ``.ext``."""
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, list):
            normalized: list[str] = []
            for ext in v:
                ext = str(ext).strip().lower()
                if not ext:
                    continue
                if not ext.startswith("."):
                    ext = f".{ext}"
                normalized.append(ext)
            return normalized
        return v

    @field_validator("skip_directories", mode="before")
    @classmethod
    def _parse_directories(cls, v: Any) -> Any:
        """Accept comma-separated string or list of directory names."""
        if isinstance(v, str):
            return [d.strip() for d in v.split(",") if d.strip()]
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }
