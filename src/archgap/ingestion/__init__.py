"""Source ingestion — enumerate source files and project descriptors."""

from pathlib import Path

from archgap.constants import BINARY_DETECTION_BUFFER
from archgap.ingestion.schemas import (
    PackageReference,
    ProjectDescriptor,
    SourceFile,
)

__all__ = [
    "PackageReference",
    "ProjectDescriptor",
    "SourceFile",
    "is_binary",
]


def is_binary(path: Path) -> bool:
    """Return True if the file appears to be binary (null byte in first N bytes)."""
    try:
        with open(path, "rb") as f:
            chunk = f.read(BINARY_DETECTION_BUFFER)
        return b"\x00" in chunk
    except OSError:
        return True
