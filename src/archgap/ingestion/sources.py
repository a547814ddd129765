"""Source providers — enumerate and read the files to analyze."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Protocol

import pathspec

from archgap.config import Settings
from archgap.errors import SourceDecodeError, SourceReadError
from archgap.ingestion import is_binary
from archgap.ingestion.schemas import SourceFile


class SourceProvider(Protocol):
    """Anything that can list source paths and return their text."""

    @property
    def root(self) -> str: ...

    def list_sources(self) -> list[str]: ...

    def read_source(self, path: str) -> str: ...


class DirectorySourceProvider:
    """Walks a directory tree for source files.

    * Skips hidden directories and ``settings.skip_directories``.
    * Honours the root ``.gitignore``.
    * Skips binary files and keeps only ``settings.source_extensions``.
    """

    def __init__(self, root: Path, settings: Settings | None = None) -> None:
        self._root = Path(root)
        self._settings = settings or Settings()

    @property
    def root(self) -> str:
        return str(self._root)

    def list_sources(self) -> list[str]:
        extensions = set(self._settings.source_extensions)
        return [
            str(p)
            for p in walk_files(self._root, set(self._settings.skip_directories))
            if p.suffix.lower() in extensions and not is_binary(p)
        ]

    def read_source(self, path: str) -> str:
        """Read *path* as UTF-8 (a leading BOM is dropped).

        Raises:
            SourceReadError: Unreadable or larger than
                ``settings.max_file_size_bytes``.
            SourceDecodeError: Not valid UTF-8.
        """
        file_path = Path(path)
        try:
            size = file_path.stat().st_size
            if size > self._settings.max_file_size_bytes:
                raise SourceReadError(
                    f"{path}: file too large ({size} bytes)"
                )
            raw = file_path.read_bytes()
        except OSError as exc:
            raise SourceReadError(f"{path}: {exc.strerror or exc}") from exc
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise SourceDecodeError(f"{path}: {exc.reason}") from exc


class InMemorySourceProvider:
    """Serves source text already held in memory (path → text)."""

    def __init__(
        self, files: Mapping[str, str], root: str = "<memory>"
    ) -> None:
        self._files = dict(files)
        self._root = root

    @classmethod
    def from_files(
        cls, files: Iterable[SourceFile], root: str = "<memory>"
    ) -> InMemorySourceProvider:
        return cls({f.path: f.text for f in files}, root=root)

    @property
    def root(self) -> str:
        return self._root

    def list_sources(self) -> list[str]:
        return list(self._files)

    def read_source(self, path: str) -> str:
        try:
            return self._files[path]
        except KeyError as exc:
            raise SourceReadError(f"{path}: not found") from exc


# ---------------------------------------------------------------------------
# Directory walking
# ---------------------------------------------------------------------------


def walk_files(root: Path, skip_dirs: set[str]) -> list[Path]:
    """Return all regular files under *root* in sorted order.

    Symlinks that resolve outside the root are skipped to prevent
    directory traversal.
    """
    gitignore_spec = _load_gitignore(root)
    return _walk_files_inner(
        root, root, skip_dirs, gitignore_spec, root.resolve()
    )


def _walk_files_inner(
    current: Path,
    root: Path,
    skip_dirs: set[str],
    gitignore_spec: pathspec.PathSpec,
    resolved_root: Path,
) -> list[Path]:
    """Recursive walk helper with symlink protection."""
    files: list[Path] = []
    for item in sorted(current.iterdir()):
        if item.is_symlink():
            resolved = item.resolve()
            if not resolved.is_relative_to(resolved_root):
                continue
        rel = str(item.relative_to(root))
        if item.is_dir():
            if item.name.startswith(".") or item.name in skip_dirs:
                continue
            if gitignore_spec.match_file(rel + "/"):
                continue
            files.extend(
                _walk_files_inner(
                    item, root, skip_dirs, gitignore_spec,
                    resolved_root,
                )
            )
        elif item.is_file():
            if not gitignore_spec.match_file(rel):
                files.append(item)
    return files


def _load_gitignore(root: Path) -> pathspec.PathSpec:
    """Load .gitignore patterns using pathspec."""
    gitignore = root / ".gitignore"
    if not gitignore.exists():
        return pathspec.PathSpec.from_lines("gitignore", [])
    try:
        with open(gitignore, encoding="utf-8") as f:
            return pathspec.PathSpec.from_lines("gitignore", f)
    except OSError:
        return pathspec.PathSpec.from_lines("gitignore", [])
