import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from media_importer.core.common.exceptions import InvalidSourceError
from media_importer.core.common.filenames import file_extension


def sanitize_source_path(path: Union[str, Path]) -> Path:
    """
    Normalizes a user supplied root: trims whitespace, converts backslashes
    and drops trailing separators.
    """
    raw = str(path).strip().replace("\\", "/")
    if raw != "/":
        raw = raw.rstrip("/")
    return Path(raw)


def validate_source_root(root: Path) -> None:
    """
    Precondition for a whole run. Raises InvalidSourceError, never per-file.
    """
    if not str(root) or str(root) == ".":
        raise InvalidSourceError("Source directory is not configured.")
    if not root.exists():
        raise InvalidSourceError(f"Source directory not found: {root}")
    if not root.is_dir():
        raise InvalidSourceError(f"Source path is not a directory: {root}")
    if not os.access(root, os.R_OK | os.X_OK):
        raise InvalidSourceError(f"Source directory is not readable: {root}")


@dataclass(frozen=True)
class SourceFile:
    """
    A file discovered under the scan root. Lives for one pipeline pass.
    """
    path: Path

    @property
    def basename(self) -> str:
        return self.path.name

    @property
    def extension(self) -> str:
        return file_extension(self.path.name)
