from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from media_importer.features.source_scanner.domain.models import sanitize_source_path, validate_source_root

@dataclass(frozen=True)
class ImportRequest:
    """
    User intent to import a directory tree.
    Validates the source root immediately, so an invalid root aborts
    before purge or scanning can start.
    """
    source_root: Union[str, Path]
    clear_before_import: bool = False

    def __post_init__(self):
        # Frozen: normalize through object.__setattr__
        object.__setattr__(self, "source_root", sanitize_source_path(self.source_root))
        validate_source_root(self.source_root)

@dataclass(frozen=True)
class DestinationPlan:
    """
    Where a single source file will be stored.
    """
    relative_dir: str
    unique_name: str
    dest_dir: Path
    dest_path: Path
    relative_stored_path: str
    # Stored path under the original basename, before collision suffixing
    candidate_stored_path: str
    public_url: str

@dataclass(frozen=True)
class RunResult:
    scanned: int = 0
    imported: int = 0
    skipped: int = 0
    errors: int = 0
    log: Tuple[str, ...] = ()
    cancelled: bool = False
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scanned": self.scanned,
            "imported": self.imported,
            "skipped": self.skipped,
            "errors": self.errors,
            "cancelled": self.cancelled,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "log": list(self.log),
        }

@dataclass(frozen=True)
class PurgeResult:
    deleted: int = 0
    errors: int = 0
    log: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"deleted": self.deleted, "errors": self.errors, "log": list(self.log)}

@dataclass(frozen=True)
class ImportReport:
    """
    Everything a caller gets back from one invocation.
    """
    run: RunResult
    purge: Optional[PurgeResult] = None

    @property
    def log(self) -> Tuple[str, ...]:
        purge_log = self.purge.log if self.purge else ()
        return purge_log + self.run.log

    def summary(self) -> str:
        message = (
            f"Scanned {self.run.scanned} files. Imported {self.run.imported}. "
            f"Skipped {self.run.skipped}. Errors {self.run.errors}."
        )
        if self.purge:
            message = f"Deleted {self.purge.deleted} existing items ({self.purge.errors} errors). " + message
        if self.run.cancelled:
            message += " Import was cancelled."
        return message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run": self.run.to_dict(),
            "purge": self.purge.to_dict() if self.purge else None,
            "log": list(self.log),
            "summary": self.summary(),
        }
