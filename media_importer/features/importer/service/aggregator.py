import logging
from datetime import datetime, timezone
from typing import List, Optional

from media_importer.core.common.enums import FileOutcome
from ..domain.models import PurgeResult, RunResult

logger = logging.getLogger(__name__)


class RunAggregator:
    """
    Collects one terminal outcome per file, in processing order.
    """

    def __init__(self):
        self.scanned = 0
        self.imported = 0
        self.skipped = 0
        self.errors = 0
        self.cancelled = False
        self.lines: List[str] = []
        self.started_at = datetime.now(timezone.utc)

    def record(self, outcome: FileOutcome, name: str, reason: Optional[str] = None) -> None:
        self.scanned += 1

        if outcome is FileOutcome.IMPORTED:
            self.imported += 1
            line = f"Imported: {name}"
            logger.debug(line)
        elif outcome is FileOutcome.SKIPPED:
            self.skipped += 1
            line = f"Skipped ({reason}): {name}"
            logger.debug(line)
        else:
            self.errors += 1
            line = f"Error: {name}: {reason}"
            logger.error(line)

        self.lines.append(line)

    def imported_file(self, name: str) -> None:
        self.record(FileOutcome.IMPORTED, name)

    def skipped_file(self, name: str, reason: str) -> None:
        self.record(FileOutcome.SKIPPED, name, reason)

    def failed_file(self, name: str, reason: str) -> None:
        self.record(FileOutcome.ERROR, name, reason)

    def freeze(self) -> RunResult:
        return RunResult(
            scanned=self.scanned,
            imported=self.imported,
            skipped=self.skipped,
            errors=self.errors,
            log=tuple(self.lines),
            cancelled=self.cancelled,
            started_at=self.started_at,
            finished_at=datetime.now(timezone.utc)
        )


class PurgeAggregator:
    def __init__(self):
        self.deleted = 0
        self.errors = 0
        self.lines: List[str] = []

    def deleted_item(self, label: str) -> None:
        self.deleted += 1
        self.lines.append(f"Deleted: {label}")

    def failed_item(self, label: str, reason: str) -> None:
        self.errors += 1
        line = f"Delete failed: {label}: {reason}"
        logger.error(line)
        self.lines.append(line)

    def note(self, message: str) -> None:
        self.lines.append(message)

    def freeze(self) -> PurgeResult:
        return PurgeResult(deleted=self.deleted, errors=self.errors, log=tuple(self.lines))
