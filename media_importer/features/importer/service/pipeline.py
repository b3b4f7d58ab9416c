import logging
import os
import threading
from pathlib import Path
from typing import Optional

from media_importer.core.common.exceptions import MediaImporterError, PlanningError, RegistrationError, TransferError
from media_importer.features.media_types.service.classifier import TypeClassifier
from media_importer.features.source_scanner.domain.interfaces import IFileWalker
from media_importer.features.source_scanner.domain.models import SourceFile, validate_source_root
from media_importer.features.storage.domain.interfaces import IFileTransfer

from ..domain.models import ImportReport, ImportRequest, RunResult
from .aggregator import RunAggregator
from .duplicate_detector import DuplicateDetector
from .path_planner import PathPlanner
from .purge import LibraryPurge
from .registrar import Registrar

logger = logging.getLogger(__name__)


class ImportPipeline:
    """
    High-level API for bulk import.

    Files are processed strictly one at a time: unique-name generation and
    the duplicate check are only race-free because nothing overlaps.
    """

    def __init__(self,
                 walker: IFileWalker,
                 classifier: TypeClassifier,
                 planner: PathPlanner,
                 detector: DuplicateDetector,
                 transfer: IFileTransfer,
                 registrar: Registrar,
                 purger: LibraryPurge):
        self.walker = walker
        self.classifier = classifier
        self.planner = planner
        self.detector = detector
        self.transfer = transfer
        self.registrar = registrar
        self.purger = purger

    def run(self, request: ImportRequest, cancel_event: Optional[threading.Event] = None) -> ImportReport:
        """
        Optionally purges the library, then imports every file under the root.
        Raises InvalidSourceError only; per-file failures end up in the report.
        """
        # The root may have vanished since the request was built
        validate_source_root(request.source_root)

        purge_result = None
        if request.clear_before_import:
            purge_result = self.purger.purge()

        run_result = self.import_tree(request.source_root, cancel_event)
        return ImportReport(run=run_result, purge=purge_result)

    def import_tree(self, root: Path, cancel_event: Optional[threading.Event] = None) -> RunResult:
        result = RunAggregator()
        logger.info(f"Starting import of: {root}")
        self.planner.begin_run()

        for source in self.walker.walk(root):
            if cancel_event is not None and cancel_event.is_set():
                logger.warning(f"Import cancelled after {result.scanned} files")
                result.cancelled = True
                break

            try:
                self._process_file(root, source, result)
            except (MediaImporterError, OSError, UnicodeError) as e:
                # Anything a single file throws stays that file's error
                result.failed_file(self._display_name(root, source), str(e))

        logger.info(
            f"Import complete. Scanned {result.scanned}: imported {result.imported}, "
            f"skipped {result.skipped}, errors {result.errors}"
        )
        return result.freeze()

    def _process_file(self, root: Path, source: SourceFile, result: RunAggregator) -> None:
        display_name = self._display_name(root, source)

        # 0. Stored paths and titles must be valid UTF-8
        if not self._is_utf8(self._relative_name(root, source)):
            result.failed_file(display_name, "file name is not valid UTF-8")
            return

        # 1. Cheap rejection on the original name
        if self.classifier.classify(source.basename) is None:
            result.skipped_file(display_name, "unsupported type")
            return

        # 2. Plan destination
        try:
            plan = self.planner.plan(root, source)
        except PlanningError as e:
            result.failed_file(display_name, str(e))
            return

        # 3. Re-check on the final name, the generator may have changed it
        mime_type = self.classifier.classify(plan.unique_name)
        if mime_type is None:
            result.skipped_file(display_name, "unsupported type")
            return

        # 4. Duplicates are rejected before any bytes move
        if self.detector.exists(plan):
            result.skipped_file(display_name, "already imported")
            return

        # 5. Copy
        try:
            self.transfer.copy(source.path, plan.dest_path)
        except TransferError as e:
            result.failed_file(display_name, str(e))
            return

        self.transfer.inherit_permissions(plan.dest_path)

        # 6. Register, rolling back the copy on failure
        try:
            self.registrar.register(plan, mime_type)
        except RegistrationError as e:
            self.transfer.remove(plan.dest_path)
            result.failed_file(display_name, f"Registration failed: {e}")
            return

        result.imported_file(f"{display_name} -> {plan.relative_stored_path}")

    @staticmethod
    def _is_utf8(name: str) -> bool:
        try:
            name.encode("utf-8")
        except UnicodeEncodeError:
            return False
        return True

    @staticmethod
    def _relative_name(root: Path, source: SourceFile) -> str:
        try:
            return source.path.relative_to(root).as_posix()
        except ValueError:
            return source.basename

    @classmethod
    def _display_name(cls, root: Path, source: SourceFile) -> str:
        # Undecodable bytes show up as \xNN escapes
        return os.fsencode(cls._relative_name(root, source)).decode("utf-8", "backslashreplace")
