import threading
from pathlib import Path
from typing import Optional, Union

from media_importer.core.config.settings import Settings, settings as default_settings
from media_importer.features.media_types.data.mime_registry import MimeTypeRegistry
from media_importer.features.media_types.domain.interfaces import IMimeRegistry
from media_importer.features.media_types.service.classifier import TypeClassifier
from media_importer.features.source_scanner.data.file_walker import LocalFileWalker
from media_importer.features.storage.data.destination import NumberedNameGenerator, StorageDestinationResolver
from media_importer.features.storage.data.ffmpeg_adapter import FFprobeMetadataGenerator
from media_importer.features.storage.data.local_fs import LocalFileTransfer
from media_importer.features.storage.domain.interfaces import IMediaRepository, IMetadataGenerator

from ..domain.models import ImportReport, ImportRequest
from .duplicate_detector import DuplicateDetector
from .path_planner import PathPlanner
from .pipeline import ImportPipeline
from .purge import LibraryPurge
from .registrar import Registrar

_DEFAULT = object()


def build_importer(config: Optional[Settings] = None,
                   repository: Optional[IMediaRepository] = None,
                   registry: Optional[IMimeRegistry] = None,
                   metadata_generator=_DEFAULT) -> ImportPipeline:
    """
    Public Service API: compose an ImportPipeline from settings.

    Any collaborator can be overridden. Pass metadata_generator=None to
    skip derived metadata entirely.
    """
    config = config or default_settings
    config.ensure_dirs()

    if repository is None:
        # Imported lazily: binds the configured database engine
        from media_importer.features.storage.data.repository import SqlMediaRepository
        repository = SqlMediaRepository(storage_root=config.STORAGE_DIR)

    if registry is None:
        registry = MimeTypeRegistry.from_mimetypes(config.ADMITTED_PREFIXES)

    # Imports and thumbnails draw from one name pool
    names = NumberedNameGenerator()

    if metadata_generator is _DEFAULT:
        metadata_generator = FFprobeMetadataGenerator(
            ffprobe_binary=config.FFPROBE_BINARY,
            ffmpeg_binary=config.FFMPEG_BINARY,
            thumbnail_width=config.THUMBNAIL_WIDTH,
            names=names
        )

    resolver = StorageDestinationResolver(
        storage_root=config.STORAGE_DIR,
        base_url=config.MEDIA_BASE_URL,
        organize_by_date=config.ORGANIZE_BY_DATE
    )

    return ImportPipeline(
        walker=LocalFileWalker(),
        classifier=TypeClassifier(registry),
        planner=PathPlanner(resolver, names),
        detector=DuplicateDetector(repository),
        transfer=LocalFileTransfer(),
        registrar=Registrar(repository, metadata_generator),
        purger=LibraryPurge(repository)
    )


def run_import(source_root: Union[str, Path],
               clear_before_import: bool = False,
               cancel_event: Optional[threading.Event] = None,
               pipeline: Optional[ImportPipeline] = None) -> ImportReport:
    """
    Validates the root, then runs one import with a freshly built pipeline.
    Raises InvalidSourceError for an unusable root.
    """
    request = ImportRequest(source_root=source_root, clear_before_import=clear_before_import)
    pipeline = pipeline or build_importer()
    return pipeline.run(request, cancel_event=cancel_event)
