import logging

from media_importer.core.common.exceptions import RepositoryError
from media_importer.features.storage.domain.interfaces import IMediaRepository
from ..domain.models import PurgeResult
from .aggregator import PurgeAggregator

logger = logging.getLogger(__name__)

EMPTY_LIBRARY_MESSAGE = "Media library is already empty. Nothing to delete."


class LibraryPurge:
    """
    Permanently deletes every record (any status) with its files.
    Each deletion stands alone; a failure never stops the batch.
    """

    def __init__(self, repository: IMediaRepository):
        self.repository = repository

    def purge(self) -> PurgeResult:
        result = PurgeAggregator()
        try:
            records = self.repository.list_all()
        except RepositoryError as e:
            result.failed_item("media library", str(e))
            return result.freeze()

        if not records:
            result.note(EMPTY_LIBRARY_MESSAGE)
            logger.info(EMPTY_LIBRARY_MESSAGE)
            return result.freeze()

        logger.info(f"Purging {len(records)} media records")

        for record in records:
            label = record.stored_path or record.title
            try:
                if self.repository.delete(record.id, delete_files=True):
                    result.deleted_item(label)
                else:
                    result.failed_item(label, "record or backing file could not be removed")
            except RepositoryError as e:
                result.failed_item(label, str(e))

        logger.info(f"Purge complete. Deleted {result.deleted}, errors {result.errors}")
        return result.freeze()
