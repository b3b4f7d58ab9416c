import logging
from typing import Optional
from uuid import UUID

from media_importer.core.common.exceptions import RegistrationError, RepositoryError
from media_importer.core.common.filenames import split_extension
from media_importer.features.storage.domain.models import ATTACHED_FILE_KEY, SOURCE_FILE_KEY, NewMediaRecord
from media_importer.features.storage.domain.interfaces import IMediaRepository, IMetadataGenerator
from ..domain.models import DestinationPlan

logger = logging.getLogger(__name__)


def title_from_filename(filename: str) -> str:
    """'holiday.final.jpg' -> 'holiday.final'"""
    return split_extension(filename)[0]


class Registrar:
    """
    Turns a copied file into a media record.
    """

    def __init__(self, repository: IMediaRepository, metadata_generator: Optional[IMetadataGenerator] = None):
        self.repository = repository
        self.metadata_generator = metadata_generator

    def register(self, plan: DestinationPlan, mime_type: str) -> UUID:
        """
        Creates the record and links it to its stored path.
        Raises RegistrationError; the caller owns the file rollback.
        """
        # 1. Create
        try:
            record_id = self.repository.create(NewMediaRecord(
                mime_type=mime_type,
                title=title_from_filename(plan.unique_name),
                public_url=plan.public_url,
                content=""
            ))
        except RepositoryError as e:
            raise RegistrationError(str(e)) from e

        # 2. Link stored path and pre-numbering path (the keys duplicate detection uses)
        try:
            self.repository.set_attribute(record_id, ATTACHED_FILE_KEY, plan.relative_stored_path)
            self.repository.set_attribute(record_id, SOURCE_FILE_KEY, plan.candidate_stored_path)
        except RepositoryError as e:
            self._discard(record_id)
            raise RegistrationError(str(e)) from e

        # 3. Derived metadata
        self._attach_metadata(record_id, plan, mime_type)
        return record_id

    def _attach_metadata(self, record_id: UUID, plan: DestinationPlan, mime_type: str) -> None:
        if self.metadata_generator is None:
            return

        # Metadata is best-effort: the record counts as imported regardless.
        try:
            metadata = self.metadata_generator.generate(plan.dest_path, mime_type)
            if metadata:
                self.repository.update_metadata(record_id, metadata)
        except Exception as e:
            logger.warning(f"Metadata generation failed for {plan.unique_name}: {e}")

    def _discard(self, record_id: UUID) -> None:
        # Files stay: the pipeline rolls back the copy itself
        try:
            self.repository.delete(record_id, delete_files=False)
        except RepositoryError as e:
            logger.error(f"Could not discard half-registered record {record_id}: {e}")
