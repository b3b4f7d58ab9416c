import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from media_importer.core.common.enums import RecordStatus
from media_importer.core.common.exceptions import RepositoryError
from media_importer.core.database.connection import SessionLocal
from .sql_models import MediaAttributeModel, MediaRecordModel
from ..domain.interfaces import IMediaRepository
from ..domain.models import ATTACHED_FILE_KEY, SOURCE_FILE_KEY, MediaRecord, NewMediaRecord

logger = logging.getLogger(__name__)

class SqlMediaRepository(IMediaRepository):
    """
    Media repository stored in SQL, with backing files under storage_root.
    """

    def __init__(self, storage_root: Path, session_factory=SessionLocal):
        self.storage_root = Path(storage_root)
        self.session_factory = session_factory

    def create(self, record: NewMediaRecord) -> UUID:
        with self.session_factory() as db:
            try:
                new_record = MediaRecordModel(
                    mime_type=record.mime_type,
                    title=record.title,
                    content=record.content,
                    status=record.status,
                    public_url=record.public_url,
                    meta={}
                )
                db.add(new_record)
                db.commit()
                return new_record.id
            except SQLAlchemyError as e:
                db.rollback()
                raise RepositoryError(f"Could not create record: {e}") from e

    def find_by_stored_path(self, stored_path: str) -> Optional[MediaRecord]:
        return self._find_active_by_attribute(ATTACHED_FILE_KEY, stored_path)

    def find_by_source_path(self, source_path: str) -> Optional[MediaRecord]:
        return self._find_active_by_attribute(SOURCE_FILE_KEY, source_path)

    def list_all(self) -> List[MediaRecord]:
        with self.session_factory() as db:
            try:
                models = (
                    db.query(MediaRecordModel)
                    .options(selectinload(MediaRecordModel.attributes))
                    .order_by(MediaRecordModel.created_at)
                    .all()
                )
                return [self._to_domain(m) for m in models]
            except SQLAlchemyError as e:
                raise RepositoryError(f"Could not list records: {e}") from e

    def delete(self, record_id: UUID, delete_files: bool = True) -> bool:
        with self.session_factory() as db:
            try:
                model = db.get(MediaRecordModel, record_id)
                if model is None:
                    return False

                stored_path = model.get_attribute(ATTACHED_FILE_KEY)
                meta = dict(model.meta or {})

                db.delete(model)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise RepositoryError(f"Could not delete record {record_id}: {e}") from e

        if delete_files and stored_path:
            return self._delete_backing_files(stored_path, meta)
        return True

    def set_attribute(self, record_id: UUID, key: str, value: str) -> None:
        with self.session_factory() as db:
            try:
                if db.get(MediaRecordModel, record_id) is None:
                    raise RepositoryError(f"Record {record_id} does not exist")

                attr = db.query(MediaAttributeModel).filter(
                    MediaAttributeModel.record_id == record_id,
                    MediaAttributeModel.key == key
                ).first()

                if attr:
                    attr.value = value
                else:
                    db.add(MediaAttributeModel(record_id=record_id, key=key, value=value))
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise RepositoryError(f"Could not set '{key}' on {record_id}: {e}") from e

    def update_metadata(self, record_id: UUID, metadata: Dict[str, Any]) -> None:
        with self.session_factory() as db:
            try:
                model = db.get(MediaRecordModel, record_id)
                if model is None:
                    raise RepositoryError(f"Record {record_id} does not exist")
                model.meta = dict(metadata)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise RepositoryError(f"Could not update metadata of {record_id}: {e}") from e

    def _find_active_by_attribute(self, key: str, value: str) -> Optional[MediaRecord]:
        with self.session_factory() as db:
            try:
                model = (
                    db.query(MediaRecordModel)
                    .join(MediaAttributeModel, MediaAttributeModel.record_id == MediaRecordModel.id)
                    .filter(
                        MediaAttributeModel.key == key,
                        MediaAttributeModel.value == value,
                        MediaRecordModel.status == RecordStatus.ACTIVE
                    )
                    .options(selectinload(MediaRecordModel.attributes))
                    .first()
                )
                return self._to_domain(model) if model else None
            except SQLAlchemyError as e:
                raise RepositoryError(f"Could not look up '{key}' = {value!r}: {e}") from e

    def _delete_backing_files(self, stored_path: str, meta: Dict[str, Any]) -> bool:
        """
        Removes the stored file plus derived files listed under meta["sizes"].
        """
        main_file = self.storage_root / stored_path
        targets = [main_file]
        for size in (meta.get("sizes") or {}).values():
            if isinstance(size, dict) and size.get("file"):
                targets.append(main_file.parent / size["file"])

        ok = True
        for target in targets:
            try:
                target.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not remove backing file {target}: {e}")
                ok = False
        return ok

    @staticmethod
    def _to_domain(model: MediaRecordModel) -> MediaRecord:
        return MediaRecord(
            id=model.id,
            stored_path=model.get_attribute(ATTACHED_FILE_KEY),
            mime_type=model.mime_type,
            title=model.title,
            status=model.status,
            public_url=model.public_url,
            meta=dict(model.meta or {}),
            created_at=model.created_at
        )
