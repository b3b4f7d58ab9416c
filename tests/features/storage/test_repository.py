import uuid
import pytest

from media_importer.core.common.enums import RecordStatus
from media_importer.core.common.exceptions import RepositoryError
from media_importer.features.storage.data.sql_models import MediaAttributeModel, MediaRecordModel
from sqlalchemy.exc import OperationalError

from media_importer.features.storage.data.repository import SqlMediaRepository
from media_importer.features.storage.domain.models import ATTACHED_FILE_KEY, SOURCE_FILE_KEY, NewMediaRecord

def _new(title="photo", status=RecordStatus.ACTIVE):
    return NewMediaRecord(
        mime_type="image/jpeg",
        title=title,
        public_url=f"http://media.test/uploads/{title}.jpg",
        status=status
    )

def test_create_and_find_by_stored_path(repository, db_session):
    record_id = repository.create(_new())
    repository.set_attribute(record_id, ATTACHED_FILE_KEY, "sub/photo.jpg")

    found = repository.find_by_stored_path("sub/photo.jpg")

    assert found is not None
    assert found.id == record_id
    assert found.stored_path == "sub/photo.jpg"
    assert found.title == "photo"
    assert found.status == RecordStatus.ACTIVE

    model = db_session.get(MediaRecordModel, record_id)
    assert model.content == ""

def test_find_ignores_other_paths_and_trashed_records(repository):
    trashed = repository.create(_new("old", status=RecordStatus.TRASHED))
    repository.set_attribute(trashed, ATTACHED_FILE_KEY, "old.jpg")

    assert repository.find_by_stored_path("old.jpg") is None
    assert repository.find_by_stored_path("missing.jpg") is None

def test_set_attribute_overwrites_existing_value(repository, db_session):
    record_id = repository.create(_new())
    repository.set_attribute(record_id, ATTACHED_FILE_KEY, "a.jpg")
    repository.set_attribute(record_id, ATTACHED_FILE_KEY, "b.jpg")

    count = db_session.query(MediaAttributeModel).filter_by(record_id=record_id).count()
    assert count == 1
    assert repository.find_by_stored_path("b.jpg").id == record_id

def test_set_attribute_on_missing_record_raises(repository):
    with pytest.raises(RepositoryError):
        repository.set_attribute(uuid.uuid4(), ATTACHED_FILE_KEY, "x.jpg")

def test_list_all_returns_every_status(repository):
    repository.create(_new("a"))
    repository.create(_new("b", status=RecordStatus.TRASHED))

    titles = sorted(r.title for r in repository.list_all())
    assert titles == ["a", "b"]

def test_update_metadata(repository):
    record_id = repository.create(_new())
    repository.set_attribute(record_id, ATTACHED_FILE_KEY, "photo.jpg")

    repository.update_metadata(record_id, {"width": 10, "height": 20})

    assert repository.find_by_stored_path("photo.jpg").meta == {"width": 10, "height": 20}

def test_delete_removes_record_and_backing_files(repository, storage_root, db_session):
    (storage_root / "sub").mkdir()
    main_file = storage_root / "sub" / "photo.jpg"
    thumb = storage_root / "sub" / "photo-thumbnail.jpg"
    main_file.write_bytes(b"x")
    thumb.write_bytes(b"t")

    record_id = repository.create(_new())
    repository.set_attribute(record_id, ATTACHED_FILE_KEY, "sub/photo.jpg")
    repository.update_metadata(record_id, {"sizes": {"thumbnail": {"file": "photo-thumbnail.jpg"}}})

    assert repository.delete(record_id) is True

    assert not main_file.exists()
    assert not thumb.exists()
    assert db_session.query(MediaRecordModel).count() == 0
    assert db_session.query(MediaAttributeModel).count() == 0

def test_delete_without_files_keeps_them(repository, storage_root):
    kept = storage_root / "keep.jpg"
    kept.write_bytes(b"x")
    record_id = repository.create(_new("keep"))
    repository.set_attribute(record_id, ATTACHED_FILE_KEY, "keep.jpg")

    assert repository.delete(record_id, delete_files=False) is True
    assert kept.exists()

def test_delete_missing_record_returns_false(repository):
    assert repository.delete(uuid.uuid4()) is False

def test_find_by_source_path(repository):
    record_id = repository.create(_new())
    repository.set_attribute(record_id, ATTACHED_FILE_KEY, "sub/photo-1.jpg")
    repository.set_attribute(record_id, SOURCE_FILE_KEY, "sub/photo.jpg")

    assert repository.find_by_source_path("sub/photo.jpg").id == record_id
    assert repository.find_by_source_path("sub/photo-1.jpg") is None
    assert repository.find_by_stored_path("sub/photo.jpg") is None

class BrokenSession:
    """Session whose every query fails like a lost connection."""

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def query(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is gone"))

    def rollback(self):
        pass

def test_lookups_wrap_sql_errors(storage_root):
    broken = SqlMediaRepository(storage_root=storage_root, session_factory=BrokenSession)

    with pytest.raises(RepositoryError, match="database is gone"):
        broken.find_by_stored_path("photo.jpg")
    with pytest.raises(RepositoryError):
        broken.find_by_source_path("photo.jpg")
    with pytest.raises(RepositoryError):
        broken.list_all()
