# File: tests/conftest.py

import os
import tempfile

# 1. Point settings at a throwaway SQLite database BEFORE the package is imported
_TEST_DATA_DIR = tempfile.mkdtemp(prefix="media_importer_tests_")
os.environ["USE_SQLITE"] = "true"
os.environ["MEDIA_DATA_DIR"] = _TEST_DATA_DIR
os.environ["MEDIA_STORAGE_DIR"] = os.path.join(_TEST_DATA_DIR, "uploads")

import pytest
import sqlalchemy
from sqlalchemy import text
from sqlalchemy_utils import database_exists, create_database

# 2. Import Settings / Engine
from media_importer.core.config.settings import settings
from media_importer.core.database.base import Base
from media_importer.core.database.connection import engine as TEST_ENGINE, SessionLocal as TestingSessionLocal, init_db
from media_importer.features.media_types.data.mime_registry import MimeTypeRegistry
from media_importer.features.media_types.service.classifier import TypeClassifier
from media_importer.features.source_scanner.data.file_walker import LocalFileWalker
from media_importer.features.storage.data.destination import NumberedNameGenerator, StorageDestinationResolver
from media_importer.features.storage.data.local_fs import LocalFileTransfer
from media_importer.features.storage.data.repository import SqlMediaRepository
from media_importer.features.importer.service.duplicate_detector import DuplicateDetector
from media_importer.features.importer.service.path_planner import PathPlanner
from media_importer.features.importer.service.pipeline import ImportPipeline
from media_importer.features.importer.service.purge import LibraryPurge
from media_importer.features.importer.service.registrar import Registrar

TEST_BASE_URL = "http://media.test/uploads"


@pytest.fixture(scope="session", autouse=True)
def global_setup():
    """
    Runs once per test session.
    Ensures the DB exists and the tables are created.
    """
    settings.ensure_dirs()

    if not database_exists(TEST_ENGINE.url):
        create_database(TEST_ENGINE.url)

    init_db(TEST_ENGINE)

    yield


@pytest.fixture(scope="function", autouse=True)
def clean_db(global_setup):
    """
    Runs before EVERY test. Empties every table.
    """
    Base.metadata.create_all(bind=TEST_ENGINE)

    with TEST_ENGINE.connect() as conn:
        trans = conn.begin()
        table_names = sqlalchemy.inspect(TEST_ENGINE).get_table_names()

        # Disable FK checks so tables can be emptied in any order
        conn.execute(text("PRAGMA foreign_keys = OFF;"))
        for table in table_names:
            conn.execute(text(f'DELETE FROM "{table}";'))
        conn.execute(text("PRAGMA foreign_keys = ON;"))

        trans.commit()

    yield


@pytest.fixture(scope="function")
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage_root(tmp_path):
    root = tmp_path / "uploads"
    root.mkdir()
    return root


@pytest.fixture
def repository(storage_root):
    return SqlMediaRepository(storage_root=storage_root, session_factory=TestingSessionLocal)


@pytest.fixture
def image_registry():
    """Admits jpg/jpeg/png only."""
    return MimeTypeRegistry({"jpg": "image/jpeg", "jpeg": "image/jpeg", "png": "image/png"})


@pytest.fixture
def make_pipeline(storage_root, repository, image_registry):
    """
    Factory building a pipeline over the test repository.
    Keyword overrides replace individual collaborators.
    """
    def _make(**overrides) -> ImportPipeline:
        resolver = overrides.pop("resolver", StorageDestinationResolver(storage_root, TEST_BASE_URL))
        names = overrides.pop("names", NumberedNameGenerator())
        metadata_generator = overrides.pop("metadata_generator", None)

        parts = dict(
            walker=LocalFileWalker(),
            classifier=TypeClassifier(image_registry),
            planner=PathPlanner(resolver, names),
            detector=DuplicateDetector(repository),
            transfer=LocalFileTransfer(),
            registrar=Registrar(repository, metadata_generator),
            purger=LibraryPurge(repository),
        )
        parts.update(overrides)
        return ImportPipeline(**parts)

    return _make


@pytest.fixture
def source_tree(tmp_path):
    """
    /source
      photo.jpg
      notes.txt
      sub/img.png
    """
    root = tmp_path / "source"
    (root / "sub").mkdir(parents=True)
    (root / "photo.jpg").write_bytes(b"FAKE_JPEG")
    (root / "notes.txt").write_text("not media")
    (root / "sub" / "img.png").write_bytes(b"FAKE_PNG")
    return root
