import pytest

from media_importer.core.common.exceptions import InvalidSourceError
from media_importer.core.config.settings import Settings
from media_importer.features.importer.service.api import build_importer, run_import
from media_importer.features.importer.service.pipeline import ImportPipeline
from media_importer.features.storage.data.ffmpeg_adapter import FFprobeMetadataGenerator

@pytest.fixture
def config(tmp_path):
    cfg = Settings()
    cfg.DATA_DIR = tmp_path / "data"
    cfg.STORAGE_DIR = tmp_path / "data" / "uploads"
    cfg.MEDIA_BASE_URL = "http://media.test/uploads"
    cfg.ADMITTED_PREFIXES = ("image/",)
    return cfg

def test_build_importer_composes_from_settings(config):
    pipeline = build_importer(config)

    assert isinstance(pipeline, ImportPipeline)
    assert config.STORAGE_DIR.is_dir()
    assert isinstance(pipeline.registrar.metadata_generator, FFprobeMetadataGenerator)
    # Thumbnails and imports share one name pool
    assert pipeline.registrar.metadata_generator.names is pipeline.planner.names
    assert pipeline.classifier.classify("a.png") == "image/png"
    assert pipeline.classifier.classify("a.mp3") is None

def test_run_import_end_to_end(config, repository, source_tree):
    pipeline = build_importer(config, repository=repository, metadata_generator=None)

    report = run_import(str(source_tree) + "/", pipeline=pipeline)

    assert report.run.imported == 2
    assert report.run.skipped == 1
    assert (config.STORAGE_DIR / "sub" / "img.png").exists()
    assert repository.find_by_stored_path("sub/img.png").public_url == "http://media.test/uploads/sub/img.png"

def test_run_import_rejects_invalid_root(tmp_path):
    with pytest.raises(InvalidSourceError):
        run_import(tmp_path / "does-not-exist")
