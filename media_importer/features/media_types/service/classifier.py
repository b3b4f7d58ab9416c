from typing import Optional
from media_importer.core.common.filenames import file_extension
from ..domain.interfaces import IMimeRegistry

class TypeClassifier:
    """
    Maps a filename to its admitted MIME type, or None when rejected.
    The extension is whatever follows the last dot, so ".jpg" is a jpg.
    """

    def __init__(self, registry: IMimeRegistry):
        self.registry = registry

    def classify(self, basename: str) -> Optional[str]:
        extension = file_extension(basename)
        if not extension:
            return None
        return self.registry.lookup(extension)
