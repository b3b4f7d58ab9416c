import mimetypes
from typing import Dict, Iterable, Optional
from ..domain.interfaces import IMimeRegistry

class MimeTypeRegistry(IMimeRegistry):
    """
    Extension -> MIME lookup backed by a plain mapping.
    """

    def __init__(self, mapping: Dict[str, str]):
        self._mapping = {
            ext.lower().lstrip("."): mime for ext, mime in mapping.items()
        }

    @classmethod
    def from_mimetypes(cls, prefixes: Iterable[str]) -> "MimeTypeRegistry":
        """
        Builds the registry from the platform's mimetypes database,
        keeping only types that start with one of the given prefixes.
        """
        mimetypes.init()
        prefixes = tuple(prefixes)
        mapping = {
            ext: mime
            for ext, mime in mimetypes.types_map.items()
            if mime.startswith(prefixes)
        }
        return cls(mapping)

    def lookup(self, extension: str) -> Optional[str]:
        return self._mapping.get(extension.lower().lstrip("."))
