from abc import ABC, abstractmethod
from typing import Optional

class IMimeRegistry(ABC):
    """
    Table of admitted extensions, supplied by the host.
    """
    @abstractmethod
    def lookup(self, extension: str) -> Optional[str]:
        """
        Returns the MIME type for a lower-case extension (no dot),
        or None when the extension is not admitted.
        """
        pass
