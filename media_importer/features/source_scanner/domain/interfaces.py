from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator
from .models import SourceFile

class IFileWalker(ABC):
    """
    Contract for traversing a source tree.
    """
    @abstractmethod
    def walk(self, root: Path) -> Iterator[SourceFile]:
        """
        Yields every regular file below root, one by one.
        Symlinks and special files must not be yielded.
        """
        pass
