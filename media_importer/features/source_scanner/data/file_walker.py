import os
import stat
from pathlib import Path
from typing import Iterator
from ..domain.interfaces import IFileWalker
from ..domain.models import SourceFile

class LocalFileWalker(IFileWalker):
    """
    Concrete implementation using os.walk.
    Directory symlinks are not followed; file symlinks are dropped.
    """

    def walk(self, root: Path) -> Iterator[SourceFile]:
        for dirpath, dirnames, filenames in os.walk(root):
            for filename in filenames:
                file_path = Path(dirpath) / filename

                if self._is_plain_file(file_path):
                    yield SourceFile(path=file_path)

    @staticmethod
    def _is_plain_file(path: Path) -> bool:
        try:
            mode = os.lstat(path).st_mode
        except OSError:
            # Vanished between listing and stat
            return False
        return stat.S_ISREG(mode)
