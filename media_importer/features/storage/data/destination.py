import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Set
from media_importer.core.common.filenames import split_extension
from ..domain.interfaces import IDestinationResolver, IUniqueNameGenerator
from ..domain.models import DestinationBase

class StorageDestinationResolver(IDestinationResolver):
    """
    Resolves the upload base under storage_root, optionally bucketed
    by the current year/month (e.g. uploads/2025/10).
    """

    def __init__(self, storage_root: Path, base_url: str, organize_by_date: bool = False,
                 clock: Callable[[], datetime] = datetime.now):
        self.storage_root = Path(storage_root)
        self.base_url = base_url.rstrip("/")
        self.organize_by_date = organize_by_date
        self.clock = clock

    def resolve(self) -> DestinationBase:
        if not self.organize_by_date:
            return DestinationBase(base_dir=self.storage_root, base_url=self.base_url, bucket_path="")

        now = self.clock()
        bucket = f"{now.year:04d}/{now.month:02d}"
        return DestinationBase(
            base_dir=self.storage_root / bucket,
            base_url=f"{self.base_url}/{bucket}",
            bucket_path=bucket
        )

class NumberedNameGenerator(IUniqueNameGenerator):
    """
    Appends -1, -2, ... to the stem until the name is free.

    Names compare exactly, the way the directory listing reports them. A
    name is also taken when the filesystem says it exists, which covers
    case-insensitive filesystems. Names handed out since the last reset()
    stay reserved, so the same name is never returned twice for one
    directory even if the file was never written (e.g. the copy failed).
    """

    def __init__(self):
        self._reserved: Dict[Path, Set[str]] = {}
        self._lock = threading.Lock()

    def unique_name(self, dest_dir: Path, desired: str) -> str:
        stem, suffix = split_extension(desired)
        dest_dir = Path(dest_dir)

        with self._lock:
            reserved = self._reserved.setdefault(dest_dir, set())
            taken = reserved | self._existing_names(dest_dir)

            candidate = desired
            number = 1
            while candidate in taken or (dest_dir / candidate).exists():
                candidate = f"{stem}-{number}{suffix}"
                number += 1

            reserved.add(candidate)
            return candidate

    def reset(self) -> None:
        with self._lock:
            self._reserved.clear()

    @staticmethod
    def _existing_names(dest_dir: Path) -> Set[str]:
        if not dest_dir.is_dir():
            return set()
        return {entry.name for entry in dest_dir.iterdir()}
