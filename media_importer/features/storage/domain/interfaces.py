from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import UUID
from .models import DestinationBase, MediaRecord, NewMediaRecord

class IMediaRepository(ABC):
    @abstractmethod
    def create(self, record: NewMediaRecord) -> UUID:
        """
        Inserts a record and returns its id.
        Raises RepositoryError when the record is rejected.
        """
        pass

    @abstractmethod
    def find_by_stored_path(self, stored_path: str) -> Optional[MediaRecord]:
        """Returns the active record whose stored path equals stored_path."""
        pass

    @abstractmethod
    def find_by_source_path(self, source_path: str) -> Optional[MediaRecord]:
        """Returns the active record that was imported under source_path before numbering."""
        pass

    @abstractmethod
    def list_all(self) -> List[MediaRecord]:
        """Returns every record, whatever its status."""
        pass

    @abstractmethod
    def delete(self, record_id: UUID, delete_files: bool = True) -> bool:
        """
        Permanently removes a record (and its backing files when asked).
        Returns False when the record is missing or a file could not be removed.
        """
        pass

    @abstractmethod
    def set_attribute(self, record_id: UUID, key: str, value: str) -> None:
        pass

    @abstractmethod
    def update_metadata(self, record_id: UUID, metadata: Dict[str, Any]) -> None:
        pass

class IDestinationResolver(ABC):
    @abstractmethod
    def resolve(self) -> DestinationBase:
        """
        Returns the current upload base. May change between calls
        (date buckets), so callers must not cache it.
        """
        pass

class IUniqueNameGenerator(ABC):
    @abstractmethod
    def unique_name(self, dest_dir: Path, desired: str) -> str:
        """Returns a filename that does not collide inside dest_dir."""
        pass

    def reset(self) -> None:
        """Forgets names handed out so far. Called at the start of every run."""
        pass

class IFileTransfer(ABC):
    @abstractmethod
    def copy(self, source: Path, destination: Path) -> None:
        """Copies bytes. Raises TransferError on failure."""
        pass

    @abstractmethod
    def inherit_permissions(self, destination: Path) -> None:
        """Applies the parent directory's read/write bits. Never raises."""
        pass

    @abstractmethod
    def remove(self, destination: Path) -> None:
        """Deletes a copied file during rollback."""
        pass

class IMetadataGenerator(ABC):
    @abstractmethod
    def generate(self, file_path: Path, mime_type: str) -> Optional[Dict[str, Any]]:
        """
        Produces derived metadata (dimensions, thumbnails...) for a stored file.
        May raise; callers treat it as best-effort.
        """
        pass
