from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import UUID

from media_importer.core.common.enums import RecordStatus

# Attribute key holding the path relative to the storage root
ATTACHED_FILE_KEY = "attached_file"
# Stored path the file would have had without collision numbering
SOURCE_FILE_KEY = "source_file"

@dataclass(frozen=True)
class DestinationBase:
    """
    Where new uploads currently land.
    bucket_path is the part of base_dir below the storage root (e.g. "2025/10").
    """
    base_dir: Path
    base_url: str
    bucket_path: str = ""

@dataclass(frozen=True)
class NewMediaRecord:
    """
    Request object for registering a copied file.
    """
    mime_type: str
    title: str
    public_url: str
    content: str = ""
    status: RecordStatus = RecordStatus.ACTIVE

@dataclass
class MediaRecord:
    """
    A registered media entry, detached from the database session.
    """
    id: UUID
    stored_path: Optional[str]
    mime_type: str
    title: str
    status: RecordStatus
    public_url: str
    meta: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
