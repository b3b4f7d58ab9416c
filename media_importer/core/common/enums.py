# File: media_importer/core/common/enums.py

from enum import Enum, unique

@unique
class RecordStatus(str, Enum):
    ACTIVE = "inherit"
    TRASHED = "trash"

@unique
class FileOutcome(str, Enum):
    IMPORTED = "imported"
    SKIPPED = "skipped"
    ERROR = "error"
