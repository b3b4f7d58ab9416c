# File: media_importer/core/common/exceptions.py


class MediaImporterError(Exception):
    """Base class for every error raised by the importer."""


class InvalidSourceError(MediaImporterError):
    """The scan root is missing, not a directory, or unreadable. Aborts the run."""


class PlanningError(MediaImporterError):
    """The destination directory for a file could not be prepared."""


class TransferError(MediaImporterError):
    """Copying a file into storage failed."""


class RepositoryError(MediaImporterError):
    """The media repository rejected an operation."""


class RegistrationError(MediaImporterError):
    """A copied file could not be registered as a media record."""
