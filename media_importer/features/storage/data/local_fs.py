import logging
import os
import shutil
import stat
from pathlib import Path
from media_importer.core.common.exceptions import TransferError
from ..domain.interfaces import IFileTransfer

logger = logging.getLogger(__name__)

class LocalFileTransfer(IFileTransfer):
    """
    Copies source files into storage. The source is never modified.
    """

    def copy(self, source: Path, destination: Path) -> None:
        try:
            shutil.copy2(str(source), str(destination))
        except OSError as e:
            # Best-effort cleanup of a partial copy
            try:
                destination.unlink(missing_ok=True)
            except OSError:
                logger.debug(f"Partial copy left behind at {destination}")
            raise TransferError(f"Copy failed: {e.strerror or e}") from e

    def inherit_permissions(self, destination: Path) -> None:
        """
        Gives the new file the read/write bits of its directory.
        Failure here is intentionally discarded: the file is already usable.
        """
        try:
            dir_mode = stat.S_IMODE(os.stat(destination.parent).st_mode)
            os.chmod(destination, dir_mode & 0o666)
        except OSError as e:
            logger.debug(f"Could not set permissions on {destination}: {e}")

    def remove(self, destination: Path) -> None:
        try:
            destination.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Rollback could not remove {destination}: {e}")
