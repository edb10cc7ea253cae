# ============================================================================
# FILE STORAGE INFRASTRUCTURE
# ============================================================================
# STATUS: Infrastructure - Local/NFS files directory access
# PURPOSE: Create and delete files in the application files directory
# ============================================================================
"""
File Storage Infrastructure

Thin wrapper over the application's writable files directory, which is
often an NFS mount shared between web nodes.

Usage:
    storage = FileStorage("/var/www/files")
    path = storage.create_unique_file(prefix="status_check_")
    storage.delete_file(path)
"""

import logging
import os
import tempfile

logger = logging.getLogger(__name__)


class FileStorage:
    """
    Files directory access.

    Both operations raise OSError on failure; callers decide how to report it.
    """

    def __init__(self, directory_path: str):
        self.directory_path = directory_path

    def create_unique_file(self, prefix: str = "") -> str:
        """
        Create an empty, uniquely named file in the directory.

        Returns:
            Absolute path of the new file
        """
        fd, path = tempfile.mkstemp(prefix=prefix, dir=self.directory_path)
        os.close(fd)
        logger.debug(f"Created {path}")
        return path

    def delete_file(self, path: str) -> None:
        """Delete a file created by create_unique_file()."""
        os.unlink(path)
        logger.debug(f"Deleted {path}")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "FileStorage",
]
