# ============================================================================
# FILESYSTEM HEALTH CHECK
# ============================================================================
# STATUS: Health - Files directory check
# PURPOSE: Verify the files directory accepts writes and deletes
# ============================================================================
"""
Filesystem Health Check

FilesCheck (files) creates a uniquely named file in the files directory and
deletes it again. Only a full create-then-delete round trip passes.

Both steps run in the same worker thread, so a file created before the
check times out is still deleted.
"""

import asyncio
import logging
from typing import Optional

from core.config import Settings
from health.core import (
    CheckIdentifier,
    CheckResult,
    HealthCheckPlugin,
)
from health.registry import register_check
from infrastructure.storage import FileStorage

logger = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Could not create temporary file in the files directory."
DELETE_FAILED_MESSAGE = "Could not delete newly create files in the files directory."


@register_check(priority=40)
class FilesCheck(HealthCheckPlugin):
    """Files directory write/delete check."""

    name = CheckIdentifier.FILES
    timeout_message = CREATE_FAILED_MESSAGE

    def __init__(self, storage: FileStorage, temp_prefix: str = "status_check_"):
        self.storage = storage
        self.temp_prefix = temp_prefix

    @classmethod
    def from_settings(cls, settings: Settings) -> "FilesCheck":
        return cls(
            storage=FileStorage(settings.files.directory_path),
            temp_prefix=settings.files.temp_prefix,
        )

    async def check(self) -> Optional[CheckResult]:
        # Create and delete share one worker thread
        return await asyncio.to_thread(self._round_trip)

    def _round_trip(self) -> CheckResult:
        try:
            path = self.storage.create_unique_file(self.temp_prefix)
        except OSError as e:
            logger.warning(
                f"Cannot create file in {self.storage.directory_path}: {e}"
            )
            return CheckResult.failure(CREATE_FAILED_MESSAGE, error=str(e))

        try:
            self.storage.delete_file(path)
        except OSError as e:
            logger.warning(f"Cannot delete {path}, file left behind: {e}")
            return CheckResult.failure(DELETE_FAILED_MESSAGE, path=path, error=str(e))

        return CheckResult.ok()


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "FilesCheck",
    "CREATE_FAILED_MESSAGE",
    "DELETE_FAILED_MESSAGE",
]
