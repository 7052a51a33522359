"""Upload screen: local pre-checks, upload, listing and deletion."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from core.errors import InsightBoardError, ValidationError
from core.models import UploadedFile, UploadResult
from dashboard.components.base import FilePickerController
from dashboard.notifications import Notifier
from services.gateway import Gateway, validate_upload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingUpload:
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


class UploadController(FilePickerController):
    """State behind the upload screen."""

    def __init__(self, gateway: Gateway, notifier: Optional[Notifier] = None) -> None:
        super().__init__(gateway, notifier)
        self.selected_upload: Optional[PendingUpload] = None
        self.is_uploading: bool = False

    def select_file(
        self, filename: str, content: bytes, content_type: Optional[str] = None
    ) -> bool:
        """Stage a file for upload if it passes the local type and size checks."""
        try:
            validate_upload(filename, len(content))
        except ValidationError as exc:
            self.notifier.warning(exc.message)
            return False
        self.selected_upload = PendingUpload(filename, content, content_type)
        return True

    async def upload(self) -> Optional[UploadResult]:
        pending = self.selected_upload
        if pending is None:
            self.notifier.warning("Please select a file first")
            return None

        self.is_uploading = True
        try:
            result = await self.gateway.upload_file(
                pending.content, pending.filename, pending.content_type
            )
        except InsightBoardError as exc:
            self.notifier.error(exc.message or "Upload failed")
            return None
        finally:
            self.is_uploading = False

        self.selected_upload = None
        self.notifier.success("File uploaded successfully!")
        await self.load_files()
        return result

    async def refresh(self) -> List[UploadedFile]:
        return await self.load_files()

    async def delete(self, file_id: str) -> bool:
        try:
            await self.gateway.delete_file(file_id)
        except InsightBoardError as exc:
            self.notifier.error(exc.message or "Delete failed")
            return False

        if self.selected_file_id == file_id:
            self.selected_file_id = ""
        self.notifier.success("File deleted successfully")
        await self.load_files()
        return True
