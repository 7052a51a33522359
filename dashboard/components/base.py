"""Shared file-selection state for the screen controllers."""

import logging
from typing import List, Optional

from core.errors import InsightBoardError
from core.models import UploadedFile
from dashboard.notifications import Notifier
from services.gateway import Gateway

logger = logging.getLogger(__name__)


class FilePickerController:
    """Keeps the user's file list and the currently selected file id."""

    def __init__(self, gateway: Gateway, notifier: Optional[Notifier] = None) -> None:
        self.gateway = gateway
        self.notifier = notifier or Notifier()
        self.files: List[UploadedFile] = []
        self.selected_file_id: str = ""

    async def load_files(self) -> List[UploadedFile]:
        """Refresh the file list and default the selection to the first file."""
        try:
            self.files = await self.gateway.list_files()
        except InsightBoardError as exc:
            self.notifier.error(f"Error loading files: {exc.message}")
            return self.files

        if self.files and not self.selected_file_id:
            self.selected_file_id = self.files[0].id
        return self.files

    def find_file(self, file_id: str) -> Optional[UploadedFile]:
        return next((f for f in self.files if f.id == file_id), None)
