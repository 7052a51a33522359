"""Dashboard insights panel."""

import logging
from typing import Optional

from core.errors import InsightBoardError
from dashboard.components.base import FilePickerController
from dashboard.notifications import Notifier
from services.gateway import Gateway

logger = logging.getLogger(__name__)


class InsightsController(FilePickerController):
    """Requests AI insights for the selected file."""

    def __init__(self, gateway: Gateway, notifier: Optional[Notifier] = None) -> None:
        super().__init__(gateway, notifier)
        self.insights: str = ""
        self.is_loading: bool = False
        self.generated: bool = False

    async def generate(self) -> Optional[str]:
        if not self.selected_file_id:
            self.notifier.warning("Please select a file first")
            return None

        self.is_loading = True
        self.insights = ""
        try:
            result = await self.gateway.generate_insights(self.selected_file_id)
        except InsightBoardError as exc:
            self.notifier.error(f"Error generating insights: {exc.message}")
            return None
        finally:
            self.is_loading = False

        self.insights = result.insights
        self.generated = True
        self.notifier.success("Insights generated successfully!")
        return self.insights
