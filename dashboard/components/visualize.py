"""Visualize screen: file selection and chart data.

Selecting a file while an earlier fetch is still in flight makes that
earlier response stale; it is dropped on arrival so only the latest
selection ever reaches ``chart_data``.
"""

import logging
from typing import Optional, Tuple

from charts.series import ChartSeriesBuilder
from core.errors import DataError, InsightBoardError
from core.models import ChartData, ChartKind, FileData
from dashboard.components.base import FilePickerController
from dashboard.notifications import Notifier
from services.gateway import Gateway
from utils.helpers import export_csv

logger = logging.getLogger(__name__)


class VisualizeController(FilePickerController):
    """State behind the visualize screen."""

    def __init__(
        self,
        gateway: Gateway,
        notifier: Optional[Notifier] = None,
        builder: Optional[ChartSeriesBuilder] = None,
    ) -> None:
        super().__init__(gateway, notifier)
        self.builder = builder or ChartSeriesBuilder()
        self.file_data: Optional[FileData] = None
        self.chart_data: Optional[ChartData] = None
        self.is_loading: bool = False

    async def load(self, requested_id: Optional[str] = None) -> Optional[ChartData]:
        """List files, then show *requested_id* if it exists, else the first file."""
        self.is_loading = True
        await self.load_files()
        if not self.files:
            self.is_loading = False
            return None

        file_id = requested_id if requested_id and self.find_file(requested_id) else self.files[0].id
        return await self.select(file_id)

    async def select(self, file_id: str) -> Optional[ChartData]:
        """Fetch *file_id* and build its charts, unless another file is selected meanwhile.

        Returns:
            The chart data, or None if the fetch failed or was superseded.
        """
        self.selected_file_id = file_id
        self.chart_data = None
        self.is_loading = True

        try:
            file_data = await self.gateway.get_file_data(file_id)
        except InsightBoardError as exc:
            if self.selected_file_id != file_id:
                logger.debug("Ignoring failed fetch for superseded file %s", file_id)
                return None
            self.is_loading = False
            self.notifier.error(exc.message or "Failed to load file data")
            return None

        if self.selected_file_id != file_id:
            logger.debug("Discarding stale data for %s (selected %s)", file_id, self.selected_file_id)
            return None

        self.file_data = file_data
        self.chart_data = self.builder.build(file_data.to_table())
        self.is_loading = False
        return self.chart_data

    def default_chart(self) -> ChartKind:
        if self.chart_data is None:
            return ChartKind.BAR
        return self.chart_data.default_kind()

    def has_data(self, kind: ChartKind) -> bool:
        return self.chart_data is not None and self.chart_data.has_data(kind)

    def export_csv(self) -> Tuple[str, str]:
        """Return ``(filename, csv_text)`` for the currently loaded file.

        Raises:
            DataError: If no file is loaded or it has no rows.
        """
        if self.file_data is None:
            raise DataError("No file loaded", cause="no_selection")
        content = export_csv(self.file_data.to_table())
        return f"{self.file_data.original_name}_processed.csv", content
