from dashboard.components.base import FilePickerController
from dashboard.components.chat import ChatController
from dashboard.components.insights import InsightsController
from dashboard.components.upload import PendingUpload, UploadController
from dashboard.components.visualize import VisualizeController

__all__ = [
    "FilePickerController",
    "ChatController",
    "InsightsController",
    "PendingUpload",
    "UploadController",
    "VisualizeController",
]
