"""Chat screen: question/answer transcript about the selected file."""

import logging
from typing import List, Optional

from core.errors import InsightBoardError
from core.models import ChatMessage
from dashboard.components.base import FilePickerController
from dashboard.notifications import Notifier
from services.gateway import Gateway

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "Hello! I'm your AI data analyst assistant. Select a file and ask me "
    "questions about your data. For example: \"What was the revenue in 2025?\" "
    "or \"Show me trends in sales.\""
)
CLEARED_MESSAGE = "Chat cleared. How can I help you analyze your data?"
ERROR_PREFIX = "Sorry, I encountered an error: "


class ChatController(FilePickerController):
    """Transcript and send logic for the chat screen."""

    def __init__(self, gateway: Gateway, notifier: Optional[Notifier] = None) -> None:
        super().__init__(gateway, notifier)
        self.messages: List[ChatMessage] = [ChatMessage(role="assistant", content=WELCOME_MESSAGE)]
        self.is_loading: bool = False

    async def send(self, text: str) -> Optional[ChatMessage]:
        """Ask *text* about the selected file and append the exchange.

        Blank input and sends while a reply is pending are ignored.

        Returns:
            The assistant message appended, or None if nothing was sent.
        """
        question = (text or "").strip()
        if not question or self.is_loading:
            return None
        if not self.selected_file_id:
            self.notifier.warning("Please select a file first")
            return None

        self.messages.append(ChatMessage(role="user", content=question))
        self.is_loading = True
        try:
            reply = await self.gateway.chat(self.selected_file_id, question)
            answer = ChatMessage(role="assistant", content=reply.answer)
        except InsightBoardError as exc:
            answer = ChatMessage(role="assistant", content=ERROR_PREFIX + exc.message)
            self.notifier.error(exc.message)
        finally:
            self.is_loading = False

        self.messages.append(answer)
        return answer

    def clear(self) -> None:
        self.messages = [ChatMessage(role="assistant", content=CLEARED_MESSAGE)]
