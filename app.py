"""
InsightBoard client - wires settings, session, gateway and screen controllers.

Usage:
    app = InsightBoardApp.create()
    await app.auth.login("ada@example.com", "secret")
    await app.visualize.load()
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from config.settings import LOG_FORMAT, AppConfig, get_settings
from dashboard.components import (
    ChatController,
    InsightsController,
    UploadController,
    VisualizeController,
)
from dashboard.notifications import Notifier
from services.auth import AuthService
from services.gateway import Gateway
from services.session import SessionManager
from services.storage import JsonFileStore, KeyValueStore

logger = logging.getLogger("insightboard")

LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"

# path -> "guest" (only when signed out) or "auth" (only when signed in)
ROUTES: Dict[str, str] = {
    "/login": "guest",
    "/register": "guest",
    "/dashboard": "auth",
    "/upload": "auth",
    "/visualization": "auth",
    "/visualize": "auth",
    "/chat": "auth",
}


def configure_logging(settings: Optional[AppConfig] = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=LOG_FORMAT,
    )


@dataclass
class InsightBoardApp:
    """Composition root holding one instance of every client service."""

    settings: AppConfig
    session: SessionManager
    gateway: Gateway
    auth: AuthService
    notifier: Notifier
    upload: UploadController
    visualize: VisualizeController
    insights: InsightsController
    chat: ChatController

    @classmethod
    def create(
        cls,
        settings: Optional[AppConfig] = None,
        store: Optional[KeyValueStore] = None,
    ) -> "InsightBoardApp":
        settings = settings or get_settings()
        configure_logging(settings)
        store = store if store is not None else JsonFileStore(settings.storage.path)
        session = SessionManager(
            store,
            token_key=settings.storage.token_key,
            user_key=settings.storage.user_key,
        )
        session.initialize()
        gateway = Gateway(session, base_url=settings.api_url, timeout=settings.request_timeout)
        notifier = Notifier()
        logger.info("%s %s -> %s", settings.app_name, settings.version, gateway.base_url)
        return cls(
            settings=settings,
            session=session,
            gateway=gateway,
            auth=AuthService(gateway, session),
            notifier=notifier,
            upload=UploadController(gateway, notifier),
            visualize=VisualizeController(gateway, notifier),
            insights=InsightsController(gateway, notifier),
            chat=ChatController(gateway, notifier),
        )

    def resolve_route(self, path: str) -> str:
        """Apply the auth and guest guards to *path* and return where to go.

        ``/visualize/<id>`` is guarded like ``/visualize``; unknown paths go
        to the login screen.
        """
        normalized = "/" + path.strip("/")
        if normalized == "/":
            normalized = LOGIN_PATH
        base = "/" + normalized.strip("/").split("/")[0]
        guard = ROUTES.get(base)
        if guard is None:
            normalized, guard = LOGIN_PATH, ROUTES[LOGIN_PATH]

        signed_in = self.session.valid_token() is not None
        if guard == "auth" and not signed_in:
            return LOGIN_PATH
        if guard == "guest" and signed_in:
            return HOME_PATH
        return normalized
