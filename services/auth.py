"""Login, registration and token lifecycle on top of the gateway."""

import logging
from typing import Optional

from core.errors import AuthError
from core.models import AuthPayload, Session, User
from services.gateway import Gateway
from services.session import SessionManager

logger = logging.getLogger(__name__)


class AuthService:
    """Runs the auth endpoints and records their outcome in the session."""

    def __init__(self, gateway: Gateway, session: Optional[SessionManager] = None):
        self.gateway = gateway
        self.session = session or gateway.session

    async def register(self, name: str, email: str, password: str) -> User:
        payload = await self.gateway.register(name, email, password)
        return self._accept(payload)

    async def login(self, email: str, password: str) -> User:
        payload = await self.gateway.login(email, password)
        return self._accept(payload)

    async def refresh_token(self) -> User:
        if not self.session.token():
            raise AuthError("No token to refresh", cause="missing_token")
        payload = await self.gateway.refresh()
        return self._accept(payload)

    async def get_profile(self) -> User:
        user = await self.gateway.profile()
        self.session.update_user(user)
        return user

    def logout(self) -> Session:
        logger.info("Logging out")
        return self.session.clear_session()

    def _accept(self, payload: AuthPayload) -> User:
        self.session.set_session(payload.user, payload.token)
        logger.info("Signed in as %s", payload.user.email)
        return payload.user
