"""Async client for the file, insight and auth endpoints of the backend.

Every response is wrapped in a ``{success, data, message}`` envelope.
Failures are normalized into ``core.errors`` types carrying the server's
``message`` when one was sent, otherwise the transport's own message.
Authenticated calls take their bearer token from the ``SessionManager`` and
fail with ``AuthError`` before touching the network when none is usable.
"""

import asyncio
import json
import logging
import mimetypes
import os
from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote

import aiohttp
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from config.settings import LOG_FORMAT, get_settings
from core.errors import (
    DEFAULT_ERROR_MESSAGE,
    AuthError,
    DataError,
    InsightBoardError,
    NetworkError,
    ValidationError,
)
from core.models import (
    AuthPayload,
    ChatReply,
    FileData,
    InsightsResult,
    SummaryResult,
    UploadedFile,
    UploadResult,
    User,
)
from services.session import SessionManager

logger = logging.getLogger(__name__)
if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(logging.INFO)

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_upload(filename: str, size: int) -> None:
    """Reject files the backend would refuse, before any network call.

    Raises:
        ValidationError: If the extension is not allowed or the file is too big.
    """
    settings = get_settings()
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in settings.allowed_extensions:
        raise ValidationError(
            "Please select a CSV or Excel file",
            cause="unsupported_type",
            suggestion=f"Allowed: {', '.join(settings.allowed_extensions)}",
        )
    if size > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise ValidationError(
            f"File size must be less than {limit_mb}MB",
            cause="file_too_large",
            suggestion="Split the dataset or remove unused columns.",
        )


def _require_file_id(file_id: str) -> str:
    if not file_id or not str(file_id).strip():
        raise ValidationError("Please select a file first", cause="empty_selection")
    return quote(str(file_id), safe="")


class Gateway:
    """Backend client for uploads, file retrieval, AI insights and auth."""

    def __init__(
        self,
        session: SessionManager,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self.session = session
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout or settings.request_timeout)

    # ── Transport ────────────────────────────────────────────────────

    def _auth_headers(self) -> Dict[str, str]:
        token = self.session.valid_token()
        if token is None:
            raise AuthError(
                "No token available",
                cause="missing_token",
                suggestion="Log in again to continue.",
            )
        return {"Authorization": f"Bearer {token}"}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[Dict[str, Any]] = None,
        form: Optional[aiohttp.FormData] = None,
        auth: bool = True,
    ) -> Any:
        headers = self._auth_headers() if auth else {}
        url = f"{self.base_url}/{path.lstrip('/')}"

        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as http:
                async with http.request(
                    method, url, json=payload, data=form, headers=headers
                ) as resp:
                    status = resp.status
                    reason = resp.reason or ""
                    text = await resp.text(errors="replace")
        except asyncio.TimeoutError as exc:
            logger.error("%s %s timed out", method, path)
            raise NetworkError(f"Request to {url} timed out", cause="timeout") from exc
        except aiohttp.ClientError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise NetworkError(str(exc) or DEFAULT_ERROR_MESSAGE, cause="transport") from exc

        logger.info("%s %s -> %d", method, path, status)
        body = self._decode(text)
        server_message = body.get("message") if isinstance(body, dict) else None

        if status == 401:
            if auth:
                self.session.clear_session()
            raise AuthError(server_message or "Invalid or expired token", cause="unauthorized")
        if status >= 400:
            message = server_message or f"Http failure response for {url}: {status} {reason}".strip()
            logger.error("Gateway error: %s", message)
            raise NetworkError(message, status=status, cause="http_error")
        if isinstance(body, dict) and body.get("success") is False:
            message = server_message or DEFAULT_ERROR_MESSAGE
            logger.error("Gateway error: %s", message)
            raise NetworkError(message, status=status, cause="unsuccessful")

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    @staticmethod
    def _decode(text: str) -> Any:
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return None

    @staticmethod
    def _parse(
        model: Type[ModelT],
        data: Any,
        error_cls: Type[InsightBoardError] = NetworkError,
    ) -> ModelT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            logger.error("Malformed %s payload: %s", model.__name__, exc)
            raise error_cls(
                f"Malformed {model.__name__} response from server",
                cause="malformed_payload",
            ) from exc

    # ── Auth ─────────────────────────────────────────────────────────

    async def register(self, name: str, email: str, password: str) -> AuthPayload:
        data = await self._request(
            "POST", "auth/register",
            payload={"name": name, "email": email, "password": password},
            auth=False,
        )
        return self._parse(AuthPayload, data)

    async def login(self, email: str, password: str) -> AuthPayload:
        data = await self._request(
            "POST", "auth/login",
            payload={"email": email, "password": password},
            auth=False,
        )
        return self._parse(AuthPayload, data)

    async def profile(self) -> User:
        data = await self._request("GET", "auth/profile")
        user = data.get("user") if isinstance(data, dict) else None
        return self._parse(User, user)

    async def refresh(self) -> AuthPayload:
        data = await self._request("POST", "auth/refresh", payload={})
        return self._parse(AuthPayload, data)

    # ── Files ────────────────────────────────────────────────────────

    async def upload_file(
        self, content: bytes, filename: str, content_type: Optional[str] = None
    ) -> UploadResult:
        """Upload a CSV or Excel file and return its column metadata."""
        validate_upload(filename, len(content))
        form = aiohttp.FormData()
        form.add_field(
            "file",
            content,
            filename=filename,
            content_type=content_type
            or mimetypes.guess_type(filename)[0]
            or "application/octet-stream",
        )
        data = await self._request("POST", "upload/upload", form=form)
        result = self._parse(UploadResult, data)
        logger.info("Uploaded %s (%d bytes, %d rows)", filename, len(content), result.row_count)
        return result

    async def list_files(self) -> List[UploadedFile]:
        data = await self._request("GET", "upload/files")
        if not isinstance(data, list):
            raise NetworkError("Malformed file listing from server", cause="malformed_payload")
        return [self._parse(UploadedFile, item) for item in data]

    async def get_file_data(self, file_id: str) -> FileData:
        """Fetch a stored file with its full typed table."""
        path = f"upload/files/{_require_file_id(file_id)}"
        data = await self._request("GET", path)
        return self._parse(FileData, data, error_cls=DataError)

    async def delete_file(self, file_id: str) -> bool:
        await self._request("DELETE", f"upload/files/{_require_file_id(file_id)}")
        return True

    # ── AI ───────────────────────────────────────────────────────────

    async def generate_insights(self, file_id: str) -> InsightsResult:
        _require_file_id(file_id)
        data = await self._request("POST", "ai/insights", payload={"fileId": file_id})
        return self._parse(InsightsResult, data)

    async def summary_stats(self, file_id: str) -> SummaryResult:
        """Summary statistics for a file, without AI analysis."""
        _require_file_id(file_id)
        data = await self._request("POST", "ai/summary", payload={"fileId": file_id})
        return self._parse(SummaryResult, data)

    async def chat(self, file_id: str, question: str) -> ChatReply:
        _require_file_id(file_id)
        if not question or not question.strip():
            raise ValidationError("Please enter a question", cause="empty_question")
        data = await self._request(
            "POST", "ai/chat", payload={"fileId": file_id, "question": question.strip()}
        )
        return self._parse(ChatReply, data)
