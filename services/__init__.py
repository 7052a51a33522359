"""
Services module - session state, persistence and backend gateway
"""

from .auth import AuthService
from .gateway import Gateway, validate_upload
from .session import SessionManager, decode_token_expiry
from .storage import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "AuthService",
    "Gateway",
    "validate_upload",
    "SessionManager",
    "decode_token_expiry",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
]
